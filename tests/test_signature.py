import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from yule.verify.signature import SignatureVerifier, VerificationError


def _public_raw(private_key):
    return private_key.public_key().public_bytes(
        serialization.Encoding.Raw, serialization.PublicFormat.Raw
    )


@pytest.fixture
def signing_key():
    return Ed25519PrivateKey.generate()


def test_valid_signature(signing_key):
    message = b"model manifest"
    sig = signing_key.sign(message)
    assert SignatureVerifier().verify_ed25519(_public_raw(signing_key), message, sig) is True


def test_wrong_message_rejected(signing_key):
    sig = signing_key.sign(b"original")
    assert SignatureVerifier().verify_ed25519(_public_raw(signing_key), b"changed", sig) is False


def test_wrong_key_rejected(signing_key):
    other = Ed25519PrivateKey.generate()
    sig = signing_key.sign(b"payload")
    assert SignatureVerifier().verify_ed25519(_public_raw(other), b"payload", sig) is False


def test_corrupted_signature_rejected(signing_key):
    sig = bytearray(signing_key.sign(b"payload"))
    sig[0] ^= 0x01
    assert (
        SignatureVerifier().verify_ed25519(_public_raw(signing_key), b"payload", bytes(sig))
        is False
    )


def test_short_public_key_raises(signing_key):
    sig = signing_key.sign(b"payload")
    with pytest.raises(VerificationError):
        SignatureVerifier().verify_ed25519(bytes(31), b"payload", sig)


def test_short_signature_raises(signing_key):
    with pytest.raises(VerificationError):
        SignatureVerifier().verify_ed25519(_public_raw(signing_key), b"payload", bytes(10))