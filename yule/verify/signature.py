"""Ed25519 signature checks."""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

PUBLIC_KEY_LEN = 32
SIGNATURE_LEN = 64


class VerificationError(Exception):
    """Raised when integrity or signature material is malformed or does not match."""


class SignatureVerifier:
    """Verifies detached signatures over arbitrary messages."""

    def verify_ed25519(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """Return whether ``signature`` is valid; raise on malformed key or signature."""
        public_key = bytes(public_key)
        signature = bytes(signature)
        if len(public_key) != PUBLIC_KEY_LEN:
            raise VerificationError(
                f"invalid public key: expected {PUBLIC_KEY_LEN} bytes, got {len(public_key)}"
            )
        if len(signature) != SIGNATURE_LEN:
            raise VerificationError(
                f"invalid signature: expected {SIGNATURE_LEN} bytes, got {len(signature)}"
            )
        try:
            key = Ed25519PublicKey.from_public_bytes(public_key)
        except ValueError as exc:
            raise VerificationError(f"invalid public key: {exc}") from exc
        try:
            key.verify(signature, bytes(message))
        except InvalidSignature:
            return False
        return True