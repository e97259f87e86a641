"""Device signing key and publisher trust store on disk."""

from __future__ import annotations

import logging
import os
from os import PathLike
from pathlib import Path
from typing import Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from .signature import VerificationError

logger = logging.getLogger(__name__)

KEY_LEN = 32
_DEVICE_KEY = "device.key"
_DEVICE_PUB = "device.pub"
_PUB_SUFFIX = ".pub"


def _private_raw(key: Ed25519PrivateKey) -> bytes:
    return key.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )


def _public_raw(key: Ed25519PublicKey) -> bytes:
    return key.public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)


def default_key_dir() -> Path:
    """The default key directory, ``~/.yule/keys``."""
    home = os.environ.get("HOME")
    if os.name == "nt":
        home = os.environ.get("USERPROFILE") or home
    if not home:
        raise VerificationError("cannot determine home directory")
    return Path(home) / ".yule" / "keys"


class KeyStore:
    """Manages the device signing key and trusted publisher keys."""

    def __init__(self, base_dir: str | PathLike) -> None:
        self.base_dir = Path(base_dir)

    @classmethod
    def open(cls) -> "KeyStore":
        return cls.open_at(default_key_dir())

    @classmethod
    def open_at(cls, path: str | PathLike) -> "KeyStore":
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        return cls(path)

    def device_key(self) -> Ed25519PrivateKey:
        """Load the device key, generating and saving one on first use."""
        key_path = self.base_dir / _DEVICE_KEY
        if key_path.exists():
            return self._load_signing_key(key_path)
        key = self._generate_and_save(key_path)
        logger.info("generated new device signing key")
        return key

    def device_public_key(self) -> Ed25519PublicKey:
        return self.device_key().public_key()

    def trust_publisher(self, name: str, public_key: bytes) -> None:
        public_key = bytes(public_key)
        if len(public_key) != KEY_LEN:
            raise VerificationError(
                f"publisher key '{name}' is {len(public_key)} bytes, expected {KEY_LEN}"
            )
        (self.base_dir / f"{name}{_PUB_SUFFIX}").write_bytes(public_key)
        logger.info("trusted publisher key: %s", name)

    def publisher_key(self, name: str) -> Optional[Ed25519PublicKey]:
        path = self.base_dir / f"{name}{_PUB_SUFFIX}"
        if not path.exists():
            return None
        raw = path.read_bytes()
        if len(raw) != KEY_LEN:
            raise VerificationError(
                f"publisher key '{name}' is {len(raw)} bytes, expected {KEY_LEN}"
            )
        try:
            return Ed25519PublicKey.from_public_bytes(raw)
        except ValueError as exc:
            raise VerificationError(f"invalid publisher key: {exc}") from exc

    def list_publishers(self) -> list[str]:
        names = []
        for entry in self.base_dir.iterdir():
            name = entry.name
            if name.endswith(_PUB_SUFFIX) and name != _DEVICE_PUB:
                while name.endswith(_PUB_SUFFIX):
                    name = name[: -len(_PUB_SUFFIX)]
                names.append(name)
        return sorted(names)

    @staticmethod
    def _generate_and_save(path: Path) -> Ed25519PrivateKey:
        key = Ed25519PrivateKey.from_private_bytes(os.urandom(KEY_LEN))
        path.write_bytes(_private_raw(key))
        path.with_suffix(_PUB_SUFFIX).write_bytes(_public_raw(key.public_key()))
        return key

    @staticmethod
    def _load_signing_key(path: Path) -> Ed25519PrivateKey:
        raw = path.read_bytes()
        if len(raw) != KEY_LEN:
            raise VerificationError(f"device key is {len(raw)} bytes, expected {KEY_LEN}")
        return Ed25519PrivateKey.from_private_bytes(raw)