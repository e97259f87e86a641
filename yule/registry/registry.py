"""Model registry: resolve references, look up and list cached models."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from os import PathLike
from pathlib import Path
from typing import Optional

from .cache import ModelCache
from .hf_api import HfApiClient, RegistryError
from .pull import ModelPuller
from .resolve import LocalFile, parse_model_ref


@dataclass(frozen=True)
class PulledModel:
    """A model that was pulled and cached."""

    path: Path
    publisher: str
    repo: str
    filename: str
    size_bytes: int
    merkle_root: str


@dataclass(frozen=True)
class CachedModel:
    """Summary of a cached model for display."""

    publisher: str
    repo: str
    filename: str
    size_bytes: int
    merkle_root: Optional[str]


def timestamp_now() -> str:
    """Current UTC time as an ISO-8601 string such as ``2024-01-31T12:00:00Z``."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _data_dir() -> Path:
    if os.name == "nt":
        return Path(os.environ.get("APPDATA", "")) / "yule"
    return Path(os.environ.get("HOME", "")) / ".yule"


class Registry:
    """Ties together the model cache and the hub clients."""

    def __init__(self, cache_dir: str | PathLike, hf_token: Optional[str] = None) -> None:
        try:
            self.hf_client = HfApiClient(hf_token)
        except RegistryError as exc:
            raise RegistryError("failed to create HuggingFace client") from exc
        try:
            puller_client = HfApiClient(hf_token)
        except RegistryError as exc:
            raise RegistryError("failed to create download client") from exc
        self.cache = ModelCache(cache_dir)
        self.puller = ModelPuller(puller_client)

    async def aclose(self) -> None:
        await self.hf_client.aclose()
        await self.puller.client.aclose()

    @staticmethod
    def default_cache_dir() -> Path:
        return _data_dir() / "models"

    def resolve_local(self, model_ref: str) -> Optional[Path]:
        """Find a model on disk without downloading anything."""
        parsed = parse_model_ref(model_ref)
        if isinstance(parsed, LocalFile):
            path = Path(parsed.path)
            return path if path.exists() else None
        return self.cache.find_any(parsed.publisher, parsed.name)

    def list_cached(self) -> list[CachedModel]:
        return [
            CachedModel(
                publisher=e.publisher,
                repo=e.repo,
                filename=e.filename,
                size_bytes=e.size_bytes,
                merkle_root=e.merkle_root,
            )
            for e in self.cache.list_all()
        ]