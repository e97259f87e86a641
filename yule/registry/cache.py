"""On-disk model cache laid out as ``{base}/{publisher}/{repo}/{filename}``."""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from os import PathLike
from pathlib import Path
from typing import Any, Optional

from .hf_api import RegistryError

METADATA_FILE = "cache.json"


def _str_field(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"`{key}` must be a string")
    return value


@dataclass
class CacheEntry:
    """Metadata recorded next to a cached model file."""

    publisher: str
    repo: str
    filename: str
    size_bytes: int
    merkle_root: Optional[str]
    download_url: str
    downloaded_at: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "CacheEntry":
        """Build an entry from parsed JSON; raise ValueError or KeyError when malformed."""
        if not isinstance(data, dict):
            raise ValueError("cache metadata must be an object")
        size = data["size_bytes"]
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ValueError("`size_bytes` must be an unsigned integer")
        merkle = data.get("merkle_root")
        if merkle is not None and not isinstance(merkle, str):
            raise ValueError("`merkle_root` must be a string")
        return cls(
            publisher=_str_field(data, "publisher"),
            repo=_str_field(data, "repo"),
            filename=_str_field(data, "filename"),
            size_bytes=size,
            merkle_root=merkle,
            download_url=_str_field(data, "download_url"),
            downloaded_at=_str_field(data, "downloaded_at"),
        )


class ModelCache:
    """Stores downloaded models and their metadata sidecars."""

    def __init__(self, base_dir: str | PathLike) -> None:
        self.base_dir = Path(base_dir)

    def _repo_dir(self, publisher: str, repo: str) -> Path:
        return self.base_dir / publisher / repo

    def get(self, publisher: str, repo: str, filename: str) -> Optional[Path]:
        """Path of a cached file, or None if it is not there."""
        path = self.model_path(publisher, repo, filename)
        return path if path.exists() else None

    def find_any(self, publisher: str, repo: str) -> Optional[Path]:
        """Any cached GGUF file of a repository."""
        directory = self._repo_dir(publisher, repo)
        if not directory.is_dir():
            return None
        try:
            entries = sorted(directory.iterdir())
        except OSError:
            return None
        return next((p for p in entries if p.suffix == ".gguf"), None)

    def model_path(self, publisher: str, repo: str, filename: str) -> Path:
        return self._repo_dir(publisher, repo) / filename

    def ensure_dir(self, publisher: str, repo: str) -> None:
        directory = self._repo_dir(publisher, repo)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RegistryError(f"failed to create cache dir: {directory}") from exc

    def write_metadata(self, publisher: str, repo: str, entry: CacheEntry) -> None:
        meta_path = self._repo_dir(publisher, repo) / METADATA_FILE
        try:
            meta_path.write_text(json.dumps(entry.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise RegistryError(f"failed to write {meta_path}") from exc

    def list_all(self) -> list[CacheEntry]:
        """All readable metadata sidecars below the cache directory."""
        if not self.base_dir.exists():
            return []
        return list(self._walk(self.base_dir))

    @classmethod
    def _walk(cls, directory: Path) -> Iterator[CacheEntry]:
        try:
            children = sorted(directory.iterdir())
        except OSError as exc:
            raise RegistryError(f"failed to read {directory}") from exc
        for path in children:
            if path.is_dir():
                yield from cls._walk(path)
            elif path.name == METADATA_FILE:
                try:
                    content = path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    raise RegistryError(f"failed to read {path}") from exc
                try:
                    yield CacheEntry.from_dict(json.loads(content))
                except (ValueError, KeyError):
                    continue

    def evict(self, publisher: str, repo: str, filename: str) -> None:
        """Delete a cached file and its repository's metadata sidecar."""
        path = self.model_path(publisher, repo, filename)
        if path.exists():
            try:
                path.unlink()
            except OSError as exc:
                raise RegistryError(f"failed to delete {path}") from exc
        meta_path = self._repo_dir(publisher, repo) / METADATA_FILE
        if meta_path.exists():
            try:
                meta_path.unlink()
            except OSError:
                pass