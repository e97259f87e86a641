"""Sandbox configuration and declarative sandbox policies."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any, Optional

DEFAULT_MAX_MEMORY_BYTES = 32 * 1024 * 1024 * 1024


class SandboxError(Exception):
    """Raised when a sandbox cannot be configured or applied."""


def _obj(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise SandboxError(f"expected object for `{what}`")
    return value


def _key(obj: dict, key: str) -> Any:
    if key not in obj:
        raise SandboxError(f"missing field `{key}`")
    return obj[key]


def _bool(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise SandboxError(f"expected boolean for `{what}`")
    return value


def _uint(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SandboxError(f"expected unsigned integer for `{what}`")
    return value


def _list(value: Any, what: str) -> list:
    if not isinstance(value, list):
        raise SandboxError(f"expected array for `{what}`")
    return value


@dataclass
class SandboxConfig:
    """What a sandboxed inference process may touch."""

    model_path: Path
    allow_gpu: bool
    max_memory_bytes: int
    allow_network: bool

    def __post_init__(self) -> None:
        self.model_path = Path(self.model_path)


@dataclass
class FilesystemPolicy:
    read_only_paths: list[Path] = field(default_factory=list)
    deny_all_other: bool = True

    def to_dict(self) -> dict:
        return {
            "read_only_paths": [str(p) for p in self.read_only_paths],
            "deny_all_other": self.deny_all_other,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "FilesystemPolicy":
        obj = _obj(data, "filesystem")
        paths = _list(_key(obj, "read_only_paths"), "read_only_paths")
        if not all(isinstance(p, str) for p in paths):
            raise SandboxError("expected string paths in `read_only_paths`")
        return cls(
            read_only_paths=[Path(p) for p in paths],
            deny_all_other=_bool(_key(obj, "deny_all_other"), "deny_all_other"),
        )


@dataclass
class NetworkPolicy:
    allow: bool = False

    def to_dict(self) -> dict:
        return {"allow": self.allow}

    @classmethod
    def from_dict(cls, data: Any) -> "NetworkPolicy":
        return cls(allow=_bool(_key(_obj(data, "network"), "allow"), "allow"))


@dataclass
class GpuPolicy:
    allow: bool = True
    allowed_ioctls: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"allow": self.allow, "allowed_ioctls": list(self.allowed_ioctls)}

    @classmethod
    def from_dict(cls, data: Any) -> "GpuPolicy":
        obj = _obj(data, "gpu")
        ioctls = _list(_key(obj, "allowed_ioctls"), "allowed_ioctls")
        return cls(
            allow=_bool(_key(obj, "allow"), "allow"),
            allowed_ioctls=[_uint(v, "allowed_ioctls") for v in ioctls],
        )


@dataclass
class ResourceLimits:
    max_memory_bytes: int = DEFAULT_MAX_MEMORY_BYTES
    max_cpu_percent: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "max_memory_bytes": self.max_memory_bytes,
            "max_cpu_percent": self.max_cpu_percent,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ResourceLimits":
        obj = _obj(data, "resources")
        cpu = obj.get("max_cpu_percent")
        return cls(
            max_memory_bytes=_uint(_key(obj, "max_memory_bytes"), "max_memory_bytes"),
            max_cpu_percent=None if cpu is None else _uint(cpu, "max_cpu_percent"),
        )


@dataclass
class SandboxPolicy:
    """Filesystem, network, GPU and resource rules for a sandbox."""

    filesystem: FilesystemPolicy
    network: NetworkPolicy
    gpu: GpuPolicy
    resources: ResourceLimits

    @classmethod
    def inference_default(cls, model_path: str | PathLike) -> "SandboxPolicy":
        """Read-only model access, no network, GPU allowed, 32 GB memory."""
        return cls(
            filesystem=FilesystemPolicy(read_only_paths=[Path(model_path)], deny_all_other=True),
            network=NetworkPolicy(allow=False),
            gpu=GpuPolicy(allow=True, allowed_ioctls=[]),
            resources=ResourceLimits(
                max_memory_bytes=DEFAULT_MAX_MEMORY_BYTES, max_cpu_percent=None
            ),
        )

    def to_json(self) -> str:
        return json.dumps(
            {
                "filesystem": self.filesystem.to_dict(),
                "network": self.network.to_dict(),
                "gpu": self.gpu.to_dict(),
                "resources": self.resources.to_dict(),
            }
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> "SandboxPolicy":
        try:
            data = json.loads(text)
        except (ValueError, UnicodeDecodeError) as exc:
            raise SandboxError(f"invalid sandbox policy: {exc}") from exc
        obj = _obj(data, "policy")
        return cls(
            filesystem=FilesystemPolicy.from_dict(_key(obj, "filesystem")),
            network=NetworkPolicy.from_dict(_key(obj, "network")),
            gpu=GpuPolicy.from_dict(_key(obj, "gpu")),
            resources=ResourceLimits.from_dict(_key(obj, "resources")),
        )