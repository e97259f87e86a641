"""Parsing of model references: local paths or publisher/repo[:quant] names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class LocalFile:
    """A model reference that names a file on the local filesystem."""

    path: str


@dataclass(frozen=True)
class RemoteModel:
    """A model reference that names a remote repository, optionally with a quantization."""

    publisher: str
    name: str
    quantization: Optional[str] = None


ParsedModelRef = Union[LocalFile, RemoteModel]


def _looks_local(model_ref: str) -> bool:
    return (
        model_ref.startswith("/")
        or model_ref.startswith(".")
        or "\\" in model_ref
        or model_ref.encode("utf-8")[1:2] == b":"
        or model_ref.endswith(".gguf")
    )


def parse_model_ref(model_ref: str) -> ParsedModelRef:
    """Parse ``publisher/repo``, ``publisher/repo:quant`` or a local path."""
    if _looks_local(model_ref):
        return LocalFile(model_ref)

    publisher, sep, rest = model_ref.partition("/")
    if sep:
        name, colon, quant = rest.partition(":")
        return RemoteModel(publisher, name, quant if colon else None)

    return RemoteModel("", model_ref, None)