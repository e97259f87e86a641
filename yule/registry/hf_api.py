"""Minimal asynchronous client for the model hub file API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

import httpx

HF_BASE = "https://huggingface.co"
USER_AGENT = "yule/0.1.0"


class RegistryError(Exception):
    """Raised when listing, downloading or caching a model fails."""


@dataclass(frozen=True)
class HfFileEntry:
    """One entry of a repository file listing."""

    path: str
    size: int
    entry_type: str

    @classmethod
    def from_dict(cls, data: Any) -> "HfFileEntry":
        if not isinstance(data, Mapping):
            raise RegistryError("file entry must be an object")
        try:
            path, size, entry_type = data["path"], data["size"], data["type"]
        except KeyError as exc:
            raise RegistryError(f"file entry is missing `{exc.args[0]}`") from exc
        if not isinstance(path, str) or not isinstance(entry_type, str):
            raise RegistryError("file entry `path` and `type` must be strings")
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise RegistryError("file entry `size` must be an unsigned integer")
        return cls(path=path, size=size, entry_type=entry_type)


def _valid_header_value(value: str) -> bool:
    return all(ch == "\t" or " " <= ch <= "~" for ch in value)


def _total_size(headers: httpx.Headers) -> Optional[int]:
    content_range = headers.get("content-range")
    raw = content_range.rsplit("/", 1)[-1] if content_range is not None else headers.get("content-length")
    if raw is None:
        return None
    try:
        total = int(raw.strip())
    except ValueError:
        return None
    return total if total >= 0 else None


class HfApiClient:
    """Lists repository files and starts (resumable) downloads."""

    def __init__(self, token: Optional[str] = None) -> None:
        headers = {"User-Agent": USER_AGENT}
        if token is not None:
            value = f"Bearer {token}"
            if not _valid_header_value(value):
                raise RegistryError("invalid HF token")
            headers["Authorization"] = value
        self._client = httpx.AsyncClient(headers=headers, follow_redirects=True, timeout=None)

    async def __aenter__(self) -> "HfApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_repo_files(self, owner: str, repo: str) -> list[HfFileEntry]:
        """List the files at the root of a repository's main branch."""
        url = f"{HF_BASE}/api/models/{owner}/{repo}/tree/main"
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise RegistryError("failed to reach HuggingFace API") from exc

        if not resp.is_success:
            raise RegistryError(
                f"HuggingFace API returned {resp.status_code} {resp.reason_phrase}: {resp.text}"
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise RegistryError("failed to parse HuggingFace file listing") from exc
        if not isinstance(payload, list):
            raise RegistryError("failed to parse HuggingFace file listing")
        return [HfFileEntry.from_dict(item) for item in payload]

    @staticmethod
    def download_url(owner: str, repo: str, filename: str) -> str:
        return f"{HF_BASE}/{owner}/{repo}/resolve/main/{filename}"

    async def start_download(
        self, url: str, resume_from: Optional[int] = None
    ) -> tuple[httpx.Response, Optional[int]]:
        """Open a streaming download, optionally resuming at a byte offset.

        Returns the open response, which the caller must close, and the total
        file size taken from Content-Range or Content-Length when known.
        """
        headers = {"Range": f"bytes={resume_from}-"} if resume_from is not None else {}
        request = self._client.build_request("GET", url, headers=headers)
        try:
            resp = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise RegistryError("download request failed") from exc

        if not resp.is_success:
            await resp.aclose()
            raise RegistryError(
                f"download failed with status {resp.status_code} {resp.reason_phrase}"
            )

        return resp, _total_size(resp.headers)