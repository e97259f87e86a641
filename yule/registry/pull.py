"""Resumable model downloads with progress reporting on stderr."""

from __future__ import annotations

import os
import sys
import time
from os import PathLike
from pathlib import Path

import httpx

from .hf_api import HfApiClient, RegistryError

_KB = 1024
_MB = 1024 * 1024
_GB = 1024 * 1024 * 1024
_REPORT_INTERVAL = 0.5


def format_bytes(n: int) -> str:
    """Human-readable byte count in binary units."""
    if n >= _GB:
        return f"{n / _GB:.2f} GB"
    if n >= _MB:
        return f"{n / _MB:.1f} MB"
    if n >= _KB:
        return f"{n / _KB:.1f} KB"
    return f"{n} B"


def format_duration(secs: float) -> str:
    """Compact duration such as ``1h5m``, ``3m20s`` or ``42s``."""
    if secs >= 3600.0:
        return f"{int(secs / 3600.0)}h{int((secs % 3600.0) / 60.0)}m"
    if secs >= 60.0:
        return f"{int(secs / 60.0)}m{int(secs % 60.0)}s"
    return f"{secs:.0f}s"


def _part_path(dest: Path) -> Path:
    ext = dest.suffix[1:]
    return dest.with_name(f"{dest.stem}.{ext}.part")


def _progress_line(downloaded: int, total: int | None, speed: float) -> str:
    if total is None:
        return f"\r  {format_bytes(downloaded)} [{format_bytes(int(speed))}/s]    "
    pct = min(downloaded / total * 100.0, 100.0) if total else 100.0
    eta = format_duration(max(total - downloaded, 0) / speed) if speed > 0 else "??"
    return (
        f"\r  {format_bytes(downloaded)} / {format_bytes(total)} ({pct:.1f}%) "
        f"[{format_bytes(int(speed))}/s] ETA {eta}    "
    )


class ModelPuller:
    """Downloads files through an :class:`HfApiClient`, resuming partial downloads."""

    def __init__(self, client: HfApiClient) -> None:
        self.client = client

    async def download(self, url: str, dest: str | PathLike) -> Path:
        """Download ``url`` to ``dest`` via a ``.part`` file and return ``dest``."""
        dest = Path(dest)
        part_path = _part_path(dest)

        resume_from = None
        if part_path.exists():
            size = part_path.stat().st_size
            if size > 0:
                print(f"resuming download from {format_bytes(size)}", file=sys.stderr)
                resume_from = size

        dest.parent.mkdir(parents=True, exist_ok=True)

        try:
            resp, total_size = await self.client.start_download(url, resume_from)
        except RegistryError as exc:
            raise RegistryError("failed to start download") from exc

        start_bytes = resume_from or 0
        downloaded = start_bytes
        start = time.monotonic()
        last_report = start
        last_bytes = downloaded

        try:
            with part_path.open("ab") as out:
                try:
                    async for chunk in resp.aiter_bytes():
                        out.write(chunk)
                        downloaded += len(chunk)

                        now = time.monotonic()
                        if now - last_report >= _REPORT_INTERVAL:
                            speed = (downloaded - last_bytes) / (now - last_report)
                            last_bytes = downloaded
                            last_report = now
                            sys.stderr.write(_progress_line(downloaded, total_size, speed))
                            sys.stderr.flush()
                except httpx.HTTPError as exc:
                    raise RegistryError("error reading download stream") from exc
        finally:
            await resp.aclose()

        elapsed = time.monotonic() - start
        avg_speed = (downloaded - start_bytes) / elapsed if elapsed > 0 else 0.0
        print(
            f"\r  {format_bytes(downloaded)} downloaded in {format_duration(elapsed)} "
            f"({format_bytes(int(avg_speed))}/s)          ",
            file=sys.stderr,
        )

        os.replace(part_path, dest)
        return dest