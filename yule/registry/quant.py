"""Selection of GGUF files by quantization label."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional

from .hf_api import HfFileEntry

QUANT_PREFERENCE = (
    "Q4_K_M",
    "Q4_K_S",
    "Q5_K_M",
    "Q5_K_S",
    "Q4_0",
    "Q6_K",
    "Q8_0",
    "Q3_K_M",
    "Q3_K_S",
    "Q2_K",
    "IQ4_XS",
    "IQ4_NL",
)

_FLOAT_TAGS = ("F16", "F32", "BF16")


def filter_gguf_files(files: Iterable[HfFileEntry]) -> list[HfFileEntry]:
    """Keep only plain files whose name ends in ``.gguf``."""
    return [f for f in files if f.entry_type == "file" and f.path.endswith(".gguf")]


def extract_quant_label(filename: str) -> Optional[str]:
    """Return the quantization label at the end of a GGUF filename, if any."""
    if not filename.endswith(".gguf"):
        return None
    stem = filename[: -len(".gguf")].upper()
    for tag in (*QUANT_PREFERENCE, *_FLOAT_TAGS):
        if stem.endswith(tag):
            return tag
    return None


def select_gguf_file(
    gguf_files: Sequence[HfFileEntry], requested_quant: Optional[str] = None
) -> Optional[HfFileEntry]:
    """Pick the requested quantization, else the most preferred one, else the first file."""
    if not gguf_files:
        return None

    labelled = [(extract_quant_label(f.path), f) for f in gguf_files]

    if requested_quant is not None:
        wanted = requested_quant.upper()
        for label, f in labelled:
            if label is not None and label.upper() == wanted:
                return f

    for pref in QUANT_PREFERENCE:
        for label, f in labelled:
            if label == pref:
                return f

    return gguf_files[0]