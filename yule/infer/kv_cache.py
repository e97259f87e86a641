"""Key/value cache bookkeeping for attention layers."""

from __future__ import annotations

from dataclasses import dataclass, field

_F16_BYTES = 2


@dataclass
class KvCache:
    """Fixed-size KV cache covering every layer up to ``max_seq_len`` tokens."""

    num_layers: int
    num_kv_heads: int
    head_dim: int
    max_seq_len: int
    current_len: int = field(init=False, default=0)
    _key_buffers: list = field(init=False, default_factory=list, repr=False)
    _value_buffers: list = field(init=False, default_factory=list, repr=False)

    def size_bytes(self) -> int:
        """Bytes needed to hold keys and values in f16 for all layers."""
        per_layer = 2 * self.num_kv_heads * self.head_dim * self.max_seq_len * _F16_BYTES
        return per_layer * self.num_layers

    def remaining_tokens(self) -> int:
        return max(self.max_seq_len - self.current_len, 0)

    def clear(self) -> None:
        self.current_len = 0


@dataclass
class PagedKvCache:
    """KV cache split into fixed-size pages per layer, for long contexts."""

    page_size: int
    num_layers: int
    num_kv_heads: int
    head_dim: int
    page_table: list[list] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.page_table = [[] for _ in range(self.num_layers)]