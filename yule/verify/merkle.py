"""BLAKE3-based Merkle trees over raw tensor data."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, NamedTuple

DEFAULT_LEAF_SIZE = 1024 * 1024
ROOT_SIZE = 32

_MASK = 0xFFFFFFFF
_IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)
_MSG_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)
_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3
_BLOCK_LEN = 64
_CHUNK_LEN = 1024


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def _g(s: list[int], a: int, b: int, c: int, d: int, mx: int, my: int) -> None:
    s[a] = (s[a] + s[b] + mx) & _MASK
    s[d] = _rotr(s[d] ^ s[a], 16)
    s[c] = (s[c] + s[d]) & _MASK
    s[b] = _rotr(s[b] ^ s[c], 12)
    s[a] = (s[a] + s[b] + my) & _MASK
    s[d] = _rotr(s[d] ^ s[a], 8)
    s[c] = (s[c] + s[d]) & _MASK
    s[b] = _rotr(s[b] ^ s[c], 7)


def _round(s: list[int], m: list[int]) -> None:
    _g(s, 0, 4, 8, 12, m[0], m[1])
    _g(s, 1, 5, 9, 13, m[2], m[3])
    _g(s, 2, 6, 10, 14, m[4], m[5])
    _g(s, 3, 7, 11, 15, m[6], m[7])
    _g(s, 0, 5, 10, 15, m[8], m[9])
    _g(s, 1, 6, 11, 12, m[10], m[11])
    _g(s, 2, 7, 8, 13, m[12], m[13])
    _g(s, 3, 4, 9, 14, m[14], m[15])


def _compress(
    cv: tuple[int, ...], words: tuple[int, ...], counter: int, block_len: int, flags: int
) -> list[int]:
    state = [
        *cv,
        *_IV[:4],
        counter & _MASK,
        (counter >> 32) & _MASK,
        block_len,
        flags,
    ]
    message = list(words)
    for round_no in range(7):
        _round(state, message)
        if round_no < 6:
            message = [message[p] for p in _MSG_PERMUTATION]
    for i in range(8):
        state[i] ^= state[i + 8]
        state[i + 8] ^= cv[i]
    return state


def _words(block: bytes) -> tuple[int, ...]:
    return struct.unpack("<16I", block.ljust(_BLOCK_LEN, b"\0"))


class _Output(NamedTuple):
    cv: tuple[int, ...]
    words: tuple[int, ...]
    counter: int
    block_len: int
    flags: int

    def chaining_value(self) -> tuple[int, ...]:
        return tuple(_compress(self.cv, self.words, self.counter, self.block_len, self.flags)[:8])

    def root_bytes(self) -> bytes:
        state = _compress(self.cv, self.words, 0, self.block_len, self.flags | _ROOT)
        return struct.pack("<8I", *state[:8])


def _chunk_output(chunk: bytes, counter: int) -> _Output:
    blocks = [chunk[i : i + _BLOCK_LEN] for i in range(0, len(chunk), _BLOCK_LEN)] or [b""]
    cv: tuple[int, ...] = _IV
    for position, block in enumerate(blocks[:-1]):
        start = _CHUNK_START if position == 0 else 0
        cv = tuple(_compress(cv, _words(block), counter, _BLOCK_LEN, start)[:8])
    last = blocks[-1]
    flags = _CHUNK_END | (_CHUNK_START if len(blocks) == 1 else 0)
    return _Output(cv, _words(last), counter, len(last), flags)


def _parent_output(left: tuple[int, ...], right: tuple[int, ...]) -> _Output:
    return _Output(_IV, left + right, 0, _BLOCK_LEN, _PARENT)


def blake3_digest(data: bytes) -> bytes:
    """Return the 32-byte BLAKE3 hash of ``data``."""
    data = bytes(data)
    chunks = [data[i : i + _CHUNK_LEN] for i in range(0, len(data), _CHUNK_LEN)] or [b""]
    stack: list[tuple[int, ...]] = []
    for index, chunk in enumerate(chunks[:-1]):
        cv = _chunk_output(chunk, index).chaining_value()
        total = index + 1
        while total & 1 == 0:
            cv = _parent_output(stack.pop(), cv).chaining_value()
            total >>= 1
        stack.append(cv)
    output = _chunk_output(chunks[-1], len(chunks) - 1)
    while stack:
        output = _parent_output(stack.pop(), output.chaining_value())
    return output.root_bytes()


@dataclass(frozen=True)
class MerkleRoot:
    """Root hash of a Merkle tree and the number of leaves it covers."""

    hash: bytes
    leaf_count: int

    @property
    def hex(self) -> str:
        return self.hash.hex()


class MerkleTree:
    """Builds binary BLAKE3 Merkle trees over fixed-size leaves."""

    def __init__(self, leaf_size: int = DEFAULT_LEAF_SIZE) -> None:
        if leaf_size <= 0:
            raise ValueError("leaf size must be positive")
        self.leaf_size = leaf_size

    def build(self, data: bytes) -> MerkleRoot:
        data = bytes(data)
        leaves = [
            blake3_digest(data[start : start + self.leaf_size])
            for start in range(0, len(data), self.leaf_size)
        ]
        return MerkleRoot(hash=self._compute_root(leaves), leaf_count=len(leaves))

    def verify(self, data: bytes, expected_root: bytes) -> bool:
        return self.build(data).hash == bytes(expected_root)

    def verify_streaming(self, reader: BinaryIO, expected_root: bytes) -> bool:
        """Verify data read leaf by leaf from ``reader`` without buffering all of it."""
        leaves = []
        while leaf := self._read_leaf(reader):
            leaves.append(blake3_digest(leaf))
        return self._compute_root(leaves) == bytes(expected_root)

    def _read_leaf(self, reader: BinaryIO) -> bytes:
        parts = []
        remaining = self.leaf_size
        while remaining:
            piece = reader.read(remaining)
            if not piece:
                break
            parts.append(piece)
            remaining -= len(piece)
        return b"".join(parts)

    @staticmethod
    def _compute_root(leaves: list[bytes]) -> bytes:
        if not leaves:
            return bytes(ROOT_SIZE)
        level = leaves
        while len(level) > 1:
            level = [
                blake3_digest(level[i] + level[i + 1]) if i + 1 < len(level) else level[i]
                for i in range(0, len(level), 2)
            ]
        return level[0]