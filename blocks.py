"""Split a padded SHA-256 message into 512-bit blocks of 32-bit words."""

from __future__ import annotations

from typing import Iterator, List, Tuple

from padding import BLOCK_BYTES


WORDS_PER_BLOCK = 16

Block = Tuple[int, ...]


def _chunks(data: bytes, size: int) -> Iterator[bytes]:
    """Yield successive `size`-byte chunks from `data`."""
    for i in range(0, len(data), size):
        yield data[i : i + size]


def _bytes_to_words(chunk: bytes) -> Block:
    """Convert a 64-byte chunk into 16 big-endian 32-bit words."""
    return tuple(
        int.from_bytes(chunk[4 * j : 4 * (j + 1)], byteorder="big")
        for j in range(WORDS_PER_BLOCK)
    )


def iter_blocks(padded: bytes) -> Iterator[Block]:
    """Yield the blocks of `padded` in order.

    The buffer must already be padded so that its length is a multiple of
    64 bytes.
    """
    if len(padded) % BLOCK_BYTES != 0:
        raise ValueError(
            f"Padded message length must be a multiple of {BLOCK_BYTES} bytes, "
            f"got {len(padded)}"
        )
    for chunk in _chunks(padded, BLOCK_BYTES):
        yield _bytes_to_words(chunk)


def parse_blocks(padded: bytes) -> List[Block]:
    """Parse a padded message into a list of 16-word blocks.

    Word `j` of block `i` is the big-endian value of the 4 bytes at offset
    `i*64 + j*4`.
    """
    return list(iter_blocks(padded))
