"""SHA-256 message padding.

Two steps live here:

- `plan_padding` works out, from the message length alone, how many zero
  bits follow the mandatory '1' bit and how long the padded message is.
- `pad_message` builds the padded buffer:

      message || 0x80 || 0x00 ... 0x00 || bitlen (64-bit big-endian)

The padded length is always a multiple of 64 bytes (512 bits).
"""

from __future__ import annotations

from typing import Tuple


BLOCK_BYTES = 64
LENGTH_FIELD_BYTES = 8

# Largest byte length whose bit length still fits the 64-bit length field.
MAX_MESSAGE_BYTES = 2**61 - 1


class InputTooLarge(ValueError):
    """The message bit length does not fit the 64-bit length field."""

    def __init__(self, length: int) -> None:
        super().__init__(
            f"Message of {length} bytes exceeds the SHA-256 limit of "
            f"{MAX_MESSAGE_BYTES} bytes"
        )
        self.length = length


def plan_padding(length: int) -> Tuple[int, int]:
    """Plan the padding for a message of `length` bytes.

    Parameters
    ----------
    length : int
        Message length in bytes.

    Returns
    -------
    (padded_length, zero_bits) : tuple[int, int]
        Total padded length in bytes and the number of zero bits written
        between the '1' bit and the length field.

    Raises
    ------
    InputTooLarge
        If `length * 8` would not fit in 64 bits.
    """
    if length < 0:
        raise ValueError(f"Message length must be non-negative, got {length}")
    # Bound the byte count before multiplying so the check stays exact.
    if length > MAX_MESSAGE_BYTES:
        raise InputTooLarge(length)

    bitlen = length * 8
    zero_bits = (448 - (bitlen % 512 + 1)) % 512
    padded_length = (bitlen + 1 + zero_bits + 64) // 8
    return padded_length, zero_bits


def padded_length(length: int) -> int:
    """Return the padded length in bytes for a message of `length` bytes."""
    return plan_padding(length)[0]


def pad_message(message: bytes) -> bytes:
    """Pad `message` according to FIPS 180-4 section 5.1.1."""
    length = len(message)
    total, zero_bits = plan_padding(length)

    padded = bytearray(total)
    padded[:length] = message
    padded[length] = 0x80

    # bytearray(total) is zero-filled, so the (zero_bits - 7) // 8 bytes
    # between the marker and the length field need no explicit write.
    padded[-LENGTH_FIELD_BYTES:] = (length * 8).to_bytes(
        LENGTH_FIELD_BYTES, byteorder="big"
    )
    return bytes(padded)
