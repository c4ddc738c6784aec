import pytest

from padding import (
    MAX_MESSAGE_BYTES,
    InputTooLarge,
    pad_message,
    padded_length,
    plan_padding,
)


LENGTHS = [0, 1, 3, 54, 55, 56, 57, 63, 64, 65, 119, 120, 121, 127, 128, 1000]


@pytest.mark.parametrize(
    "length,expected_total,expected_zero_bits",
    [
        (0, 64, 447),
        (3, 64, 423),
        # Marker and length field are adjacent: 55 + 1 + 8 == 64.
        (55, 64, 7),
        # One byte more and the length field no longer fits the block.
        (56, 128, 511),
        (63, 128, 455),
        (64, 128, 447),
        (119, 128, 7),
        (120, 192, 511),
    ],
)
def test_plan_padding_block_boundaries(length, expected_total, expected_zero_bits):
    assert plan_padding(length) == (expected_total, expected_zero_bits)
    assert padded_length(length) == expected_total


@pytest.mark.parametrize("length", LENGTHS)
def test_plan_padding_total_is_whole_blocks(length):
    total, zero_bits = plan_padding(length)

    assert total % 64 == 0
    assert (length * 8 + 1 + zero_bits) % 512 == 448
    assert 0 <= zero_bits < 512


def test_plan_padding_accepts_largest_length():
    total, _ = plan_padding(MAX_MESSAGE_BYTES)
    assert total % 64 == 0
    # The bit length still fits the 64-bit length field.
    assert MAX_MESSAGE_BYTES * 8 < 2**64


@pytest.mark.parametrize("length", [2**61, 2**61 + 1, 2**64, 2**70])
def test_plan_padding_rejects_oversized_length(length):
    with pytest.raises(InputTooLarge) as excinfo:
        plan_padding(length)
    assert excinfo.value.length == length


def test_input_too_large_is_a_value_error():
    with pytest.raises(ValueError):
        plan_padding(2**61)


def test_plan_padding_rejects_negative_length():
    with pytest.raises(ValueError):
        plan_padding(-1)


@pytest.mark.parametrize("length", LENGTHS)
def test_pad_message_layout(length):
    message = bytes((i * 7 + 1) & 0xFF for i in range(length))
    padded = pad_message(message)

    assert len(padded) % 64 == 0
    assert padded[:length] == message
    assert padded[length] == 0x80
    assert all(byte == 0 for byte in padded[length + 1 : -8])
    assert int.from_bytes(padded[-8:], byteorder="big") == length * 8


def test_pad_message_marker_adjacent_to_length_field():
    padded = pad_message(b"x" * 55)

    assert len(padded) == 64
    assert padded[55] == 0x80
    assert padded[56:] == (55 * 8).to_bytes(8, byteorder="big")


def test_pad_message_spills_into_second_block():
    padded = pad_message(b"x" * 56)

    assert len(padded) == 128
    assert padded[56] == 0x80
    assert padded[57:120] == bytes(63)
    assert padded[120:] == (56 * 8).to_bytes(8, byteorder="big")


def test_pad_message_empty():
    padded = pad_message(b"")

    assert padded == b"\x80" + bytes(63)


def test_pad_message_abc():
    padded = pad_message(b"abc")

    assert padded[:4] == b"abc\x80"
    assert padded[-1] == 0x18


@pytest.mark.parametrize("wrap", [bytearray, memoryview])
def test_pad_message_accepts_bytes_like(wrap):
    assert pad_message(wrap(b"hello")) == pad_message(b"hello")


def test_pad_message_does_not_modify_input():
    message = bytearray(b"immutable")
    pad_message(message)
    assert message == bytearray(b"immutable")
