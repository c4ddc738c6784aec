"""SHA-256 compression function.

For each 512-bit block the compressor

1. expands the block's 16 words into the 64-word message schedule

       w[t] = s1(w[t-2]) + w[t-7] + s0(w[t-15]) + w[t-16]

2. runs 64 rounds over the working state `(a, b, c, d, e, f, g, h)`:

       T1 = h + S1(e) + ch(e, f, g) + k[t] + w[t]
       T2 = S0(a) + maj(a, b, c)

       h, g, f, e, d, c, b, a = g, f, e, d + T1, c, b, a, T1 + T2

3. adds the working state back into the running hash state.

All additions are modulo 2**32. Word width is fixed at 32 bits throughout.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple


MASK32 = 0xFFFFFFFF
WORD_BITS = 32
ROUNDS = 64
DIGEST_SIZE = 32

State = Tuple[int, int, int, int, int, int, int, int]

# Initial hash value: first 32 bits of the fractional parts of the square
# roots of the first 8 primes 2..19 (FIPS 180-4, 5.3.3).
H0: State = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

# Round constants k[0..63]: first 32 bits of the fractional parts of the cube
# roots of the first 64 primes (FIPS 180-4, 4.2.2).
K_VALUES: Tuple[int, ...] = (
    0x428A2F98,
    0x71374491,
    0xB5C0FBCF,
    0xE9B5DBA5,
    0x3956C25B,
    0x59F111F1,
    0x923F82A4,
    0xAB1C5ED5,
    0xD807AA98,
    0x12835B01,
    0x243185BE,
    0x550C7DC3,
    0x72BE5D74,
    0x80DEB1FE,
    0x9BDC06A7,
    0xC19BF174,
    0xE49B69C1,
    0xEFBE4786,
    0x0FC19DC6,
    0x240CA1CC,
    0x2DE92C6F,
    0x4A7484AA,
    0x5CB0A9DC,
    0x76F988DA,
    0x983E5152,
    0xA831C66D,
    0xB00327C8,
    0xBF597FC7,
    0xC6E00BF3,
    0xD5A79147,
    0x06CA6351,
    0x14292967,
    0x27B70A85,
    0x2E1B2138,
    0x4D2C6DFC,
    0x53380D13,
    0x650A7354,
    0x766A0ABB,
    0x81C2C92E,
    0x92722C85,
    0xA2BFE8A1,
    0xA81A664B,
    0xC24B8B70,
    0xC76C51A3,
    0xD192E819,
    0xD6990624,
    0xF40E3585,
    0x106AA070,
    0x19A4C116,
    0x1E376C08,
    0x2748774C,
    0x34B0BCB5,
    0x391C0CB3,
    0x4ED8AA4A,
    0x5B9CCA4F,
    0x682E6FF3,
    0x748F82EE,
    0x78A5636F,
    0x84C87814,
    0x8CC70208,
    0x90BEFFFA,
    0xA4506CEB,
    0xBEF9A3F7,
    0xC67178F2,
)


def _rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x >> n) | (x << (WORD_BITS - n))) & MASK32


def _shr(x: int, n: int) -> int:
    """Right-shift a 32-bit word `x` by `n` bits."""
    return (x & MASK32) >> n


def _small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return _rotr(x, 7) ^ _rotr(x, 18) ^ _shr(x, 3)


def _small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return _rotr(x, 17) ^ _rotr(x, 19) ^ _shr(x, 10)


def _big_sigma0(x: int) -> int:
    """SHA-256 function Σ0 applied to `a` in each round."""
    return _rotr(x, 2) ^ _rotr(x, 13) ^ _rotr(x, 22)


def _big_sigma1(x: int) -> int:
    """SHA-256 function Σ1 applied to `e` in each round."""
    return _rotr(x, 6) ^ _rotr(x, 11) ^ _rotr(x, 25)


def _ch(x: int, y: int, z: int) -> int:
    """Choose: bits of `y` where `x` is set, bits of `z` elsewhere."""
    return ((x & y) ^ (~x & z)) & MASK32


def _maj(x: int, y: int, z: int) -> int:
    """Majority vote of each bit position."""
    return (x & y) ^ (x & z) ^ (y & z)


def build_message_schedule(words: Sequence[int]) -> List[int]:
    """Expand a block's 16 words into the 64-word message schedule w[0..63]."""
    if len(words) != 16:
        raise ValueError(f"Expected 16 block words, got {len(words)}")

    w: List[int] = [word & MASK32 for word in words] + [0] * (ROUNDS - 16)
    for t in range(16, ROUNDS):
        w[t] = (
            _small_sigma1(w[t - 2]) + w[t - 7] + _small_sigma0(w[t - 15]) + w[t - 16]
        ) & MASK32
    return w


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> State:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        32-bit words of the current working state.
    w : int
        Message schedule word `w[t]`.
    k : int
        Round constant `k[t]`.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working state after the round, each word reduced modulo 2**32.
    """
    a &= MASK32
    b &= MASK32
    c &= MASK32
    d &= MASK32
    e &= MASK32
    f &= MASK32
    g &= MASK32
    h &= MASK32
    w &= MASK32
    k &= MASK32

    temp1 = (h + _big_sigma1(e) + _ch(e, f, g) + k + w) & MASK32
    temp2 = (_big_sigma0(a) + _maj(a, b, c)) & MASK32

    return (
        (temp1 + temp2) & MASK32,
        a,
        b,
        c,
        (d + temp1) & MASK32,
        e,
        f,
        g,
    )


def compress64(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
) -> State:
    """Run the full 64-round compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working state words (the current hash state).
    ws : Sequence[int]
        The 64-word message schedule `w[0..63]` for this block.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working state after 64 rounds.
    """
    if len(ws) != ROUNDS:
        raise ValueError(
            f"compress64 expects {ROUNDS} message schedule words, got {len(ws)}"
        )

    working = (a, b, c, d, e, f, g, h)
    for t in range(ROUNDS):
        working = compression(*working, ws[t], K_VALUES[t])
    return working


def update_hash_state(state: List[int], working: Sequence[int]) -> List[int]:
    """Add the working state into `state` word by word, modulo 2**32.

    `state` is updated in place and returned.
    """
    for j in range(8):
        state[j] = (state[j] + working[j]) & MASK32
    return state


def compress_blocks(blocks: Iterable[Sequence[int]]) -> List[int]:
    """Fold every 16-word block, in order, into a fresh hash state.

    Only the running hash state is kept; each block's schedule is discarded
    once its rounds are done.
    """
    state = list(H0)
    for block in blocks:
        ws = build_message_schedule(block)
        working = compress64(*state, ws)
        update_hash_state(state, working)
    return state


def finalize_digest(state: Sequence[int]) -> bytes:
    """Serialize the final 8-word hash state into the 32-byte digest."""
    if len(state) != 8:
        raise ValueError(f"Hash state must have 8 words, got {len(state)}")
    return b"".join((word & MASK32).to_bytes(4, byteorder="big") for word in state)
