"""SHA-256 digest of an in-memory message, plus a small command-line front end.

This module provides:

- `sha256(data: bytes) -> bytes`: compute the SHA-256 digest of `data`.
- `sha256_hex(data: bytes) -> str`: the same digest as lowercase hex.
- `sha256_into(data: bytes, digest: bytearray) -> None`: write the digest
  into a caller-supplied 32-byte buffer.
- CLI usage:

      python sha256_cli.py "message"         # hash the UTF-8 string
      python sha256_cli.py -- "-message"     # text that starts with '-'
      python sha256_cli.py -f path/to/file   # hash the file's raw bytes
      python sha256_cli.py --check           # verify the built-in vectors
      python sha256_cli.py --check vectors.yaml
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from blocks import iter_blocks
from compress import DIGEST_SIZE, compress_blocks, finalize_digest
from padding import InputTooLarge, pad_message


# Known-answer vectors checked by a bare `--check`. Same format as a vector
# file: exactly one of message (UTF-8 text), message_hex, repeat per entry.
BUILTIN_VECTORS_YAML = """\
vectors:
  - name: empty
    message: ""
    digest: "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

  - name: abc
    message: "abc"
    digest: "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

  - name: abc-hex
    message_hex: "616263"
    digest: "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

  - name: nist-448-bit
    message: "abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq"
    digest: "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1"

  - name: nist-896-bit
    message: "abcdefghbcdefghicdefghijdefghijkefghijklfghijklmghijklmnhijklmnoijklmnopjklmnopqklmnopqrlmnopqrsmnopqrstnopqrstu"
    digest: "cf5b16a778af8380036ce59e7b0492370b249b11e8f07a51afac45037afee9d1"

  - name: hello
    message: "hello"
    digest: "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"

  - name: quick-brown-fox
    message: "The quick brown fox jumps over the lazy dog"
    digest: "d7a8fbb307d7809469ca9abcb0082e4f8d5651e46d3cdb762d02d0bf37c9e592"
"""

BUILTIN_VECTORS = "<built-in>"


class VectorFileError(ValueError):
    """A test vector file is missing required fields or is not valid YAML."""


def sha256(data: bytes) -> bytes:
    """Compute the SHA-256 digest of `data`.

    High-level flow:

    1. Pad the message to a whole number of 512-bit blocks (the length
       limit is checked before anything is allocated).
    2. Parse the padded message into 16-word blocks.
    3. Fold the blocks through the compression function and serialize the
       final hash state.

    Raises
    ------
    InputTooLarge
        If the message is 2**61 bytes or longer. Nothing is computed.
    """
    padded = pad_message(data)
    state = compress_blocks(iter_blocks(padded))
    return finalize_digest(state)


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 digest of `data` as 64 lowercase hex characters."""
    return sha256(data).hex()


def sha256_into(data: bytes, digest: bytearray) -> None:
    """Write the SHA-256 digest of `data` into `digest`.

    `digest` must be a writable buffer of exactly `DIGEST_SIZE` bytes. If
    hashing fails, the buffer is left as it was.
    """
    view = memoryview(digest)
    if view.readonly:
        raise ValueError("Digest buffer must be writable")
    if view.nbytes != DIGEST_SIZE:
        raise ValueError(
            f"Digest buffer must be {DIGEST_SIZE} bytes, got {view.nbytes}"
        )

    result = sha256(data)
    view.cast("B")[:] = result


#
# Test vector checking
#

def _vector_message(entry: Dict[str, Any], index: int) -> bytes:
    """Build the message bytes described by one vector entry."""
    sources = [key for key in ("message", "message_hex", "repeat") if key in entry]
    if len(sources) != 1:
        raise VectorFileError(
            f"Vector {index} must have exactly one of message, message_hex, "
            f"repeat (got {sources or 'none'})"
        )

    source = sources[0]
    if source == "message":
        return str(entry["message"]).encode("utf-8")
    if source == "message_hex":
        try:
            return bytes.fromhex(str(entry["message_hex"]))
        except ValueError as e:
            raise VectorFileError(f"Vector {index} has invalid message_hex: {e}") from e

    repeat = entry["repeat"]
    if not isinstance(repeat, dict) or "pattern" not in repeat or "count" not in repeat:
        raise VectorFileError(f"Vector {index} repeat needs pattern and count")
    count = repeat["count"]
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise VectorFileError(
            f"Vector {index} repeat count must be a non-negative integer, got {count!r}"
        )
    return str(repeat["pattern"]).encode("utf-8") * count


def parse_vectors(source: Union[str, bytes], origin: str) -> List[Tuple[str, bytes, str]]:
    """Parse `(name, message, expected_hex)` triples from YAML text.

    `origin` names the source in error messages.
    """
    try:
        document = yaml.safe_load(source)
    except yaml.YAMLError as e:
        raise VectorFileError(f"Invalid YAML in {origin}: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("vectors"), list):
        raise VectorFileError(f"{origin} must contain a top-level 'vectors' list")

    vectors: List[Tuple[str, bytes, str]] = []
    for index, entry in enumerate(document["vectors"]):
        if not isinstance(entry, dict) or "digest" not in entry:
            raise VectorFileError(f"Vector {index} in {origin} has no digest")
        name = str(entry.get("name", f"vector-{index}"))
        expected = str(entry["digest"]).strip().lower()
        vectors.append((name, _vector_message(entry, index), expected))
    return vectors


def load_vectors(path: Optional[Path] = None) -> List[Tuple[str, bytes, str]]:
    """Load vectors from the YAML file at `path`, or the built-in set if None."""
    if path is None:
        return parse_vectors(BUILTIN_VECTORS_YAML, BUILTIN_VECTORS)

    # Raw bytes: PyYAML's reader does the decoding and reports bad UTF-8 as
    # a YAMLError.
    with open(path, "rb") as f:
        return parse_vectors(f.read(), str(path))


def check_vectors(path: Optional[Path] = None) -> int:
    """Hash every vector, print PASS/FAIL lines, return an exit code."""
    vectors = load_vectors(path)

    failed = 0
    for name, message, expected in vectors:
        result = sha256_hex(message)
        if result == expected:
            print(f"[PASS] {name} ({len(message)} bytes)")
        else:
            failed += 1
            print(f"[FAIL] {name} ({len(message)} bytes)")
            print(f"  expected: {expected}")
            print(f"  got:      {result}")

    print(f"\n[SUMMARY] {len(vectors) - failed} passed, {failed} failed")
    return 1 if failed else 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sha256-ref",
        description="Compute SHA-256 digests with a from-scratch FIPS 180-4 implementation",
        epilog="Text that starts with '-' must follow '--', e.g. sha256-ref -- -x",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "message",
        nargs="?",
        help="Text to hash (its UTF-8 encoding is hashed); put '--' before text starting with '-'",
    )
    mode.add_argument(
        "-f",
        "--file",
        type=Path,
        help="Hash the raw bytes of this file",
    )
    mode.add_argument(
        "--check",
        type=Path,
        nargs="?",
        const=BUILTIN_VECTORS,
        metavar="VECTORS",
        help="Verify the YAML test vectors in VECTORS (default: the built-in vectors)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = _build_parser().parse_args(argv)

    if args.check is not None:
        path = None if args.check == BUILTIN_VECTORS else args.check
        try:
            return check_vectors(path)
        except OSError as e:
            sys.stderr.write(f"Error reading vector file '{args.check}': {e}\n")
            return 1
        except VectorFileError as e:
            sys.stderr.write(f"Error: {e}\n")
            return 1

    if args.file is not None:
        try:
            data = args.file.read_bytes()
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1
    else:
        data = args.message.encode("utf-8")

    try:
        print(sha256_hex(data))
    except InputTooLarge as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
