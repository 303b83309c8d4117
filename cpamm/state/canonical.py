"""
Byte encodings for hashing pool records.

Pool identities (custodial address, share mint) and configuration
fingerprints are SHA-256 digests over a domain tag followed by fields in
these encodings. Every encoding is self-delimiting, so concatenated fields
never collide, and none of them may change without bumping
`CANONICAL_ENCODING_VERSION`.
"""

from __future__ import annotations

import hashlib
from typing import Optional


CANONICAL_ENCODING_VERSION = 1


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = CANONICAL_ENCODING_VERSION) -> bytes:
    """
    Domain tag `cpamm:<label>:v<version>\\x00`.

    Labels are ASCII without NUL so the terminator is unambiguous.
    """
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label or not label.isascii():
        raise ValueError(f"label must be ASCII without NUL: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return f"cpamm:{label}:v{version}".encode("ascii") + b"\x00"


def encode_uvarint(value: int) -> bytes:
    """Unsigned LEB128."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"uvarint must be a non-negative int, got {value!r}")
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_str(value: str) -> bytes:
    """uvarint byte length, then UTF-8. Lone surrogates are rejected by the codec."""
    if not isinstance(value, str):
        raise TypeError("value must be a str")
    try:
        raw = value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValueError("string is not valid Unicode") from exc
    return encode_uvarint(len(raw)) + raw


def encode_bool(value: bool) -> bytes:
    if not isinstance(value, bool):
        raise TypeError("value must be a bool")
    return b"\x01" if value else b"\x00"


def encode_optional_str(value: Optional[str]) -> bytes:
    # 0x00 = absent, 0x01 + encode_str = present
    if value is None:
        return b"\x00"
    return b"\x01" + encode_str(value)
