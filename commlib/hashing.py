"""Hash helpers: seed combination and the BKDR string hash."""

from __future__ import annotations

_MASK64 = (1 << 64) - 1
_MASK32 = (1 << 32) - 1


def combine_hash(seed: int, value: int) -> int:
    """Mix ``value`` into ``seed`` and return the new 64-bit seed."""
    seed &= _MASK64
    mixed = (value + 0x9E3779B9 + ((seed << 6) & _MASK64) + (seed >> 2)) & _MASK64
    return seed ^ mixed


def bkdr_hash(text: str | bytes) -> int:
    """BKDR hash (seed 131) of ``text`` up to its first NUL, as a 31-bit value.

    Strings are hashed as UTF-8; bytes are taken as signed chars.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    result = 0
    for byte in data.split(b"\0", 1)[0]:
        signed = byte - 256 if byte >= 0x80 else byte
        result = (result * 131 + signed) & _MASK32
    return result & 0x7FFFFFFF