"""String helpers: prefix/suffix checks, splitting, replacing and code-page conversion."""

from __future__ import annotations

import locale
import string
from typing import AnyStr

CP_ACP = 0
CP_UTF8 = 65001

_CODE_PAGES = {
    1200: "utf-16-le",
    1201: "utf-16-be",
    20127: "ascii",
    20932: "euc_jp",
    28591: "latin-1",
    51932: "euc_jp",
    54936: "gb18030",
    65000: "utf-7",
    CP_UTF8: "utf-8",
}

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def _codec_for(charset: int | str) -> str:
    """Map a Windows code page number (or a codec name) to a Python codec name."""
    if isinstance(charset, str):
        return charset
    if charset == CP_ACP:
        return locale.getpreferredencoding(False)
    return _CODE_PAGES.get(charset, f"cp{charset}")


def begins_with(src: AnyStr, pattern: AnyStr) -> bool:
    """Return True if ``src`` starts with ``pattern``."""
    return src.startswith(pattern)


def ends_with(src: AnyStr, pattern: AnyStr) -> bool:
    """Return True if ``src`` ends with ``pattern``."""
    if len(pattern) > len(src):
        return False
    return src.endswith(pattern)


def string_split(text: AnyStr, delimiter: AnyStr) -> list[AnyStr]:
    """Split ``text`` at any character found in ``delimiter``.

    Empty pieces between adjacent delimiters are kept; a trailing empty piece is not.
    """
    parts = []
    start = 0
    for index, char in enumerate(text):
        if char in delimiter:
            parts.append(text[start:index])
            start = index + 1
    if start < len(text):
        parts.append(text[start:])
    return parts


def replace_string(text: str, old: str, new: str) -> str:
    """Replace every non-overlapping occurrence of ``old``, scanning left to right."""
    if not old:
        raise ValueError("substring to replace must not be empty")
    return text.replace(old, new)


def to_lower(text: AnyStr) -> AnyStr:
    """Lower-case ASCII letters only, leaving every other character as it is."""
    if isinstance(text, (bytes, bytearray)):
        return text.lower()
    return text.translate(_ASCII_LOWER)


def to_upper(text: AnyStr) -> AnyStr:
    """Upper-case ASCII letters only, leaving every other character as it is."""
    if isinstance(text, (bytes, bytearray)):
        return text.upper()
    return text.translate(_ASCII_UPPER)


def wide_to_multibyte(text: str, charset: int | str) -> bytes:
    """Encode ``text`` up to its first NUL in the given code page.

    Characters the code page cannot hold become ``?``. An unknown code page
    raises LookupError.
    """
    text = text.split("\0", 1)[0]
    return text.encode(_codec_for(charset), errors="replace")


def multibyte_to_wide(data: bytes, charset: int | str) -> str:
    """Decode ``data`` up to its first NUL byte from the given code page.

    Invalid sequences become U+FFFD. An unknown code page raises LookupError.
    """
    data = bytes(data).split(b"\0", 1)[0]
    return data.decode(_codec_for(charset), errors="replace")


def to_utf8(text: str) -> bytes:
    """Encode ``text`` as UTF-8."""
    return wide_to_multibyte(text, CP_UTF8)


def to_ansi(text: str) -> bytes:
    """Encode ``text`` in the system's ANSI code page."""
    return wide_to_multibyte(text, CP_ACP)


def from_ansi(data: bytes) -> str:
    """Decode bytes in the system's ANSI code page."""
    return multibyte_to_wide(data, CP_ACP)


def from_utf8(data: bytes) -> str:
    """Decode UTF-8 bytes."""
    return multibyte_to_wide(data, CP_UTF8)


def ansi_to_utf8(data: bytes) -> bytes:
    """Re-encode bytes from the ANSI code page to UTF-8."""
    return to_utf8(from_ansi(data))


def multibyte_to_utf8(data: bytes, charset: int | str) -> bytes:
    """Re-encode bytes from the given code page to UTF-8."""
    return to_utf8(multibyte_to_wide(data, charset))