"""PE section lookup, byte searching and little-endian address helpers."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Iterator

logger = logging.getLogger(__name__)

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_CALL_SIZE = 5
_SECTION_HEADER_SIZE = 40
_FILE_HEADER = struct.Struct("<HHIIIHH")
_SECTION_PREFIX = struct.Struct("<8sII")


@dataclass(frozen=True)
class PeSection:
    """One entry of a PE section table."""

    name: str
    virtual_address: int
    virtual_size: int

    @property
    def end(self) -> int:
        """Address of the last byte of the section, relative to the image base."""
        return self.virtual_address + self.virtual_size - 1


def _iter_sections(image: bytes) -> Iterator[PeSection]:
    data = bytes(image)
    if len(data) < 0x40 or data[:2] != b"MZ":
        raise ValueError("not a PE image: missing MZ signature")
    (nt_offset,) = struct.unpack_from("<I", data, 0x3C)
    file_header_offset = nt_offset + 4
    if file_header_offset + _FILE_HEADER.size > len(data):
        raise ValueError("not a PE image: NT headers out of range")
    if data[nt_offset:file_header_offset] != b"PE\0\0":
        raise ValueError("not a PE image: missing PE signature")
    _, count, _, _, _, optional_size, _ = _FILE_HEADER.unpack_from(data, file_header_offset)
    offset = file_header_offset + _FILE_HEADER.size + optional_size
    for _ in range(count):
        if offset + _SECTION_HEADER_SIZE > len(data):
            raise ValueError("PE section table is truncated")
        raw_name, virtual_size, virtual_address = _SECTION_PREFIX.unpack_from(data, offset)
        name = raw_name.split(b"\0", 1)[0].decode("latin-1")
        yield PeSection(name, virtual_address, virtual_size)
        offset += _SECTION_HEADER_SIZE


def list_pe_sections(image: bytes) -> list[PeSection]:
    """Return every section of a PE image, in table order."""
    sections = list(_iter_sections(image))
    for number, section in enumerate(sections):
        logger.debug(
            "Section %3d: %#x...%#x %-10s (%d bytes)",
            number,
            section.virtual_address,
            section.end,
            section.name,
            section.virtual_size,
        )
    return sections


def get_pe_section_info(image: bytes, section_name: str) -> PeSection:
    """Return the first section named ``section_name``; raise LookupError if absent."""
    for section in _iter_sections(image):
        logger.debug("Section name: %s", section.name)
        if section.name == section_name:
            return section
    raise LookupError(f"section {section_name!r} not found")


def byte_search(pattern: bytes, memory: bytes, begin: int = 0) -> int:
    """Find ``pattern`` in ``memory`` and return its address.

    ``begin`` is the address of the first byte of ``memory``. Raises
    LookupError when the pattern does not occur.
    """
    index = bytes(memory).find(bytes(pattern))
    if index < 0:
        raise LookupError("byte sequence not found")
    address = begin + index
    logger.debug("byte search found pattern at %#x", address)
    return address


def get_call_address(current_address: int, offset: int, wide: bool = False) -> int:
    """Turn the offset of a relative CALL into the absolute target address.

    On a 64-bit image (``wide``) offsets from 0xFF000000 up are taken as
    negative; addresses wrap at the address width.
    """
    offset &= _MASK32
    if wide:
        if offset >= 0xFF000000:
            offset |= 0xFFFFFFFF00000000
        return (current_address + _CALL_SIZE + offset) & _MASK64
    return (current_address + _CALL_SIZE + offset) & _MASK32


def addr_to_le(value: int, width: int = 4) -> bytes:
    """Return the lowest ``width`` bytes of ``value`` in little-endian order."""
    if width <= 0:
        raise ValueError("width must be positive")
    return (value & ((1 << (8 * width)) - 1)).to_bytes(width, "little")


def dw_reverse(value: int) -> int:
    """Reverse the byte order of a 32-bit value."""
    return int.from_bytes((value & _MASK32).to_bytes(4, "little"), "big")


def le_to_dw(data: bytes) -> int:
    """Read a 32-bit value from the first four bytes, little-endian."""
    if len(data) < 4:
        raise ValueError("need at least four bytes")
    return int.from_bytes(bytes(data[:4]), "little")