import struct

import pytest

from commlib.assembly import (
    PeSection,
    addr_to_le,
    byte_search,
    dw_reverse,
    get_call_address,
    get_pe_section_info,
    le_to_dw,
    list_pe_sections,
)


def _pe(sections, optional_size=0xE0):
    dos = bytearray(0x40)
    dos[0:2] = b"MZ"
    struct.pack_into("<I", dos, 0x3C, 0x40)
    nt = b"PE\0\0" + struct.pack(
        "<HHIIIHH", 0x14C, len(sections), 0, 0, 0, optional_size, 0
    ) + bytes(optional_size)
    table = b"".join(
        struct.pack("<8sIIIIIIHHI", name, vsize, vaddr, 0, 0, 0, 0, 0, 0, 0)
        for name, vaddr, vsize in sections
    )
    return bytes(dos) + nt + table


SECTIONS = [
    (b".text", 0x1000, 0x2345),
    (b".rdata", 0x4000, 0x800),
    (b".data", 0x5000, 0x120),
    (b".textbss", 0x6000, 0x10),
]


def test_list_sections_in_order():
    result = list_pe_sections(_pe(SECTIONS))
    assert [s.name for s in result] == [".text", ".rdata", ".data", ".textbss"]
    assert result[0] == PeSection(".text", 0x1000, 0x2345)


def test_get_section_info_text():
    section = get_pe_section_info(_pe(SECTIONS), ".text")
    assert section.virtual_address == 0x1000
    assert section.virtual_size == 0x2345


def test_get_section_info_rdata_and_data():
    image = _pe(SECTIONS)
    assert get_pe_section_info(image, ".rdata").virtual_address == 0x4000
    assert get_pe_section_info(image, ".data").virtual_size == 0x120


def test_full_length_name_is_read():
    assert get_pe_section_info(_pe(SECTIONS), ".textbss").virtual_address == 0x6000


def test_section_end():
    section = PeSection(".x", 0x1000, 0x10)
    assert section.end == 0x100F


def test_optional_header_size_respected():
    image = _pe([(b".text", 0x1000, 0x20)], optional_size=0xF0)
    assert get_pe_section_info(image, ".text").virtual_size == 0x20


def test_missing_section():
    with pytest.raises(LookupError):
        get_pe_section_info(_pe(SECTIONS), ".reloc")


def test_not_a_pe():
    with pytest.raises(ValueError):
        list_pe_sections(b"XX" + bytes(0x100))


def test_bad_pe_signature():
    image = bytearray(_pe(SECTIONS))
    image[0x40:0x44] = b"NE\0\0"
    with pytest.raises(ValueError):
        list_pe_sections(bytes(image))


def test_truncated_table():
    image = _pe(SECTIONS)[:-10]
    with pytest.raises(ValueError):
        list_pe_sections(image)


def test_byte_search_from_source():
    memory = bytes([0xFF, 0x2A, 0x3B, 0x4C, 0x5A, 0x6C, 0xAA, 0xBB, 0xCC, 0xDD])
    pattern = struct.pack("<I", 0xDDCCBBAA)
    assert byte_search(pattern, memory, 0x1000) == 0x1006
    assert byte_search(pattern, memory) == 6


def test_byte_search_not_found():
    with pytest.raises(LookupError):
        byte_search(b"\x01\x02", b"\x00\x01\x03\x02")


def test_dw2le_from_source():
    assert addr_to_le(0xDDCCBBAA, 4) == bytes([0xAA, 0xBB, 0xCC, 0xDD])


def test_addr_to_le_wide_round_trip():
    value = 0x0123456789ABCDEF
    encoded = addr_to_le(value, 8)
    assert len(encoded) == 8
    assert int.from_bytes(encoded, "little") == value


def test_addr_to_le_rejects_bad_width():
    with pytest.raises(ValueError):
        addr_to_le(1, 0)


def test_dw_reverse():
    assert dw_reverse(0xDDCCBBAA) == 0xAABBCCDD
    assert dw_reverse(dw_reverse(0x12345678)) == 0x12345678


def test_le_to_dw():
    assert le_to_dw(bytes([0xAA, 0xBB, 0xCC, 0xDD])) == 0xDDCCBBAA
    assert le_to_dw(addr_to_le(0x12345678)) == 0x12345678


def test_le_to_dw_too_short():
    with pytest.raises(ValueError):
        le_to_dw(b"\x01\x02")


def test_call_to_self_32bit():
    assert get_call_address(0x401000, 0xFFFFFFFB) == 0x401000


def test_call_to_self_64bit():
    assert get_call_address(0x140001000, 0xFFFFFFFB, wide=True) == 0x140001000


def test_forward_call_distance():
    target = get_call_address(0x401000, 0x20)
    assert target - 0x401000 == 0x20 + 5


def test_wide_offset_below_threshold_not_sign_extended():
    target = get_call_address(0x140001000, 0x80000000, wide=True)
    assert target > 0x140001000