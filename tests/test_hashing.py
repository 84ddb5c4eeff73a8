import pytest

from commlib.hashing import bkdr_hash, combine_hash


def test_combine_zero_seed_gives_constant():
    assert combine_hash(0, 0) == 0x9E3779B9


def test_combine_wraps_to_64_bits():
    assert combine_hash(0, 2**64 - 0x9E3779B9) == 0


@pytest.mark.parametrize("seed", [0, 1, 12345, 2**64 - 1])
def test_combine_stays_in_range(seed):
    assert 0 <= combine_hash(seed, 987654321) < 2**64


def test_combine_depends_on_order():
    a = combine_hash(combine_hash(0, 1), 2)
    b = combine_hash(combine_hash(0, 2), 1)
    assert a != b
    assert a == combine_hash(combine_hash(0, 1), 2)


def test_bkdr_empty():
    assert bkdr_hash("") == 0


def test_bkdr_single_char_is_its_code():
    assert bkdr_hash("a") == ord("a")


def test_bkdr_stops_at_nul():
    assert bkdr_hash("ab\0cd") == bkdr_hash("ab")


def test_bkdr_str_and_bytes_agree():
    assert bkdr_hash("hello") == bkdr_hash(b"hello")


def test_bkdr_high_bytes_are_signed():
    assert bkdr_hash(b"\x80") == 0x7FFFFF80


@pytest.mark.parametrize("text", ["a", "hello world", "x" * 500, "日本語"])
def test_bkdr_is_31_bit(text):
    assert 0 <= bkdr_hash(text) < 2**31