import logging

import numpy as np
import pytest

from hemoglobin.automaton import (
    CODE_BITS,
    GAME_OF_LIFE,
    HIGHLIFE,
    SEEDS,
    Rule,
    bits_from_bytes,
    parse_life_like,
)
from hemoglobin.errors import DecodeError

ALL_DEAD = "AAAAAAAAAAA="
# Only entry 16 (a lone live cell) survives
LONER = "AAAAAAABAAA="


def test_bits_from_bytes_order():
    # 1802 = 10 + 7 * 2**8; little endian bytes [10, 7], bits MSB-first
    # within each byte: [00001010][00000111]
    num = 10 + 7 * 2 ** 8
    data = num.to_bytes(2, "little")
    assert data[0] == 10
    assert data[1] == 7
    expected = [0, 0, 0, 0, 1, 0, 1, 0,
                0, 0, 0, 0, 0, 1, 1, 1]
    assert bits_from_bytes(data).tolist() == [bool(b) for b in expected]


def test_all_dead_code():
    rule = Rule.from_code(ALL_DEAD)
    assert not rule.table.any()
    assert rule.lambda_parameter() == 0.0


def test_last_byte_lsb_maps_to_entry_zero():
    rule = Rule.from_code("AAAAAAAAAAE=")
    assert np.flatnonzero(rule.table).tolist() == [0]


def test_first_byte_msb_maps_to_entry_63():
    rule = Rule.from_code("gAAAAAAAAAA=")
    assert np.flatnonzero(rule.table).tolist() == [CODE_BITS - 1]


def test_loner_code():
    rule = Rule.from_code(LONER)
    assert rule[16]
    assert sum(rule[code] for code in range(512)) == 1


def test_high_entries_are_always_dead():
    rule = Rule.from_code("//////////8=")
    assert rule.table[:CODE_BITS].all()
    assert not rule.table[CODE_BITS:].any()


@pytest.mark.parametrize("code", [ALL_DEAD, LONER, "gAAAAAAAAAA=", "//////////8=", "3q2+78r+ur4="])
def test_code_round_trip(code):
    assert Rule.from_code(code).to_code() == code


def test_random_rule_round_trip():
    rng = np.random.default_rng(3)
    for _ in range(20):
        rule = Rule.random(rng)
        assert Rule.from_code(rule.to_code()) == rule
        assert not rule.table[CODE_BITS:].any()


@pytest.mark.parametrize("code", [
    "",
    "AAAA",  # 3 bytes
    "AAAAAAAAAAAAAAAA",  # 12 bytes
    "AAAAAAAAAAA",  # missing padding
    "AAAAAAAAAA!=",  # outside the alphabet
    "AAAAAAAAAAB=",  # stray bits in the padding
    "AAAAAAAAAAé=",
])
def test_invalid_codes_raise_decode_error(code):
    with pytest.raises(DecodeError):
        Rule.from_code(code)


@pytest.mark.parametrize("code", [
    LONER + "\n",
    "  " + LONER,
    "\t" + LONER + "\r\n",
    "AAAAAA\nABAAA=",
])
def test_whitespace_in_code_is_ignored(code):
    assert Rule.from_code(code) == Rule.from_code(LONER)
    assert Rule.from_code(code).to_code() == LONER


def test_decode_error_is_value_error():
    assert issubclass(DecodeError, ValueError)


def test_table_is_read_only():
    rule = Rule.from_code(LONER)
    with pytest.raises(ValueError):
        rule.table[0] = True


def test_table_length_checked():
    with pytest.raises(ValueError):
        Rule([True] * 64)


def test_int_conversion():
    rule = Rule.from_int(1 << 16)
    assert rule == Rule.from_code(LONER)
    assert rule.to_int() == 1 << 16
    assert Rule.from_int(GAME_OF_LIFE.to_int()) == GAME_OF_LIFE
    with pytest.raises(ValueError):
        Rule.from_int(1 << 512)


def test_game_of_life_table():
    # lone cell dies
    assert not GAME_OF_LIFE[16]
    # live cell with two neighbors survives
    assert GAME_OF_LIFE[16 + 1 + 2]
    # dead cell with three neighbors is born
    assert GAME_OF_LIFE[1 + 2 + 4]
    assert GAME_OF_LIFE[64 + 128 + 256]
    # overcrowding
    assert not GAME_OF_LIFE[16 + 1 + 2 + 4 + 8]
    # highest live entry: center plus the bottom row
    assert GAME_OF_LIFE.to_int().bit_length() == 16 + 64 + 128 + 256 + 1


def test_life_like_variants():
    assert HIGHLIFE[1 + 2 + 4 + 8 + 32 + 64]
    assert not GAME_OF_LIFE[1 + 2 + 4 + 8 + 32 + 64]
    assert SEEDS[1 + 2]
    assert not SEEDS[16 + 1 + 2]


def test_parse_life_like():
    assert parse_life_like("B3/S23") == ({3}, {2, 3})
    assert parse_life_like("b36s125") == ({3, 6}, {1, 2, 5})
    assert parse_life_like("B2/S") == ({2}, set())
    for bad in ["23/3", "B9/S", "B3/Sx"]:
        with pytest.raises(ValueError):
            parse_life_like(bad)


def test_to_code_warns_about_unrepresentable_entries(caplog):
    with caplog.at_level(logging.WARNING, logger="hemoglobin.automaton"):
        code = GAME_OF_LIFE.to_code()
    assert "not representable" in caplog.text
    low = Rule.from_code(code)
    assert np.array_equal(low.table[:CODE_BITS], GAME_OF_LIFE.table[:CODE_BITS])


def test_equality_and_hash():
    a = Rule.from_code(LONER)
    b = Rule.from_code(LONER)
    assert a == b
    assert hash(a) == hash(b)
    assert a != Rule.from_code(ALL_DEAD)
    assert len({a, b}) == 1
