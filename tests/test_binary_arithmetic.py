from simulations import REGISTRY, binary_arithmetic
from simulations.binary_arithmetic import (
    BITS,
    ShiftStep,
    binary_addition,
    bit_shift,
    bit_string,
    parse_bin,
    to_int,
)


def test_parse_bin_pads_and_filters():
    assert parse_bin("101") == (0, 0, 0, 0, 0, 1, 0, 1)
    assert bit_string(parse_bin("1x1 2")) == "00000011"
    assert bit_string(parse_bin("111111111111")) == "11111111"
    assert parse_bin(None) == (0,) * BITS


def test_addition_steps_column_by_column():
    steps = binary_addition("00101101", "00011011")
    # intro + one per column + summary
    assert len(steps) == BITS + 2
    assert [s.column for s in steps[1:-1]] == list(range(BITS - 1, -1, -1))
    last = steps[-1]
    assert to_int(last.sum_bits) == 45 + 27
    assert not last.overflow
    assert last.result == "45 + 27 = 72, no overflow."


def test_overflow_scenario():
    last = binary_addition("00000001", "11111111")[-1]
    assert last.overflow
    assert last.carry[0] == 1
    assert last.sum_bits == (0,) * BITS
    assert last.result.startswith("Overflow! 1 + 255 = 256")
    assert last.column == -2


def test_shift_left_and_right():
    left = bit_shift("00010110", "left", 2)
    assert bit_string(left.after) == "01011000"
    assert left.new_bits == (6, 7)
    assert left.result == "22 × 4 = 88"

    right = bit_shift("00010111", "right", 1)
    assert bit_string(right.after) == "00001011"
    assert right.new_bits == (0,)
    assert right.result == "23 ÷ 2 = 11 (remainder lost)"


def test_shift_reports_lost_bits():
    assert bit_shift("11000000", "left", 1).result.endswith("(bits lost off the left)")


def test_generate_dispatches_on_mode():
    steps = binary_arithmetic.generate({"mode": "shift", "value": "1", "places": "3"})
    assert len(steps) == 1
    assert isinstance(steps[0], ShiftStep)
    assert steps[0].is_final
    steps = binary_arithmetic.generate({"mode": "bogus"})
    assert len(steps) == BITS + 2


def test_sanitize_keeps_places_to_the_offered_choices():
    for raw, expected in [("2", 2), (3, 3), (0, 1), ("8", 1), ("x", 1)]:
        assert binary_arithmetic.sanitize_params({"places": raw})["places"] == expected
    field = next(f for f in REGISTRY["binary-arithmetic"].fields if f.name == "places")
    assert field.options == binary_arithmetic.PLACES


def test_result_text_uses_plain_punctuation():
    for a, b in [("1", "1"), ("11111111", "1")]:
        assert "—" not in binary_addition(a, b)[-1].result
