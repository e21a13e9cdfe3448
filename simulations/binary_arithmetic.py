"""
binary_arithmetic.py — 8-bit Binary Addition & Shifts
======================================================
Addition is stepped column by column from the least significant bit
(index 7) to the most significant (index 0).  The carry array is one
wider than the operands: carry[i + 1] feeds column i, carry[0] is the
carry out of the top column, i.e. overflow.

Shifts are reactive: one snapshot showing the before/after bits.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from simulations.inputs import choose, clamp, parse_int
from simulations.step import Snapshot, number_steps

BITS = 8
MODES = ("addition", "shift")
DIRECTIONS = ("left", "right")
PLACES = (1, 2, 3)

DEFAULT_PARAMS: Dict[str, Any] = {
    "mode":      "addition",
    "a":         "00101101",
    "b":         "00011011",
    "value":     "00010110",
    "direction": "left",
    "places":    1,
}

_NOT_BIT = re.compile(r"[^01]")


@dataclass(frozen=True)
class AdditionStep(Snapshot):
    """
    Attributes:
        a / b     : Operand bits, MSB first.
        carry     : BITS + 1 carry bits (carry[0] = carry out).
        sum_bits  : Sum bits computed so far.
        column    : Column just added; -1 before the first, -2 when done.
        overflow  : Carry out of the top column (set on the last step).
    """

    a:        Tuple[int, ...] = ()
    b:        Tuple[int, ...] = ()
    carry:    Tuple[int, ...] = ()
    sum_bits: Tuple[int, ...] = ()
    column:   int             = -1
    overflow: bool            = False


@dataclass(frozen=True)
class ShiftStep(Snapshot):
    before:    Tuple[int, ...] = ()
    after:     Tuple[int, ...] = ()
    direction: str             = "left"
    places:    int             = 0
    new_bits:  Tuple[int, ...] = ()   # indices filled with 0 by the shift


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def parse_bin(text: Any, bits: int = BITS) -> Tuple[int, ...]:
    """Keep 0/1 characters, truncate to `bits`, left-pad with zeros."""
    s = _NOT_BIT.sub("", "" if text is None else str(text))[:bits]
    return tuple(int(c) for c in s.rjust(bits, "0"))


def to_int(bits: Sequence[int]) -> int:
    value = 0
    for b in bits:
        value = value * 2 + b
    return value


def bit_string(bits: Sequence[int]) -> str:
    return "".join(str(b) for b in bits)


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------
def sanitize_params(params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "mode":      choose(params.get("mode"), MODES, DEFAULT_PARAMS["mode"]),
        "a":         bit_string(parse_bin(params.get("a"))),
        "b":         bit_string(parse_bin(params.get("b"))),
        "value":     bit_string(parse_bin(params.get("value"))),
        "direction": choose(params.get("direction"), DIRECTIONS, "left"),
        "places":    choose(parse_int(params.get("places"), 1), PLACES, 1),
    }


def generate(params: Dict[str, Any]) -> Tuple[Snapshot, ...]:
    p = sanitize_params(params)
    if p["mode"] == "shift":
        return (bit_shift(p["value"], p["direction"], p["places"]),)
    return binary_addition(p["a"], p["b"])


# ---------------------------------------------------------------------------
# Addition
# ---------------------------------------------------------------------------
def binary_addition(a_text: Any, b_text: Any) -> Tuple[AdditionStep, ...]:
    a = parse_bin(a_text)
    b = parse_bin(b_text)
    carry  = [0] * (BITS + 1)
    result = [0] * BITS

    steps = [AdditionStep(
        a=a, b=b, carry=tuple(carry), sum_bits=tuple(result), column=-1,
        explanation=f"Add {to_int(a)} + {to_int(b)} one column at a time, right to left.",
    )]

    for i in range(BITS - 1, -1, -1):
        total = a[i] + b[i] + carry[i + 1]
        result[i] = total % 2
        carry[i]  = total // 2
        steps.append(AdditionStep(
            a=a, b=b, carry=tuple(carry), sum_bits=tuple(result), column=i,
            explanation=(
                f"Column {BITS - 1 - i}: {a[i]} + {b[i]} + carry {carry[i + 1]} = {total} "
                f"→ write {result[i]}, carry {carry[i]}."
            ),
        ))

    overflow = carry[0] == 1
    den_a, den_b, den_r = to_int(a), to_int(b), to_int(result)
    if overflow:
        summary = (
            f"Overflow! {den_a} + {den_b} = {den_a + den_b} which exceeds {2 ** BITS - 1} "
            f"({BITS}-bit max). Result truncated to {den_r}."
        )
    else:
        summary = f"{den_a} + {den_b} = {den_r}, no overflow."
    steps.append(AdditionStep(
        a=a, b=b, carry=tuple(carry), sum_bits=tuple(result), column=-2,
        overflow=overflow, result=summary, explanation=summary,
    ))
    return number_steps(steps)


# ---------------------------------------------------------------------------
# Shift
# ---------------------------------------------------------------------------
def bit_shift(value: Any, direction: str = "left", places: int = 1) -> ShiftStep:
    before = parse_bin(value)
    places = clamp(places, 0, BITS)
    if direction == "left":
        after = tuple(before[i + places] if i + places < BITS else 0 for i in range(BITS))
        new = tuple(range(BITS - places, BITS))
        op = "×"
    else:
        after = tuple(before[i - places] if i - places >= 0 else 0 for i in range(BITS))
        new = tuple(range(places))
        op = "÷"

    factor = 2 ** places
    orig, shifted = to_int(before), to_int(after)
    text = f"{orig} {op} {factor} = {shifted}"
    if direction == "right" and orig % factor:
        text += " (remainder lost)"
    elif direction == "left" and orig * factor > 2 ** BITS - 1:
        text += " (bits lost off the left)"
    return ShiftStep(
        before=before, after=after, direction=direction, places=places, new_bits=new,
        result=text, explanation=f"Shift {bit_string(before)} {direction} by {places}.",
        is_final=True,
    )
