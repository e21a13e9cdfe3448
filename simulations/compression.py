"""
compression.py — Run-Length Encoding
=====================================
Lossless compression by grouping maximal runs of one symbol:

    "aaabb"  →  groups [("a", 3), ("b", 2)]  →  "3a2b"

Encoded form: every group is <count><symbol>.  A symbol that is a digit
or a backslash is written as \\<symbol>, otherwise "111" (→ "31") and
"2"*111 would both read back ambiguously.  Text without digits or
backslashes encodes exactly as the textbook form.

One step per group, so the run can be played back group by group.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from simulations.step import Snapshot, number_steps

DEFAULT_PARAMS: Dict[str, Any] = {"text": "AAAABBBCCDAA"}
MAX_LENGTH = 200

_ESCAPE = "\\"


@dataclass(frozen=True)
class RLEGroup:
    symbol: str
    count:  int
    start:  int     # index of the first symbol of the run in the input

    @property
    def encoded(self) -> str:
        return f"{self.count}{_escape(self.symbol)}"


@dataclass(frozen=True)
class RLEStep(Snapshot):
    """
    Attributes:
        text           : The original input.
        groups         : Groups encoded so far (all of them on the last step).
        cursor         : Index of the next unread input symbol.
        encoded        : Encoded output so far.
        original_size  : len(text).
        encoded_size   : len(encoded) (final value on the last step).
        ratio          : 1 - encoded/original, set on the last step.
    """

    text:          str                    = ""
    groups:        Tuple[RLEGroup, ...]   = ()
    cursor:        int                    = 0
    encoded:       str                    = ""
    original_size: int                    = 0
    encoded_size:  int                    = 0
    ratio:         float                  = 0.0


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------
def rle_groups(text: str) -> List[RLEGroup]:
    groups = []
    i = 0
    while i < len(text):
        ch = text[i]
        count = 1
        while i + count < len(text) and text[i + count] == ch:
            count += 1
        groups.append(RLEGroup(symbol=ch, count=count, start=i))
        i += count
    return groups


def rle_encode(text: str) -> str:
    return "".join(g.encoded for g in rle_groups(text))


def rle_decode(encoded: str) -> str:
    """Inverse of rle_encode.  Raises ValueError on malformed input."""
    out = []
    i = 0
    while i < len(encoded):
        j = i
        while j < len(encoded) and encoded[j].isdigit():
            j += 1
        if j == i:
            raise ValueError(f"expected a run length at offset {i} in {encoded!r}")
        count = int(encoded[i:j])
        if j < len(encoded) and encoded[j] == _ESCAPE:
            j += 1
        if j >= len(encoded):
            raise ValueError(f"run length at offset {i} has no symbol in {encoded!r}")
        out.append(encoded[j] * count)
        i = j + 1
    return "".join(out)


def compression_ratio(original_size: int, encoded_size: int) -> float:
    if not original_size:
        return 0.0
    return 1 - encoded_size / original_size


def describe_ratio(ratio: float) -> str:
    pct = ratio * 100
    if pct >= 0:
        return f"{pct:.0f}% smaller"
    return f"{abs(pct):.0f}% larger"


# ---------------------------------------------------------------------------
# Step generator
# ---------------------------------------------------------------------------
def sanitize_params(params: Dict[str, Any]) -> Dict[str, Any]:
    text = params.get("text")
    text = "" if text is None else str(text)
    return {"text": text[:MAX_LENGTH]}


def generate(params: Dict[str, Any]) -> Tuple[RLEStep, ...]:
    return run_length_steps(sanitize_params(params)["text"])


def run_length_steps(text: str) -> Tuple[RLEStep, ...]:
    if not text:
        return number_steps([RLEStep(
            result="Nothing to compress",
            explanation="Type some text to see it run-length encoded.",
        )])

    groups = rle_groups(text)
    n = len(text)
    steps = [RLEStep(
        text=text, original_size=n,
        explanation=f"Scan {n} symbol(s) left to right, grouping identical neighbours.",
    )]

    encoded = ""
    for k, g in enumerate(groups):
        encoded += g.encoded
        steps.append(RLEStep(
            text=text,
            groups=tuple(groups[:k + 1]),
            cursor=g.start + g.count,
            encoded=encoded,
            original_size=n,
            encoded_size=len(encoded),
            explanation=f"{g.count} × '{g.symbol}' becomes {g.encoded}.",
        ))

    ratio = compression_ratio(n, len(encoded))
    steps.append(RLEStep(
        text=text,
        groups=tuple(groups),
        cursor=n,
        encoded=encoded,
        original_size=n,
        encoded_size=len(encoded),
        ratio=ratio,
        result=describe_ratio(ratio),
        explanation=f"{n} symbol(s) → {len(encoded)} symbol(s) in {len(groups)} group(s).",
    ))
    return number_steps(steps)


def _escape(symbol: str) -> str:
    if symbol.isdigit() or symbol == _ESCAPE:
        return _ESCAPE + symbol
    return symbol
