"""
inputs.py — Sanitize-and-Default helpers
=========================================
Visualizers are interactive tools: bad input from a form field must
never stop them.  These helpers turn whatever the browser posted into
a value the generator can use, logging what was thrown away.
"""

import logging
import re
from typing import Any, Sequence

logger = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any, default: int = 0) -> int:
    """parseInt-style: leading integer of a string, else `default`."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else default
    m = _INT_PREFIX.match(str(value)) if value is not None else None
    if m is None:
        if value not in (None, ""):
            logger.warning(f"Could not parse {value!r} as an integer, using {default}")
        return default
    return int(m.group(1))


def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def choose(value: Any, options: Sequence[Any], default: Any) -> Any:
    """`value` if it is one of `options`, else `default`."""
    if value in options:
        return value
    if value is not None:
        logger.warning(f"{value!r} is not one of {list(options)}, using {default!r}")
    return default


def parse_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "on", "yes")
    return bool(value)
