"""
Value coercions used while normalizing model output.

None of these raise: a value that cannot be coerced yields ``None`` (or
the documented default) and the caller decides what that means.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Optional

from biolens.intent.vocabulary import (
    COLOR_NAMES,
    DEFAULT_QUALITY,
    FALSE_WORDS,
    QUALITY_LEVELS,
    REPRESENTATION_SYNONYMS,
    TRUE_WORDS,
    WHAT_SYNONYMS,
)


_HEX_COLOR_RE = re.compile(r'^#[0-9a-fA-F]{6}$')


def to_number(value: Any) -> Optional[float]:
    """Coerce ints, floats and numeric strings; everything else is None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # integers past float range read as infinite, like JSON numbers do
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def to_finite(value: Any) -> Optional[float]:
    """Like :func:`to_number` but rejects NaN and infinities."""
    number = to_number(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def to_integer(value: Any) -> Optional[int]:
    """Return an int when ``value`` denotes a whole number ("57", 57.0, 57)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = to_finite(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def to_bool(value: Any) -> Optional[bool]:
    """Explicit booleans, non-zero numbers, and on/off words in English or Chinese."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
    return None


def to_text(value: Any) -> str:
    """Stringify a decoded JSON value the way JavaScript would print it."""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def clamp01(value: Any) -> float:
    """Clamp into [0, 1]; anything non-numeric means fully opaque."""
    number = to_finite(value)
    if number is None:
        return 1.0
    return max(0.0, min(1.0, number))


def normalize_chain(value: Any) -> Optional[str]:
    """Uppercased chain token, or None when blank."""
    if value is None:
        return None
    token = to_text(value).strip()
    if not token:
        return None
    return token.upper()


def resolve_color(value: Any) -> Optional[str]:
    """``#rrggbb`` (lowercase) from a hex string or a known color name."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if _HEX_COLOR_RE.match(text):
        return text.lower()
    return COLOR_NAMES.get(text.lower()) or COLOR_NAMES.get(text)


def normalize_representation(value: Any) -> Optional[str]:
    if value is None:
        return None
    return REPRESENTATION_SYNONYMS.get(to_text(value).strip().lower())


def normalize_quality(value: Any) -> str:
    """Unknown or missing quality falls back to ``auto``."""
    if value is None or value == "":
        return DEFAULT_QUALITY
    quality = to_text(value).strip().lower()
    return quality if quality in QUALITY_LEVELS else DEFAULT_QUALITY


def normalize_what(value: Any) -> Optional[str]:
    """Map show/hide subjects onto ``water`` or ``ligand``."""
    if value is None:
        return None
    text = to_text(value).strip()
    return WHAT_SYNONYMS.get(text.lower()) or WHAT_SYNONYMS.get(text)
