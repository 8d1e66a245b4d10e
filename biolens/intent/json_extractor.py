"""
JSON candidate extraction from raw model output.

Model completions arrive wrapped in markdown fences, apologies and
trailing commentary. This module finds the most likely JSON payload and
parses it without ever raising.
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional

from loguru import logger


FENCE_PATTERN = re.compile(r'```(?:json)?\s*([\s\S]*?)\s*```', re.I)


def extract_candidate(text: Any) -> str:
    """
    Return the best-guess JSON payload contained in ``text``.

    Priority:
    1. Inner content of the first ```json fence
    2. First balanced {...} object (braces inside strings are ignored)
    3. The trimmed input itself, so parsing fails uniformly downstream
    """
    s = text if isinstance(text, str) else ("" if text is None else str(text))

    fenced = FENCE_PATTERN.search(s)
    if fenced and fenced.group(1):
        return fenced.group(1).strip()

    start = -1
    depth = 0
    in_string = False
    escaped = False

    for i, ch in enumerate(s):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            if start == -1:
                start = i
            depth += 1
        elif ch == "}" and start != -1:
            depth -= 1
            if depth == 0:
                return s[start:i + 1].strip()

    return s.strip()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_candidate(candidate: str) -> Optional[Any]:
    """
    Parse a JSON candidate; any failure yields None.

    NaN/Infinity literals are rejected so that everything accepted here
    can be serialized back to strict JSON.
    """
    try:
        return json.loads(candidate, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError) as e:
        logger.warning(f"Model output is not valid JSON: {e}")
        return None
