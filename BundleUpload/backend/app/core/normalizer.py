"""Split pasted or uploaded text into candidate lines."""

from __future__ import annotations

import re
from typing import List

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def normalize_lines(text: str) -> List[str]:
    """Return trimmed, non-empty lines in their original order."""

    if not text:
        return []
    lines = (line.strip() for line in _LINE_BREAK_RE.split(text))
    return [line for line in lines if line]
