from __future__ import annotations

import math
import re
from typing import List, Optional

from BundleUpload.backend.app.models.domain import MB_PER_GB, TokenizedLine

_DELIMITER_RE = re.compile(r"[\s\-]+")
_UNIT_SUFFIX_RE = re.compile(r"gb$", re.IGNORECASE)
_LEADING_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def split_tokens(line: str) -> List[str]:
    """Split a line on whitespace and hyphens, treating periods as spaces."""

    cleaned = line.replace(".", " ").strip()
    return [token for token in _DELIMITER_RE.split(cleaned) if token]


def strip_unit(token: str) -> str:
    return _UNIT_SUFFIX_RE.sub("", token).strip()


def parse_leading_float(text: str) -> Optional[float]:
    """Parse the numeric prefix of ``text``; ``"15.5xyz"`` gives ``15.5``.

    Returns ``None`` when the text does not start with a number.
    """

    match = _LEADING_FLOAT_RE.match(text.lstrip())
    if match is None:
        return None
    return float(match.group(0))


def tokenize_line(line: str) -> Optional[TokenizedLine]:
    """Return the identifier and allocation of a line, or ``None`` to drop it."""

    tokens = split_tokens(line)
    if len(tokens) < 2:
        return None

    identifier, allocation_raw = tokens[0], tokens[1]
    allocation = parse_leading_float(strip_unit(allocation_raw))
    # the megabyte value must also fit in a float
    if allocation is None or not math.isfinite(allocation * MB_PER_GB):
        return None

    return TokenizedLine(identifier=identifier, allocation_gb=allocation)
