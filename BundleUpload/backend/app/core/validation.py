from __future__ import annotations

import re

# Local subscriber number: leading zero plus nine digits.
_IDENTIFIER_RE = re.compile(r"0[0-9]{9}")


def is_valid_identifier(identifier: str) -> bool:
    return _IDENTIFIER_RE.fullmatch(identifier) is not None
