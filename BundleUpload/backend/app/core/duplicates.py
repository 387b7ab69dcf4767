from __future__ import annotations

from typing import Dict, Iterable, List, Set


def find_duplicates(identifiers: Iterable[str]) -> List[str]:
    """Return identifiers that occur more than once, in the order they repeat.

    Only the second and later occurrences trigger the add, but callers use the
    result as a membership set, so every occurrence ends up flagged.
    """

    seen: Set[str] = set()
    duplicates: Dict[str, None] = {}
    for identifier in identifiers:
        if identifier in seen:
            duplicates.setdefault(identifier, None)
        else:
            seen.add(identifier)
    return list(duplicates)
