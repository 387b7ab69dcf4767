from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


def decode_text(data: bytes, encoding: Optional[str] = None) -> str:
    encodings = [encoding] if encoding else list(_ENCODINGS)
    for enc in encodings:
        try:
            return data.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue
    return data.decode(errors="ignore")


def read_text_file(path: Union[str, Path], encoding: Optional[str] = None) -> str:
    with open(path, "rb") as f:
        return decode_text(f.read(), encoding=encoding)
