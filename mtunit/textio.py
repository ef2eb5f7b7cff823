"""Decoding for files written by MetaEditor and the MetaTrader terminal."""

from __future__ import annotations

import codecs
from typing import List


def decode_text(raw: bytes) -> str:
    """Decode ``raw``, honouring a UTF-16 byte order mark when present.

    MetaEditor and the terminal write UTF-16 with a BOM; everything else is
    read as UTF-8 with undecodable bytes replaced.
    """
    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return raw.decode("utf-16")
    return raw.decode("utf-8-sig", errors="replace")


def split_lines(text: str) -> List[str]:
    """Split ``text`` on ``\\n`` and ``\\r\\n`` only.

    Unlike ``str.splitlines``, form feeds and other separators stay inside
    the line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


__all__ = ["decode_text", "split_lines"]
