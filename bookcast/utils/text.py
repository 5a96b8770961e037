"""
Plain-text helpers: upload chunking, filename slugs, duration labels.
"""

import re
import unicodedata
from typing import List


def chunk_text(text: str, max_chars: int = 3000) -> List[str]:
    """
    Split ``text`` into chunks of at most ``max_chars`` characters.

    Chunks only break between lines, so a line is never split across two
    chunks; a single line longer than the budget becomes a chunk of its own.
    Leading/trailing blank lines of each chunk are dropped.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be greater than zero")
    if not text or not text.strip():
        return []

    chunks: List[str] = []
    current: List[str] = []
    current_len = 0

    def flush():
        chunk = "\n".join(current).strip("\n")
        if chunk.strip():
            chunks.append(chunk)

    for line in text.splitlines():
        added = len(line) + (1 if current else 0)
        if current and current_len + added > max_chars:
            flush()
            current, current_len = [], 0
            added = len(line)
        current.append(line)
        current_len += added

    if current:
        flush()
    return chunks


def slugify(value: str, default: str = "untitled") -> str:
    """ASCII, dash-separated slug suitable for export filenames."""
    text = (value or default).lower().replace("đ", "d")
    text = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[^a-z0-9]+", "-", text).strip("-")
    return text or default


def format_duration(minutes: int) -> str:
    """Render a duration as ``{H}H{MM}M``, e.g. 240 -> ``4H00M``."""
    return f"{minutes // 60}H{minutes % 60:02d}M"
