"""
CSV export of generated content.

Documents start with a UTF-8 byte-order mark (so spreadsheet apps pick the
right encoding), quote every field and separate rows with CRLF.
"""

import csv
import io
from typing import Iterable, List, Optional, Sequence, Tuple

from bookcast.core.models import ScriptBlock, StoryBlock
from bookcast.utils.text import slugify

BOM = "\ufeff"


def to_csv(rows: Iterable[Sequence[Optional[str]]]) -> str:
    """Render rows as a quote-all, CRLF-separated CSV document with a leading BOM."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    for row in rows:
        writer.writerow(["" if value is None else str(value) for value in row])
    text = buffer.getvalue()
    # No terminator after the last row
    if text.endswith("\r\n"):
        text = text[:-2]
    return BOM + text


def story_rows(blocks: Sequence[StoryBlock]) -> List[List[str]]:
    return [["STT", "Chapter", "Story Content"]] + [
        [str(block.index), block.title, block.content] for block in blocks
    ]


def script_rows(blocks: Sequence[ScriptBlock]) -> List[List[str]]:
    return [["STT", "Chapter", "Review Script"]] + [
        [str(block.index), block.chapter, block.text] for block in blocks
    ]


def prompt_rows(prompts: Sequence[str]) -> List[List[str]]:
    return [["STT", "Prompt"]] + [
        [str(number), prompt] for number, prompt in enumerate(prompts, start=1)
    ]


def export_filename(kind: str, book_title: str) -> str:
    return f"{kind}_{slugify(book_title)}.csv"


def export_story(blocks: Sequence[StoryBlock], book_title: str) -> Optional[Tuple[str, str]]:
    """``(filename, document)`` for the story blocks, or ``None`` when there is nothing to export."""
    if not blocks:
        return None
    return export_filename("story", book_title), to_csv(story_rows(blocks))


def export_script(blocks: Sequence[ScriptBlock], book_title: str) -> Optional[Tuple[str, str]]:
    if not blocks:
        return None
    return export_filename("review", book_title), to_csv(script_rows(blocks))


def export_prompts(prompts: Sequence[str], book_title: str) -> Optional[Tuple[str, str]]:
    if not prompts:
        return None
    return export_filename("prompts", book_title), to_csv(prompt_rows(prompts))
