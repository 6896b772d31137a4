"""
Comment stripping and whitespace normalization for source text.

Stages run in a fixed order, each one feeding the next:

1. markup comments        <!-- ... -->
2. line comments          // ...
3. block comments         /* ... */
4. style line comments    // ... after an opening <style> tag
5. style block comments   /* ... */ after an opening <style> tag
6. empty lines
7. trailing whitespace per line
8. blank runs at both ends of the buffer

Everything here is pattern based. Nothing is parsed, so comment-like text
inside string literals is stripped as well.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Tuple

from .models import CleanReport, StageConfig
from .rules import (
    BLOCK_COMMENT_RE,
    LINE_COMMENT_RE,
    MARKUP_COMMENT_RE,
    STYLE_OPEN_RE,
)

logger = logging.getLogger(__name__)


def strip_markup_comments(text: str) -> str:
    return MARKUP_COMMENT_RE.sub("", text)


def strip_line_comments(text: str) -> str:
    return LINE_COMMENT_RE.sub("", text)


def strip_block_comments(text: str) -> str:
    return BLOCK_COMMENT_RE.sub("", text)


def _after_style_open(text: str, pattern: re.Pattern) -> str:
    """
    Apply `pattern` only to text following the first opening <style> tag.

    The earliest-ending <style...> match marks where style scope begins.
    There is no check for a closing </style>: once a tag has opened, the
    rest of the buffer counts as style text.
    """
    m = STYLE_OPEN_RE.search(text)
    if m is None:
        return text
    start = m.end()
    return text[:start] + pattern.sub("", text[start:])


def strip_style_line_comments(text: str) -> str:
    return _after_style_open(text, LINE_COMMENT_RE)


def strip_style_block_comments(text: str) -> str:
    return _after_style_open(text, BLOCK_COMMENT_RE)


def remove_empty_lines(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if line.strip())


def trim_trailing_whitespace(text: str) -> str:
    # Indentation is left alone.
    return "\n".join(line.rstrip() for line in text.split("\n"))


def trim_file_ends(text: str) -> str:
    """
    Drop leading whitespace up to its last newline and trailing whitespace
    from its first newline. Whitespace on the first and last content lines
    stays.
    """
    head = text[: len(text) - len(text.lstrip())]
    i = head.rfind("\n")
    if i >= 0:
        text = text[i + 1 :]

    tail = text[len(text.rstrip()) :]
    i = tail.find("\n")
    if i >= 0:
        text = text[: len(text) - len(tail) + i]
    return text


Stage = Tuple[str, str, Callable[[str], str]]

STAGES: List[Stage] = [
    ("markup_comments", "remove_markup_comments", strip_markup_comments),
    ("line_comments", "remove_line_comments", strip_line_comments),
    ("block_comments", "remove_line_comments", strip_block_comments),
    ("style_line_comments", "remove_style_comments", strip_style_line_comments),
    ("style_block_comments", "remove_style_comments", strip_style_block_comments),
    ("empty_lines", "remove_empty_lines", remove_empty_lines),
    ("trailing_whitespace", "trim_trailing_whitespace", trim_trailing_whitespace),
    ("file_ends", "trim_file_ends", trim_file_ends),
]


def clean_text_with_report(
    text: str, config: Optional[StageConfig] = None
) -> Tuple[str, CleanReport]:
    """
    Run every enabled stage over `text` and describe what changed.

    Sizes are counted in characters. The input string is never modified;
    a disabled stage leaves the buffer exactly as it found it.
    """
    config = config or StageConfig()
    cleaned = text
    ran: List[str] = []

    for name, flag, stage in STAGES:
        if not getattr(config, flag):
            continue
        before = cleaned
        cleaned = stage(cleaned)
        ran.append(name)
        if name == "empty_lines":
            logger.info(
                "stage %s done (%d lines -> %d lines)",
                name,
                before.count("\n") + 1,
                cleaned.count("\n") + 1 if cleaned else 0,
            )
        else:
            logger.info("stage %s done (%d -> %d chars)", name, len(before), len(cleaned))

    original_size = len(text)
    cleaned_size = len(cleaned)
    saved = original_size - cleaned_size
    percent = round(saved / original_size * 100, 2) if original_size else 0.0

    report = CleanReport(
        original_size=original_size,
        cleaned_size=cleaned_size,
        saved_bytes=saved,
        saved_percent=percent,
        lines_before=text.count("\n") + 1 if text else 0,
        lines_after=cleaned.count("\n") + 1 if cleaned else 0,
        stages=ran,
    )
    return cleaned, report


def clean_text(text: str, config: Optional[StageConfig] = None) -> str:
    cleaned, _ = clean_text_with_report(text, config)
    return cleaned
