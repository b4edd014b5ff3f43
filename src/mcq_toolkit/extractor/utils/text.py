"""
Module: extractor.utils.text

Purpose:
    Text normalisation for joined line text. Cleans up the separator
    glyphs and stray punctuation that both PDF text layers and OCR leave
    around column rules, table borders and fill-in blanks.

Key Functions:
    - normalize_line_text(): Canonical text for a grouped line
    - join_words(): Join word texts with single spaces

Dependencies:
    - re (std)

Used By:
    - extractor.layout.lines: Normalises every grouped line
"""

from __future__ import annotations

import re
from typing import Iterable

# Bar-like glyphs that appear as standalone tokens around column rules
_ISOLATED_BAR = re.compile(r"(?:(?<=\s)|^)[|¦‖│]+(?=\s|$)")
# Fill-in "answer lines" made of dots or underscores
_ANSWER_LINE = re.compile(r"(?:\.{4,}|_{3,}|…{2,})")
_WHITESPACE = re.compile(r"\s+")
# Separator and punctuation noise at either end of a line. Trailing
# sentence punctuation (".", "?", "!", ")") is kept.
_LEADING_NOISE = re.compile(r"^[\s|¦‖│:;,.•·_~*-]+")
_TRAILING_NOISE = re.compile(r"[\s|¦‖│:;,•·_~*]+$")


def join_words(texts: Iterable[str]) -> str:
    """Join word texts with single spaces, skipping empty tokens."""
    return " ".join(t.strip() for t in texts if t and t.strip())


def normalize_line_text(text: str) -> str:
    """
    Normalise joined line text.

    Steps:
        1. Replace non-breaking spaces, drop fill-in answer lines
        2. Drop isolated bar glyphs (column rules read as "|")
        3. Collapse whitespace runs
        4. Trim leading separators/punctuation and trailing separators/colons

    Args:
        text: Raw joined text

    Returns:
        Normalised text (may be empty)

    Example:
        >>> normalize_line_text("| 1.  What is   2 + 2 ? |")
        '1. What is 2 + 2 ?'
        >>> normalize_line_text("Answer Key:")
        'Answer Key'
    """
    text = text.replace("\u00a0", " ")
    text = _ANSWER_LINE.sub(" ", text)
    text = _ISOLATED_BAR.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    text = _LEADING_NOISE.sub("", text)
    text = _TRAILING_NOISE.sub("", text)
    return text
