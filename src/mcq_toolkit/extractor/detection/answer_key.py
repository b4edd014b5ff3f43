"""
Module: extractor.detection.answer_key

Purpose:
    Answer-key detection - locates where the key section begins and reads
    the (question number, letter) pairs out of it.

Key Functions:
    - locate_answer_key(): Header line, or failing that a dense pair row
    - parse_answer_key(): Pairs from the key start over a page window
    - count_key_pairs(): Number-letter pairs on a single line
    - is_key_header(): Whole-line "Answer Key" heading check

Key Classes:
    - KeyLocation: Where the key starts and which signal found it

Dependencies:
    - re (std)
    - mcq_toolkit.core.models.questions: AnswerKey

Used By:
    - extractor.pipeline: Chooses the word source and cuts question lines
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from mcq_toolkit.common.thresholds import ANSWER_KEY_THRESHOLDS
from mcq_toolkit.core.models.questions import AnswerKey
from mcq_toolkit.core.models.words import Line

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(r"^answers?\s*keys?\b", re.IGNORECASE)
HEADER_LABEL_PREFIXES = (":", "-", "\u2013", "(", "[", "/", "|")
PAIR_PATTERN = re.compile(r"(?<!\d)(\d{1,3})\s*[.):\-]?\s*\(?([A-Ea-e])\)?(?![A-Za-z])")

SIGNAL_HEADER = "header"
SIGNAL_DENSE_ROW = "dense_row"


@dataclass(frozen=True)
class KeyLocation:
    """
    Start of the answer-key section.

    Attributes:
        page: 0-based page of the key start.
        y: Top of the key start line, in points.
        line_index: Index of the key start line in the reading order the
            locator was given. Lines before it are question lines.
        signal: "header" or "dense_row".
    """
    page: int
    y: float
    line_index: int
    signal: str

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "y": round(self.y, 2),
            "line_index": self.line_index,
            "signal": self.signal,
        }


def iter_key_pairs(text: str) -> Iterator[Tuple[int, str]]:
    """
    Yield (number, letter) pairs found anywhere in a line.

    Example:
        >>> list(iter_key_pairs("1. A   2) c  10-D"))
        [(1, 'A'), (2, 'c'), (10, 'D')]
    """
    for match in PAIR_PATTERN.finditer(text):
        yield int(match.group(1)), match.group(2)


def count_key_pairs(text: str) -> int:
    return sum(1 for _ in iter_key_pairs(text))


def is_key_header(text: str) -> bool:
    """
    Check whether a whole line is an answer-key heading.

    The heading may carry a short label ("Answer Key - Form B") or the
    first key pairs ("Answer Key: 1. A 2. C"), but not running prose, so
    "Answer key will be shared after the exam." is not a heading.

    Example:
        >>> is_key_header("ANSWER KEYS (Unit 3)")
        True
        >>> is_key_header("Answer key will be shared after the exam.")
        False
    """
    text = text.strip()
    match = HEADER_PATTERN.match(text)
    if match is None:
        return False
    rest = text[match.end():].strip()
    if not rest or count_key_pairs(rest):
        return True
    return rest.startswith(HEADER_LABEL_PREFIXES) and len(rest) <= ANSWER_KEY_THRESHOLDS.header_label_max


def _is_key_row(text: str) -> bool:
    """A line made only of key pairs ("1.A 2.B 3.C"), unlike "a) 2 b) 3 c) 4"."""
    if count_key_pairs(text) < ANSWER_KEY_THRESHOLDS.block_row_min_pairs:
        return False
    return not any(ch.isalpha() for ch in PAIR_PATTERN.sub("", text))


def _key_block_start(lines: Sequence[Line], index: int) -> int:
    """Walk back over key rows directly above a dense row on the same page."""
    page = lines[index].page
    while index > 0 and lines[index - 1].page == page and _is_key_row(lines[index - 1].text):
        index -= 1
    return index


def _validate_density(threshold: int) -> None:
    low, high = ANSWER_KEY_THRESHOLDS.pair_density_min, ANSWER_KEY_THRESHOLDS.pair_density_max
    if not low <= threshold <= high:
        raise ValueError(f"density_threshold must be between {low} and {high}: {threshold}")


def locate_answer_key(
    lines: Sequence[Line],
    *,
    density_threshold: int = ANSWER_KEY_THRESHOLDS.pair_density,
) -> Optional[KeyLocation]:
    """
    Find the start of the answer-key section.

    A header line ("Answer Key", "ANSWER KEYS", "Answerkey") anywhere in the
    document wins over a dense row. Without a header, the first line
    carrying at least ``density_threshold`` number-letter pairs is taken,
    moved up over any shorter key rows directly above it on the same page.

    Args:
        lines: Lines in reading order.
        density_threshold: Minimum pairs for a header-less key row.

    Returns:
        KeyLocation, or None when neither signal is present.

    Example:
        >>> location = locate_answer_key(lines)
        >>> location.signal
        'header'
    """
    _validate_density(density_threshold)

    for index, line in enumerate(lines):
        if is_key_header(line.text):
            logger.debug(f"Answer key header on page {line.page + 1}: {line.text!r}")
            return KeyLocation(page=line.page, y=line.y, line_index=index, signal=SIGNAL_HEADER)

    for index, line in enumerate(lines):
        pairs = count_key_pairs(line.text)
        if pairs >= density_threshold:
            start = _key_block_start(lines, index)
            logger.debug(
                f"Answer key row on page {line.page + 1} ({pairs} pairs), "
                f"{index - start} shorter row(s) above"
            )
            first = lines[start]
            return KeyLocation(page=first.page, y=first.y, line_index=start, signal=SIGNAL_DENSE_ROW)

    return None


def parse_answer_key(
    lines: Sequence[Line],
    location: KeyLocation,
    *,
    page_span: int = ANSWER_KEY_THRESHOLDS.page_span,
) -> AnswerKey:
    """
    Read the key pairs from the key start onwards.

    Scans the key start line and every later line on the same page, then
    every line of the following pages until ``page_span`` pages have been
    covered. A number that appears twice keeps its later letter.

    Args:
        lines: The same reading-ordered lines given to locate_answer_key().
        location: Result of locate_answer_key().
        page_span: Number of pages scanned, starting at the key page.

    Returns:
        AnswerKey with upper-cased letters.
    """
    if page_span < 1:
        raise ValueError(f"page_span must be at least 1: {page_span}")

    last_page = location.page + page_span - 1
    pairs: List[Tuple[int, str]] = []
    for index, line in enumerate(lines):
        if line.page < location.page or line.page > last_page:
            continue
        if line.page == location.page and index < location.line_index:
            continue
        pairs.extend(iter_key_pairs(line.text))

    key = AnswerKey.from_pairs(pairs)
    if len(key) < len(pairs):
        logger.debug(f"Answer key: {len(pairs) - len(key)} repeated numbers, later entries kept")
    logger.debug(f"Parsed answer key with {len(key)} entries from pages {location.page + 1}-{last_page + 1}")
    return key
