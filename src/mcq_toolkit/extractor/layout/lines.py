"""
Module: extractor.layout.lines

Purpose:
    Line grouping - clusters positioned words into text lines per page
    using a vertical tolerance, then splits lines that straddle the column
    gutter of a two-column page.

Key Functions:
    - group_lines(): Words -> Lines ordered by (page, y)

Dependencies:
    - mcq_toolkit.core.models.words: Word, Line
    - extractor.utils.text: Line text normalisation

Used By:
    - extractor.pipeline: Groups each source's words

Algorithm:
    1. Per page, visit words sorted by (y, x)
    2. A word joins an open line whose reference y is within tolerance,
       otherwise it opens a new line (reference y = its own y)
    3. Order each line's words by x; split at any gap wider than
       gutter_min that contains the page midpoint
    4. Join with single spaces, normalise, drop lines left empty
"""

from __future__ import annotations

import logging
from itertools import groupby
from typing import Iterable, List, Sequence, Tuple

from mcq_toolkit.common.thresholds import LINE_LAYOUT_THRESHOLDS
from mcq_toolkit.core.models.words import Line, Word
from ..utils.text import join_words, normalize_line_text

logger = logging.getLogger(__name__)


def group_lines(
    words: Iterable[Word],
    tolerance: float,
    *,
    gutter_min: float = LINE_LAYOUT_THRESHOLDS.column_gutter_min,
) -> Tuple[Line, ...]:
    """
    Cluster words into lines.

    Args:
        words: Words from any extraction path, any order.
        tolerance: Maximum |word.y - line.y| for a word to join a line.
            Tighter for text-layer words, looser for OCR words.
        gutter_min: Minimum horizontal gap across the page midpoint that
            separates a left-column fragment from a right-column fragment.

    Returns:
        Lines ordered by (page, y, left).

    Example:
        >>> lines = group_lines(words, tolerance=3.0)
        >>> lines[0].text
        '1. What is the capital of France?'
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be non-negative: {tolerance}")

    ordered = sorted(words, key=lambda w: (w.page, w.y, w.x))
    lines: List[Line] = []
    for page, page_words in groupby(ordered, key=lambda w: w.page):
        for cluster in _cluster_rows(list(page_words), tolerance):
            for segment in _split_at_gutter(cluster, gutter_min):
                line = _make_line(page, segment)
                if line is not None:
                    lines.append(line)

    lines.sort(key=lambda ln: (ln.page, ln.y, ln.left))
    logger.debug(f"Grouped {len(ordered)} words into {len(lines)} lines (tolerance={tolerance})")
    return tuple(lines)


def _cluster_rows(page_words: Sequence[Word], tolerance: float) -> List[List[Word]]:
    """Assign each word to the open row whose reference y is within tolerance."""
    rows: List[Tuple[float, List[Word]]] = []
    for word in page_words:
        target = None
        # Rows are opened in increasing y; only recent rows can still match
        for ref_y, row in reversed(rows):
            if ref_y < word.y - tolerance:
                break
            if abs(word.y - ref_y) <= tolerance:
                target = row
                break
        if target is None:
            rows.append((word.y, [word]))
        else:
            target.append(word)
    return [row for _, row in rows]


def _split_at_gutter(row: List[Word], gutter_min: float) -> List[List[Word]]:
    """Split an x-ordered row wherever a wide gap spans the page midpoint."""
    row = sorted(row, key=lambda w: w.x)
    midpoint = row[0].page_width / 2
    segments: List[List[Word]] = [[row[0]]]
    for prev, word in zip(row, row[1:]):
        gap = word.x - prev.right
        if gap >= gutter_min and prev.right <= midpoint <= word.x:
            segments.append([word])
        else:
            segments[-1].append(word)
    return segments


def _make_line(page: int, segment: List[Word]) -> Line | None:
    text = normalize_line_text(join_words(w.text for w in segment))
    if not text:
        return None
    return Line(
        page=page,
        y=min(w.y for w in segment),
        text=text,
        words=tuple(segment),
    )
