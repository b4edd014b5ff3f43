"""
Module: extractor.layout.columns

Purpose:
    Column splitting - classifies each line as left column, right column
    or full width, and produces a single column-first reading order that
    spans every page.

Key Functions:
    - classify_line(): LEFT / RIGHT / FULL decision for one line
    - reading_order(): Lines -> column-first reading order

Key Classes:
    - ColumnSide: Column classification

Dependencies:
    - mcq_toolkit.core.models.words: Line

Used By:
    - extractor.pipeline: Orders each source's lines
"""

from __future__ import annotations

import logging
from enum import Enum
from itertools import groupby
from typing import Iterable, List, Tuple

from mcq_toolkit.common.thresholds import LINE_LAYOUT_THRESHOLDS
from mcq_toolkit.core.models.words import Line

logger = logging.getLogger(__name__)


class ColumnSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    FULL = "full"


def classify_line(
    line: Line,
    margin: float = LINE_LAYOUT_THRESHOLDS.column_split_margin,
) -> ColumnSide:
    """
    Classify a line against its page's horizontal midpoint.

    A line whose span starts more than ``margin`` left of the midpoint and
    ends more than ``margin`` right of it is full width (e.g. a page
    header). Otherwise it is right-column when its leftmost word starts
    past the midpoint, left-column when not.

    Example:
        >>> classify_line(header_line, margin=36.0)
        <ColumnSide.FULL: 'full'>
    """
    midpoint = line.page_width / 2
    if line.left < midpoint - margin and line.right > midpoint + margin:
        return ColumnSide.FULL
    if line.left > midpoint:
        return ColumnSide.RIGHT
    return ColumnSide.LEFT


def reading_order(
    lines: Iterable[Line],
    *,
    margin: float = LINE_LAYOUT_THRESHOLDS.column_split_margin,
) -> Tuple[Line, ...]:
    """
    Order lines column-first across the whole document.

    For each page in order: all left-stream lines top-to-bottom (full-width
    lines included), then all right-column lines top-to-bottom.

    Args:
        lines: Lines from group_lines(), any order.
        margin: Full-width detection margin in points.

    Returns:
        Lines in reading order.
    """
    ordered: List[Line] = []
    full_width = 0
    by_page = sorted(lines, key=lambda ln: (ln.page, ln.y, ln.left))
    for _, page_lines in groupby(by_page, key=lambda ln: ln.page):
        left: List[Line] = []
        right: List[Line] = []
        for line in page_lines:
            side = classify_line(line, margin)
            if side is ColumnSide.RIGHT:
                right.append(line)
            else:
                full_width += side is ColumnSide.FULL
                left.append(line)
        ordered.extend(left)
        ordered.extend(right)

    logger.debug(f"Reading order: {len(ordered)} lines ({full_width} full width)")
    return tuple(ordered)
