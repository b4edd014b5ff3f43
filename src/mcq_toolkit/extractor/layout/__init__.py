"""
Module: extractor.layout

Purpose:
    Reading-order reconstruction from word positions.

Key Modules:
    - lines: Word -> Line clustering with column-gutter splitting
    - columns: Left/right/full-width classification and reading order

Used By:
    - extractor.pipeline
"""

from .columns import ColumnSide, classify_line, reading_order
from .lines import group_lines

__all__ = [
    "ColumnSide",
    "classify_line",
    "group_lines",
    "reading_order",
]
