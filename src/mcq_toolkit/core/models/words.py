"""
Module: words

Purpose:
    Positional text primitives shared by both extraction paths. A Word is
    one recognised token with its box; a Line is the left-to-right cluster
    of Words that share a page and an approximately equal y.

Key Classes:
    - Word: Immutable token with bounding box and page geometry
    - Line: Immutable cluster of Words with normalised joined text

Dependencies:
    - dataclasses (std)

Used By:
    - extractor.reading: Produces Words
    - extractor.layout: Groups Words into Lines, orders Lines
    - extractor.detection: Parses Line text

Coordinates:
    All values are PDF points (1/72 inch) measured from the page's top-left
    corner. OCR readers convert pixel boxes back to points before creating
    Words, so both paths share one coordinate space.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Word:
    """
    Recognised text token with position.

    Attributes:
        text: Token text as extracted (not normalised).
        x: Left edge in PDF points.
        y: Top edge in PDF points.
        width: Box width in PDF points.
        height: Box height in PDF points.
        page: 0-indexed page number.
        page_width: Width of the originating page (needed for column math).

    Example:
        >>> w = Word("1.", x=50, y=100, width=8, height=11, page=0, page_width=595)
        >>> w.right
        58
    """
    text: str
    x: float
    y: float
    width: float
    height: float
    page: int
    page_width: float

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError(f"page must be non-negative: {self.page}")
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Word box must have non-negative size: {self.width}x{self.height}")
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class Line:
    """
    Words on one page sharing an approximately equal y.

    Attributes:
        page: 0-indexed page number.
        y: Top of the line (smallest word y).
        text: Normalised text of the words joined by single spaces.
        words: Constituent words ordered by x.

    Invariants:
        - words is non-empty and every word is on ``page``
    """
    page: int
    y: float
    text: str
    words: tuple[Word, ...]

    def __post_init__(self) -> None:
        if not self.words:
            raise ValueError("Line must contain at least one word")
        if any(w.page != self.page for w in self.words):
            raise ValueError(f"All words in a line must be on page {self.page}")

    @property
    def left(self) -> float:
        """Leftmost word's x."""
        return self.words[0].x

    @property
    def right(self) -> float:
        """Rightmost extent of the line."""
        return max(w.right for w in self.words)

    @property
    def page_width(self) -> float:
        return self.words[0].page_width

    def __repr__(self) -> str:
        return f"Line(page={self.page}, y={self.y:.1f}, text={self.text!r})"
