"""
Module: extractor.reading.text_layer

Purpose:
    Text-layer reader. Pulls word-level tokens with bounding boxes straight
    from a document's embedded text. A missing or locked text layer is a
    normal condition that triggers OCR fallback, so this reader returns
    an empty sequence instead of failing.

Key Functions:
    - read_text_layer_words(): Words from every page's text layer

Dependencies:
    - fitz (PyMuPDF): Word extraction

Used By:
    - extractor.reading.sources.TextLayerSource
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import fitz

from mcq_toolkit.core.models.words import Word
from ..errors import DocumentProtected
from ..utils.pdf import ensure_text_access

logger = logging.getLogger(__name__)


def read_text_layer_words(
    doc: fitz.Document,
    pages: Optional[Sequence[int]] = None,
) -> Tuple[Word, ...]:
    """
    Extract words from the embedded text layer.

    Args:
        doc: Open PyMuPDF document.
        pages: Optional 0-indexed page numbers; defaults to all pages.

    Returns:
        Words in (page, y, x) order. Empty when the document is protected
        or has no text layer.

    Example:
        >>> with open_document(Path("quiz.pdf")) as doc:
        ...     words = read_text_layer_words(doc)
        >>> words[0].text
        '1.'
    """
    try:
        ensure_text_access(doc)
    except DocumentProtected as e:
        logger.info(f"Text layer unavailable: {e}")
        return ()

    page_numbers = range(doc.page_count) if pages is None else pages
    words: List[Word] = []
    for page_number in page_numbers:
        if not 0 <= page_number < doc.page_count:
            logger.warning(f"Page {page_number} out of range ({doc.page_count} pages)")
            continue
        words.extend(_page_words(doc[page_number]))

    logger.debug(f"Text layer yielded {len(words)} words from {len(page_numbers)} page(s)")
    return tuple(sorted(words, key=lambda w: (w.page, w.y, w.x)))


def _page_words(page: fitz.Page) -> List[Word]:
    """Convert one page's get_text("words") tuples into Words."""
    try:
        raw = page.get_text("words")
    except (RuntimeError, ValueError) as e:
        logger.warning(f"Failed to extract text from page {page.number}: {e}")
        return []

    page_width = page.rect.width
    words: List[Word] = []
    # (x0, y0, x1, y1, text, block_no, line_no, word_no)
    for x0, y0, x1, y1, text, *_ in raw:
        if not text or not text.strip():
            continue
        words.append(
            Word(
                text=text,
                x=x0,
                y=y0,
                width=max(0.0, x1 - x0),
                height=max(0.0, y1 - y0),
                page=page.number,
                page_width=page_width,
            )
        )
    return words
