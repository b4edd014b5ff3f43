"""
Module: extractor.reading.ocr

Purpose:
    Raster OCR reader, used only when the text layer gives no recognisable
    answer-key structure. Pages are rendered with PyMuPDF and recognised
    with Tesseract; word boxes are converted back to PDF points.

Key Functions:
    - ocr_session(): Scoped engine acquisition (one init, one teardown)
    - read_ocr_words(): Render and recognise a page range

Key Classes:
    - OcrEngine: Initialised engine settings (language, page segmentation)
    - OcrSession: Engine plus bounded recognition worker pool

Dependencies:
    - fitz (PyMuPDF): Page rendering
    - pytesseract: Tesseract word boxes via image_to_data
    - concurrent.futures: Per-page recognition workers

Used By:
    - extractor.reading.sources.OcrSource

Threading:
    A fitz.Document must not be shared between threads, so pages are
    rendered on the calling thread and only recognition runs in workers.
    No more pages are rendered ahead than there are workers.
    The engine is initialised once before any worker starts and is
    read-only afterwards.
"""

from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Deque, Generator, List, Optional, Sequence, Tuple

import fitz
import pytesseract
from PIL import Image

from mcq_toolkit.core.models.words import Word
from ..config import ExtractionConfig
from ..errors import ExtractionUnavailable
from ..utils.pdf import render_page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OcrEngine:
    """
    Initialised Tesseract settings for one processing session.

    Attributes:
        language: Single Tesseract language code (e.g. "eng").
        psm: Page segmentation mode.
        version: Tesseract version reported at initialisation.
    """
    language: str
    psm: int
    version: str = ""

    @property
    def tesseract_config(self) -> str:
        return f"--psm {self.psm}"

    def recognize(
        self,
        image: Image.Image,
        *,
        page: int,
        page_width: float,
        scale: float,
    ) -> List[Word]:
        """
        Recognise words on a rendered page.

        Args:
            image: Rendered page image.
            page: 0-indexed page number the image came from.
            page_width: Page width in PDF points.
            scale: Pixels per point used when rendering.

        Returns:
            Words in PDF points, in Tesseract output order.

        Raises:
            ExtractionUnavailable: If Tesseract fails on the image.
        """
        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.language,
                config=self.tesseract_config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, RuntimeError, OSError) as e:
            raise ExtractionUnavailable(f"Tesseract failed on page {page}: {e}") from e

        words: List[Word] = []
        for i, text in enumerate(data.get("text", [])):
            if not text or not str(text).strip():
                continue
            # Structural rows (page/block/line) carry conf -1
            if float(data["conf"][i]) < 0:
                continue
            words.append(
                Word(
                    text=str(text),
                    x=data["left"][i] / scale,
                    y=data["top"][i] / scale,
                    width=data["width"][i] / scale,
                    height=data["height"][i] / scale,
                    page=page,
                    page_width=page_width,
                )
            )
        return words


class OcrSession:
    """
    One initialised engine plus a bounded pool of recognition workers.

    Obtain through ocr_session(); the pool is shut down when the session
    context exits.
    """

    def __init__(self, engine: OcrEngine, executor: ThreadPoolExecutor):
        self.engine = engine
        self._executor = executor

    def submit(
        self,
        image: Image.Image,
        *,
        page: int,
        page_width: float,
        scale: float,
    ) -> Future:
        """Queue recognition of one rendered page."""
        return self._executor.submit(
            self.engine.recognize,
            image,
            page=page,
            page_width=page_width,
            scale=scale,
        )


def initialise_engine(config: ExtractionConfig) -> OcrEngine:
    """
    Verify the Tesseract binary and language data.

    Raises:
        ExtractionUnavailable: If Tesseract is missing or the configured
            language is not installed.
    """
    try:
        version = str(pytesseract.get_tesseract_version())
        languages = pytesseract.get_languages(config="")
    except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError, OSError) as e:
        raise ExtractionUnavailable(f"Tesseract is not available: {e}") from e

    if config.ocr_language not in languages:
        raise ExtractionUnavailable(
            f"Tesseract language {config.ocr_language!r} is not installed "
            f"(available: {', '.join(sorted(languages)) or 'none'})"
        )
    return OcrEngine(language=config.ocr_language, psm=config.ocr_psm, version=version)


@contextmanager
def ocr_session(config: ExtractionConfig) -> Generator[OcrSession, None, None]:
    """
    Scoped OCR engine acquisition.

    Initialises the engine once, yields a session whose workers share it,
    and tears the pool down even if recognition fails partway through.

    Example:
        >>> with ocr_session(config) as session:
        ...     words = read_ocr_words(doc, session, config)
    """
    engine = initialise_engine(config)
    executor = ThreadPoolExecutor(max_workers=config.ocr_workers, thread_name_prefix="ocr")
    logger.debug(
        f"OCR session started: tesseract {engine.version}, lang={engine.language}, "
        f"psm={engine.psm}, workers={config.ocr_workers}"
    )
    try:
        yield OcrSession(engine, executor)
    finally:
        executor.shutdown(wait=True, cancel_futures=True)
        logger.debug("OCR session closed")


def read_ocr_words(
    doc: fitz.Document,
    session: OcrSession,
    config: ExtractionConfig,
    pages: Optional[Sequence[int]] = None,
) -> Tuple[Word, ...]:
    """
    Render pages and recognise their words.

    Args:
        doc: Open PyMuPDF document.
        session: Active OCR session.
        config: Extraction settings (render_scale, binarisation).
        pages: Optional 0-indexed page numbers; defaults to all pages.

    Returns:
        Words in (page, y, x) order regardless of worker completion order.

    Raises:
        ExtractionUnavailable: If any page cannot be rendered or recognised.
    """
    page_numbers = range(doc.page_count) if pages is None else pages
    scale = config.render_scale
    # At most one rendered page per worker is held awaiting recognition
    window = config.ocr_workers
    pending: Deque[Future] = deque()
    words: List[Word] = []
    recognised = 0

    for page_number in page_numbers:
        if not 0 <= page_number < doc.page_count:
            logger.warning(f"Page {page_number} out of range ({doc.page_count} pages)")
            continue
        while len(pending) >= window:
            words.extend(pending.popleft().result())
            recognised += 1
        try:
            page = doc[page_number]
        except (RuntimeError, ValueError) as e:
            raise ExtractionUnavailable(f"Cannot access page {page_number}: {e}") from e

        image = render_page(page, scale, binarize_threshold=config.ocr_binarize_threshold)
        pending.append(
            session.submit(image, page=page_number, page_width=page.rect.width, scale=scale)
        )

    while pending:
        words.extend(pending.popleft().result())
        recognised += 1

    logger.debug(f"OCR yielded {len(words)} words from {recognised} page(s) at {config.render_dpi} DPI")
    return tuple(sorted(words, key=lambda w: (w.page, w.y, w.x)))
