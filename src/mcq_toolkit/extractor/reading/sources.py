"""
Module: extractor.reading.sources

Purpose:
    One capability interface for every way of getting words out of a
    document. The pipeline walks an ordered fallback chain of sources and
    stops at the first whose words reveal an answer-key structure.

Key Classes:
    - WordSource: Abstract capability ("extract words from a document")
    - TextLayerSource: Embedded text layer (cheap, tight line tolerance)
    - OcrSource: Rendered pages + Tesseract (expensive, loose tolerance)

Key Functions:
    - default_sources(): The standard chain for a config

Dependencies:
    - extractor.reading.text_layer
    - extractor.reading.ocr

Used By:
    - extractor.pipeline: Iterates the chain

Extending:
    Any other extractor (e.g. a model-based one) plugs in as another
    WordSource subclass appended to the chain.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Tuple

import fitz

from mcq_toolkit.core.models.words import Word
from ..config import ExtractionConfig
from .ocr import ocr_session, read_ocr_words
from .text_layer import read_text_layer_words

logger = logging.getLogger(__name__)


class WordSource(ABC):
    """Strategy that extracts positioned words from an open document."""

    #: Short identifier reported in results and diagnostics
    name: str = ""

    @abstractmethod
    def line_tolerance(self, config: ExtractionConfig) -> float:
        """Vertical tolerance for grouping this source's words into lines."""

    @abstractmethod
    def extract(self, doc: fitz.Document, config: ExtractionConfig) -> Tuple[Word, ...]:
        """
        Extract words from every page.

        Raises:
            ExtractionUnavailable: If the source cannot run at all.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class TextLayerSource(WordSource):
    name = "text_layer"

    def line_tolerance(self, config: ExtractionConfig) -> float:
        return config.line_tolerance_text

    def extract(self, doc: fitz.Document, config: ExtractionConfig) -> Tuple[Word, ...]:
        return read_text_layer_words(doc)


class OcrSource(WordSource):
    name = "ocr"

    def line_tolerance(self, config: ExtractionConfig) -> float:
        return config.line_tolerance_ocr

    def extract(self, doc: fitz.Document, config: ExtractionConfig) -> Tuple[Word, ...]:
        with ocr_session(config) as session:
            return read_ocr_words(doc, session, config)


def default_sources(config: ExtractionConfig) -> List[WordSource]:
    """Text layer first, OCR second (unless OCR fallback is disabled)."""
    sources: List[WordSource] = [TextLayerSource()]
    if config.enable_ocr_fallback:
        sources.append(OcrSource())
    return sources
