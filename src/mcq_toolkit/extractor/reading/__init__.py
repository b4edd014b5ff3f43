"""
Module: extractor.reading

Purpose:
    Word extraction from documents. The text-layer reader is tried first;
    the raster OCR reader is the fallback.

Key Modules:
    - text_layer: Words from the embedded text layer
    - ocr: Words from rendered pages via Tesseract
    - sources: WordSource interface and the fallback chain

Dependencies:
    - fitz (PyMuPDF): Text extraction and rendering
    - pytesseract: OCR

Used By:
    - extractor.pipeline: Orchestrates the fallback chain
"""

from .ocr import OcrEngine, OcrSession, ocr_session, read_ocr_words
from .sources import OcrSource, TextLayerSource, WordSource, default_sources
from .text_layer import read_text_layer_words

__all__ = [
    "OcrEngine",
    "OcrSession",
    "OcrSource",
    "TextLayerSource",
    "WordSource",
    "default_sources",
    "ocr_session",
    "read_ocr_words",
    "read_text_layer_words",
]
