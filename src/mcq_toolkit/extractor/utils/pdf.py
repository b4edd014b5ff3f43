"""
Module: extractor.utils.pdf

Purpose:
    Document access and page rendering utilities. Opens documents from a
    path or raw bytes, checks text-layer access, and renders pages to
    grayscale images for OCR.

Key Functions:
    - open_document(): Open a path or bytes as a PyMuPDF document
    - ensure_text_access(): Raise DocumentProtected for locked text layers
    - render_page(): Render a whole page to a grayscale PIL image
    - binarize(): Threshold a grayscale image to black text on white

Dependencies:
    - fitz (PyMuPDF): PDF access and rendering
    - PIL.Image: Image handling
    - numpy: Pixel thresholding

Used By:
    - extractor.pipeline: Opens the document once per extraction
    - extractor.reading.text_layer: Checks text access
    - extractor.reading.ocr: Renders pages before recognition
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import fitz
import numpy as np
from PIL import Image

from ..errors import DocumentProtected, DocumentUnreadable, ExtractionUnavailable

logger = logging.getLogger(__name__)

DocumentSource = Union[Path, str, bytes, bytearray]


def describe_source(source: DocumentSource) -> str:
    """Short human-readable name for logs and diagnostics."""
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return Path(source).name


def open_document(source: DocumentSource) -> fitz.Document:
    """
    Open a document from a filesystem path or raw bytes.

    Byte input is always parsed as PDF. Path input may be any format
    PyMuPDF understands (PDF, or a scanned page image).

    Args:
        source: Path, path string, or document bytes.

    Returns:
        Open PyMuPDF document with at least one page. Callers own it and
        should use it as a context manager.

    Raises:
        DocumentUnreadable: If the input is missing, empty, corrupt, or
            has no pages.

    Example:
        >>> with open_document(Path("quiz.pdf")) as doc:
        ...     print(doc.page_count)
        4
    """
    name = describe_source(source)
    try:
        if isinstance(source, (bytes, bytearray)):
            if not source:
                raise DocumentUnreadable("Document is empty (0 bytes)")
            doc = fitz.open(stream=bytes(source), filetype="pdf")
        else:
            path = Path(source)
            if not path.exists():
                raise DocumentUnreadable(f"Document not found: {path}")
            if path.stat().st_size == 0:
                raise DocumentUnreadable(f"Document is empty: {path}")
            doc = fitz.open(path)
    except (RuntimeError, ValueError, OSError) as e:
        raise DocumentUnreadable(f"Cannot open {name}: {e}") from e

    if doc.page_count == 0:
        doc.close()
        raise DocumentUnreadable(f"Document has no pages: {name}")

    logger.debug(f"Opened {name}: {doc.page_count} page(s), encrypted={doc.is_encrypted}")
    return doc


def ensure_text_access(doc: fitz.Document) -> None:
    """
    Check that the document's text layer may be read.

    Documents that need a password are first tried with an empty user
    password (common for owner-password-only files).

    Raises:
        DocumentProtected: If the document stays locked, or its permissions
            forbid copying text.
    """
    if doc.needs_pass and not doc.authenticate(""):
        raise DocumentProtected("Document is password-protected")
    if doc.is_encrypted and not (doc.permissions & fitz.PDF_PERM_COPY):
        raise DocumentProtected("Document permissions forbid text extraction")


def render_page(
    page: fitz.Page,
    scale: float,
    *,
    binarize_threshold: Optional[int] = None,
) -> Image.Image:
    """
    Render a full page to a grayscale image.

    Args:
        page: PyMuPDF page object.
        scale: Pixels per PDF point (render_scale).
        binarize_threshold: Optional grayscale cut-off; see binarize().

    Returns:
        Grayscale ("L") PIL image.

    Raises:
        ExtractionUnavailable: If PyMuPDF cannot render the page.
    """
    matrix = fitz.Matrix(scale, scale)
    try:
        # Render directly to grayscale; no RGB->L conversion needed
        pix = page.get_pixmap(matrix=matrix, alpha=False, colorspace=fitz.csGRAY)
    except (RuntimeError, ValueError) as e:
        raise ExtractionUnavailable(f"Failed to render page {page.number}: {e}") from e

    image = Image.frombytes("L", (pix.width, pix.height), pix.samples)
    if binarize_threshold is not None:
        image = binarize(image, binarize_threshold)
    return image


def binarize(image: Image.Image, threshold: int) -> Image.Image:
    """
    Threshold a grayscale image: pixels at or below ``threshold`` become
    black, everything else white. Removes scanner shading that Tesseract
    otherwise reads as stray glyphs.
    """
    arr = np.asarray(image.convert("L"))
    out = np.where(arr <= threshold, 0, 255).astype(np.uint8)
    return Image.fromarray(out)
