"""
Module: extractor.errors

Purpose:
    Error taxonomy for document extraction. Only DocumentUnreadable leaves
    the pipeline; the others are caught at the stage that owns them and
    turned into an empty result, a fallback, or a per-question count.

Key Classes:
    - ExtractionError: Base class
    - DocumentUnreadable: Corrupt, empty, missing or unsupported input (fatal)
    - DocumentProtected: Encrypted text layer (triggers OCR fallback)
    - ExtractionUnavailable: OCR engine or page render failure
    - StructureNotFound: No answer key after every extraction attempt

Used By:
    - extractor.utils.pdf: Raises DocumentUnreadable / DocumentProtected
    - extractor.reading: Raises ExtractionUnavailable
    - extractor.pipeline: Catches the non-fatal errors
    - extractor.batch: Catches ExtractionError per document
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for document extraction errors."""
    pass


class DocumentUnreadable(ExtractionError):
    """Document bytes are corrupt, empty or not a supported format."""
    pass


class DocumentProtected(ExtractionError):
    """Text layer is encrypted or copy-protected."""
    pass


class ExtractionUnavailable(ExtractionError):
    """OCR engine or page renderer could not produce words."""
    pass


class StructureNotFound(ExtractionError):
    """No answer-key header or dense key row was located."""
    pass
