"""Shared helpers used across the toolkit."""

from .thresholds import (
    ANSWER_KEY_THRESHOLDS,
    LINE_LAYOUT_THRESHOLDS,
    OCR_THRESHOLDS,
)

__all__ = [
    "ANSWER_KEY_THRESHOLDS",
    "LINE_LAYOUT_THRESHOLDS",
    "OCR_THRESHOLDS",
]
