"""
Module: extractor.config

Purpose:
    Configuration dataclass for the extraction pipeline. Provides immutable
    settings for OCR, line clustering, column splitting and answer-key
    detection, validated on construction.

Key Classes:
    - ExtractionConfig: Main configuration for extraction

Dependencies:
    - dataclasses: For frozen dataclass support
    - mcq_toolkit.common.thresholds: Default values

Used By:
    - extractor.pipeline: Uses ExtractionConfig for pipeline settings
    - extractor.reading: OCR language, scale, page segmentation, workers
    - cli: Builds config from command-line flags
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from mcq_toolkit.common.thresholds import (
    ANSWER_KEY_THRESHOLDS,
    LINE_LAYOUT_THRESHOLDS,
    OCR_THRESHOLDS,
)

# Option names used by callers that speak the wire protocol
_CAMEL_CASE_ALIASES = {
    "ocrLanguage": "ocr_language",
    "renderScale": "render_scale",
    "lineToleranceText": "line_tolerance_text",
    "lineToleranceOcr": "line_tolerance_ocr",
    "keyPairDensityThreshold": "key_pair_density_threshold",
    "columnSplitMargin": "column_split_margin",
}


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for question extraction pipeline.

    Attributes:
        ocr_language: Single Tesseract language code (default "eng").
        render_scale: Rasterisation scale over native point size
            (default 4.5, i.e. 324 DPI).
        line_tolerance_text: Vertical clustering tolerance for text-layer
            words, in points (default 3.0).
        line_tolerance_ocr: Vertical clustering tolerance for OCR words,
            in points (default 6.0).
        key_pair_density_threshold: Minimum number-letter pairs on a line
            for it to count as a header-less key row (4-6, default 5).
        column_split_margin: Distance either side of the page midpoint a
            line must cross to be treated as full width (default 36.0).
        column_gutter_min: Minimum gap across the midpoint that splits a
            grouped line into left and right halves (default 12.0).
        ocr_psm: Tesseract page segmentation mode (default 6).
        ocr_workers: Maximum concurrent page recognitions (default 4).
        ocr_binarize_threshold: Grayscale cut-off applied before OCR;
            None disables binarisation (default 180).
        key_page_span: Pages scanned for key pairs, starting at the key's
            start page (default 2).
        split_inline_options: Split "a. x b. y c. z" lines into separate
            options (default True).
        enable_ocr_fallback: Retry with OCR when the text layer has no
            recognisable key (default True).
    """
    ocr_language: str = "eng"
    render_scale: float = OCR_THRESHOLDS.render_scale
    line_tolerance_text: float = LINE_LAYOUT_THRESHOLDS.line_tolerance_text
    line_tolerance_ocr: float = LINE_LAYOUT_THRESHOLDS.line_tolerance_ocr
    key_pair_density_threshold: int = ANSWER_KEY_THRESHOLDS.pair_density
    column_split_margin: float = LINE_LAYOUT_THRESHOLDS.column_split_margin
    column_gutter_min: float = LINE_LAYOUT_THRESHOLDS.column_gutter_min
    ocr_psm: int = OCR_THRESHOLDS.page_segmentation_mode
    ocr_workers: int = OCR_THRESHOLDS.max_workers
    ocr_binarize_threshold: Optional[int] = OCR_THRESHOLDS.binarize_threshold
    key_page_span: int = ANSWER_KEY_THRESHOLDS.page_span
    split_inline_options: bool = True
    enable_ocr_fallback: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.ocr_language or "+" in self.ocr_language:
            raise ValueError(f"ocr_language must be a single language code: {self.ocr_language!r}")
        if not (OCR_THRESHOLDS.render_scale_min <= self.render_scale <= OCR_THRESHOLDS.render_scale_max):
            raise ValueError(
                f"render_scale must be {OCR_THRESHOLDS.render_scale_min}-"
                f"{OCR_THRESHOLDS.render_scale_max}: {self.render_scale}"
            )
        if self.line_tolerance_text < 0 or self.line_tolerance_ocr < 0:
            raise ValueError("line tolerances must be non-negative")
        if not (
            ANSWER_KEY_THRESHOLDS.pair_density_min
            <= self.key_pair_density_threshold
            <= ANSWER_KEY_THRESHOLDS.pair_density_max
        ):
            raise ValueError(
                f"key_pair_density_threshold must be {ANSWER_KEY_THRESHOLDS.pair_density_min}-"
                f"{ANSWER_KEY_THRESHOLDS.pair_density_max}: {self.key_pair_density_threshold}"
            )
        if self.column_split_margin < 0:
            raise ValueError(f"column_split_margin must be non-negative: {self.column_split_margin}")
        if self.column_gutter_min <= 0:
            raise ValueError(f"column_gutter_min must be positive: {self.column_gutter_min}")
        if not (0 <= self.ocr_psm <= 13):
            raise ValueError(f"ocr_psm must be 0-13: {self.ocr_psm}")
        if self.ocr_workers < 1:
            raise ValueError(f"ocr_workers must be at least 1: {self.ocr_workers}")
        if self.ocr_binarize_threshold is not None and not (0 < self.ocr_binarize_threshold < 255):
            raise ValueError(f"ocr_binarize_threshold must be 1-254: {self.ocr_binarize_threshold}")
        if self.key_page_span < 1:
            raise ValueError(f"key_page_span must be at least 1: {self.key_page_span}")

    @property
    def render_dpi(self) -> int:
        """Rendering resolution implied by render_scale."""
        return int(round(self.render_scale * 72))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> ExtractionConfig:
        """
        Build a config from a plain mapping.

        Accepts field names (``render_scale``) and the camelCase option
        names used by callers (``renderScale``).

        Raises:
            ValueError: On unknown option names or invalid values.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        unknown = []
        for name, value in options.items():
            field_name = _CAMEL_CASE_ALIASES.get(name, name)
            if field_name not in known:
                unknown.append(name)
                continue
            kwargs[field_name] = value
        if unknown:
            raise ValueError(f"Unknown extraction options: {sorted(unknown)}")
        return cls(**kwargs)
