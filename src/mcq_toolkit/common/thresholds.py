"""Centralized threshold and magic number configuration.

This module contains the tolerances, margins and counts used throughout
the extraction pipeline. Having these in one place makes tuning easier
and documents why each value was chosen. All distances are PDF points
(1/72 inch) unless stated otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LineLayoutThresholds:
    """Thresholds for clustering words into lines and columns."""

    line_tolerance_text: float = 3.0  # Text-layer words share an exact baseline box
    line_tolerance_ocr: float = 6.0  # OCR word tops jitter with glyph height
    column_split_margin: float = 36.0  # Half an inch either side of the midpoint = full width
    column_gutter_min: float = 12.0  # Gap across the midpoint that separates two columns


@dataclass
class AnswerKeyThresholds:
    """Thresholds for locating and reading the answer-key table."""

    pair_density: int = 5  # Pairs on one line before it counts as a header-less key row
    pair_density_min: int = 4
    pair_density_max: int = 6
    page_span: int = 2  # Key table fits on its start page plus the next one
    header_label_max: int = 40  # Trailing label allowed after "Answer Key" ("- Form B")
    block_row_min_pairs: int = 2  # Rows above a dense row that still belong to the key


@dataclass
class OcrThresholds:
    """Thresholds for page rasterisation and recognition."""

    render_scale: float = 4.5  # 4.5 x 72 = 324 DPI
    render_scale_min: float = 1.0
    render_scale_max: float = 8.0
    page_segmentation_mode: int = 6  # Tesseract: assume a uniform block of text
    binarize_threshold: int = 180  # Grayscale value above which pixels become paper
    max_workers: int = 4


# Global instances for easy import
LINE_LAYOUT_THRESHOLDS = LineLayoutThresholds()
ANSWER_KEY_THRESHOLDS = AnswerKeyThresholds()
OCR_THRESHOLDS = OcrThresholds()
