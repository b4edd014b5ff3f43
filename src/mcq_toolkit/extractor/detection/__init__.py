"""
Module: extractor.detection

Purpose:
    Structure detection on reading-ordered lines: question blocks and the
    answer-key section.

Key Modules:
    - questions: Question block parser (fold over lines)
    - answer_key: Key section locator and key table parser

Used By:
    - extractor.pipeline
"""

from .answer_key import (
    HEADER_PATTERN,
    PAIR_PATTERN,
    KeyLocation,
    count_key_pairs,
    is_key_header,
    locate_answer_key,
    parse_answer_key,
)
from .questions import (
    ScanState,
    match_option_line,
    match_question_line,
    parse_question_blocks,
    scan_question_blocks,
)

__all__ = [
    "HEADER_PATTERN",
    "KeyLocation",
    "PAIR_PATTERN",
    "ScanState",
    "count_key_pairs",
    "is_key_header",
    "locate_answer_key",
    "match_option_line",
    "match_question_line",
    "parse_answer_key",
    "parse_question_blocks",
    "scan_question_blocks",
]
