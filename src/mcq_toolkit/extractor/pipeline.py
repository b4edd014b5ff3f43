"""
Module: extractor.pipeline

Purpose:
    Main pipeline orchestrator for multiple-choice question extraction.
    Opens the document once, walks the word-source fallback chain until
    an answer key is found, then parses questions and the key and merges
    them into validated questions.

Key Functions:
    - extract_questions(): Main entry point for one document

Key Classes:
    - ExtractionResult: Container for extraction output

Dependencies:
    - fitz (PyMuPDF): Document access (via extractor.utils.pdf)
    - mcq_toolkit.extractor.reading: Word sources
    - mcq_toolkit.extractor.layout: Lines and reading order
    - mcq_toolkit.extractor.detection: Questions and answer key
    - mcq_toolkit.extractor.merge: Final validation

Used By:
    - mcq_toolkit.extractor.batch: Batch processing
    - mcq_toolkit.cli: Command-line extraction
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import fitz

from mcq_toolkit.core.models.questions import FinalQuestion
from mcq_toolkit.core.models.words import Line
from mcq_toolkit.core.schemas.validator import DOCUMENT_RECORD_SCHEMA_VERSION
from .config import ExtractionConfig
from .detection.answer_key import KeyLocation, locate_answer_key, parse_answer_key
from .detection.questions import parse_question_blocks
from .diagnostics import DiagnosticsCollector
from .errors import ExtractionUnavailable, StructureNotFound
from .layout.columns import reading_order
from .layout.lines import group_lines
from .merge import merge_questions
from .reading.sources import WordSource, default_sources
from .timing import TimingLog, timed_phase
from .utils.pdf import DocumentSource, describe_source, open_document

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """
    Result of extracting one document.

    Attributes:
        document: Document label (file name, or "<N bytes>").
        questions: Validated questions in the order they were parsed.
        source: Name of the word source whose words held the answer key,
            or None when no source did.
        key_location: Where the answer key starts, or None.
        warnings: Degraded-path messages (no key, OCR unavailable,
            duplicate numbers).
        dropped: reason -> number of question blocks discarded at merge.
        timings: phase -> seconds.
    """
    document: str
    questions: Tuple[FinalQuestion, ...] = ()
    source: Optional[str] = None
    key_location: Optional[KeyLocation] = None
    warnings: List[str] = field(default_factory=list)
    dropped: Dict[str, int] = field(default_factory=dict)
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def to_record(self) -> Dict[str, Any]:
        """One output record per document (JSONL line)."""
        return {
            "schema_version": DOCUMENT_RECORD_SCHEMA_VERSION,
            "document": self.document,
            "source": self.source,
            "questions": [q.to_dict() for q in self.questions],
        }


@dataclass(frozen=True)
class _Structure:
    source: WordSource
    lines: Tuple[Line, ...]
    location: KeyLocation


def extract_questions(
    source: DocumentSource,
    config: Optional[ExtractionConfig] = None,
    *,
    sources: Optional[Sequence[WordSource]] = None,
    diagnostics: Optional[DiagnosticsCollector] = None,
    name: Optional[str] = None,
) -> ExtractionResult:
    """
    Extract multiple-choice questions from one document.

    Pipeline:
    1. Open the document (path or bytes)
    2. For each word source (text layer, then OCR):
       a. Extract positioned words
       b. Group words into lines, build column-first reading order
       c. Locate the answer key; stop at the first source that has one
    3. Parse question blocks from the lines before the key
    4. Parse the key table from the key start
    5. Merge, dropping questions without a key entry or a full option set

    Args:
        source: Path, path string, or document bytes.
        config: Optional extraction configuration.
        sources: Word-source chain override (default: default_sources()).
        diagnostics: Optional collector for dropped questions and
            degraded paths.
        name: Document label for results, logs and diagnostics
            (default: the file name, or "<N bytes>").

    Returns:
        ExtractionResult. An empty result (no questions, with a warning)
        means no answer-key structure was recognised or OCR could not run.

    Raises:
        DocumentUnreadable: If the document cannot be opened.

    Example:
        >>> result = extract_questions(Path("quiz.pdf"))
        >>> result.questions[0].correct_answer
        'B'
    """
    config = config or ExtractionConfig()
    name = name or describe_source(source)
    chain = list(sources) if sources is not None else default_sources(config)
    timing_log = TimingLog(document=name)
    result = ExtractionResult(document=name)

    with timed_phase(timing_log, "open_document"):
        doc = open_document(source)

    with doc:
        try:
            structure = _find_structure(doc, chain, config, timing_log, name)
        except ExtractionUnavailable as e:
            message = f"Extraction unavailable: {e}"
            logger.warning(f"{name}: {message}")
            result.warnings.append(message)
            if diagnostics is not None:
                diagnostics.add_extraction_unavailable(name, str(e))
            result.timings = dict(timing_log.phases)
            return result
        except StructureNotFound as e:
            logger.warning(f"{name}: {e}")
            result.warnings.append(str(e))
            if diagnostics is not None:
                diagnostics.add_structure_not_found(name, [s.name for s in chain])
            result.timings = dict(timing_log.phases)
            return result

    location = structure.location
    with timed_phase(timing_log, "question_parsing"):
        drafts = parse_question_blocks(
            structure.lines[: location.line_index],
            split_inline_options=config.split_inline_options,
        )
    with timed_phase(timing_log, "key_parsing"):
        key = parse_answer_key(structure.lines, location, page_span=config.key_page_span)
    with timed_phase(timing_log, "merge"):
        questions, report = merge_questions(drafts, key, diagnostics=diagnostics, document=name)

    result.questions = questions
    result.source = structure.source.name
    result.key_location = location
    result.dropped = dict(report.dropped)
    result.warnings.extend(
        f"Question {number} appears more than once" for number in report.duplicates
    )
    result.timings = dict(timing_log.phases)

    logger.debug(timing_log.summary())
    logger.info(
        f"Completed extraction for {name}: {len(questions)} questions "
        f"({len(drafts)} parsed, {len(key)} key entries, source={result.source})"
    )
    return result


def _find_structure(
    doc: fitz.Document,
    chain: Sequence[WordSource],
    config: ExtractionConfig,
    timing_log: TimingLog,
    name: str,
) -> _Structure:
    """
    Walk the word-source chain until one yields an answer key.

    Raises:
        ExtractionUnavailable: If a source cannot run at all.
        StructureNotFound: If no source's lines contain an answer key.
    """
    for word_source in chain:
        try:
            with timed_phase(timing_log, f"{word_source.name}_words"):
                words = word_source.extract(doc, config)
        except ExtractionUnavailable as e:
            raise ExtractionUnavailable(f"{word_source.name}: {e}") from e

        with timed_phase(timing_log, "layout"):
            lines = group_lines(
                words,
                word_source.line_tolerance(config),
                gutter_min=config.column_gutter_min,
            )
            ordered = reading_order(lines, margin=config.column_split_margin)

        with timed_phase(timing_log, "key_location"):
            location = locate_answer_key(
                ordered,
                density_threshold=config.key_pair_density_threshold,
            )

        if location is not None:
            logger.debug(
                f"{name}: answer key via {word_source.name} "
                f"({location.signal}, page {location.page + 1}, line {location.line_index})"
            )
            return _Structure(source=word_source, lines=ordered, location=location)

        logger.info(f"{name}: no answer key in {word_source.name} words ({len(words)} words)")

    raise StructureNotFound("no structure recognized")
