"""
Module: extractor.batch

Purpose:
    Batch extraction over many documents. Documents run in parallel on a
    thread pool; each one's questions are appended to a shared JSONL file
    under a file lock, and one failing document never stops the others.

Key Functions:
    - collect_documents(): Expand files and folders into a document list
    - document_labels(): Batch-unique names for documents
    - process_documents(): Extract every document, returning a BatchResult

Key Classes:
    - DocumentOutcome: Per-document result line
    - BatchResult: Success/failure counts for the batch

Dependencies:
    - concurrent.futures (std): Parallel extraction
    - extractor.file_locking: Shared JSONL output (portalocker)
    - core.schemas: Output record validation (jsonschema)

Used By:
    - mcq_toolkit.cli
"""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from mcq_toolkit.core.schemas.validator import ValidationError, validate_document_record
from .config import ExtractionConfig
from .diagnostics import DiagnosticsCollector
from .errors import DocumentUnreadable, ExtractionError
from .file_locking import locked_append_jsonl
from .pipeline import extract_questions
from .timing import TimingLog

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIXES = (".pdf",)


@dataclass
class DocumentOutcome:
    """
    What happened to one document.

    A document with no questions is not an error, but it does not count
    as a success either.
    """
    path: Path
    label: str = ""
    question_count: int = 0
    source: Optional[str] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.question_count > 0

    @property
    def is_fatal(self) -> bool:
        return self.error is not None

    @property
    def name(self) -> str:
        return self.label or self.path.name

    def describe(self) -> str:
        if self.error is not None:
            return f"{self.name}: FAILED ({self.error})"
        if not self.question_count:
            reason = self.warnings[0] if self.warnings else "no questions"
            return f"{self.name}: no questions ({reason})"
        return f"{self.name}: {self.question_count} questions via {self.source}"


@dataclass
class BatchResult:
    """Outcomes in input order, plus counts."""
    outcomes: List[DocumentOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def fatal(self) -> int:
        return sum(1 for o in self.outcomes if o.is_fatal)

    @property
    def question_count(self) -> int:
        return sum(o.question_count for o in self.outcomes)

    def summary(self) -> str:
        return f"Processing complete: {self.succeeded}/{self.total} documents"


def collect_documents(paths: Iterable[Path]) -> List[Path]:
    """
    Expand folders into their PDF files (sorted, non-recursive).

    Files are kept as given, whatever their suffix. Duplicates are
    removed while preserving order.
    """
    documents: List[Path] = []
    seen = set()
    for path in paths:
        path = Path(path)
        if path.is_dir():
            found = sorted(
                p for p in path.iterdir()
                if p.is_file() and p.suffix.lower() in DOCUMENT_SUFFIXES
            )
            logger.debug(f"{path}: {len(found)} document(s)")
        else:
            found = [path]
        for document in found:
            key = document.resolve()
            if key not in seen:
                seen.add(key)
                documents.append(document)
    return documents


def document_labels(documents: Sequence[Path]) -> Dict[Path, str]:
    """
    Label each document by file name, or by full path where names collide.

    Labels key the JSONL records, timings and diagnostics, so two
    ``quiz.pdf`` files from different folders stay apart.
    """
    counts = Counter(path.name for path in documents)
    return {
        path: path.name if counts[path.name] == 1 else path.resolve().as_posix()
        for path in documents
    }


def process_documents(
    paths: Iterable[Path],
    config: Optional[ExtractionConfig] = None,
    *,
    max_workers: int = 4,
    output_path: Optional[Path] = None,
    collector: Optional[DiagnosticsCollector] = None,
    timings_path: Optional[Path] = None,
    on_outcome: Optional[Callable[[DocumentOutcome], None]] = None,
) -> BatchResult:
    """
    Extract questions from every document.

    Args:
        paths: Document files and/or folders of PDFs.
        config: Extraction configuration shared by all documents.
        max_workers: Documents processed concurrently.
        output_path: JSONL file to append one record per document to.
        collector: Shared diagnostics collector.
        timings_path: JSON file to merge per-document timings into.
        on_outcome: Called with each outcome as it completes.

    Returns:
        BatchResult with outcomes in input order.
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1: {max_workers}")

    config = config or ExtractionConfig()
    documents = collect_documents(paths)
    labels = document_labels(documents)
    outcomes: dict[Path, DocumentOutcome] = {}

    logger.info(f"Processing {len(documents)} document(s) with {max_workers} threads")
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_path = {
            executor.submit(
                _process_one,
                path,
                config,
                label=labels[path],
                output_path=output_path,
                collector=collector,
                timings_path=timings_path,
            ): path
            for path in documents
        }
        for future in as_completed(future_to_path):
            outcome = future.result()
            outcomes[future_to_path[future]] = outcome
            if on_outcome is not None:
                on_outcome(outcome)

    result = BatchResult(outcomes=[outcomes[path] for path in documents])
    logger.info(f"{result.summary()} ({result.question_count} questions, {result.fatal} fatal)")
    return result


def _process_one(
    path: Path,
    config: ExtractionConfig,
    *,
    label: str,
    output_path: Optional[Path],
    collector: Optional[DiagnosticsCollector],
    timings_path: Optional[Path],
) -> DocumentOutcome:
    try:
        result = extract_questions(path, config, diagnostics=collector, name=label)
    except DocumentUnreadable as e:
        logger.error(f"{label}: {e}")
        if collector is not None:
            collector.add_document_unreadable(label, str(e))
        return DocumentOutcome(path=path, label=label, error=str(e))
    except ExtractionError as e:
        logger.error(f"{label}: extraction failed: {e}")
        return DocumentOutcome(path=path, label=label, error=str(e))

    outcome = DocumentOutcome(
        path=path,
        label=label,
        question_count=result.question_count,
        source=result.source,
        warnings=list(result.warnings),
    )

    if output_path is not None:
        record = result.to_record()
        try:
            validate_document_record(record)
        except ValidationError as e:
            logger.error(f"{label}: output record rejected: {e} (path: {e.path})")
            outcome.error = f"invalid output record: {e}"
            return outcome
        locked_append_jsonl(output_path, record)

    if timings_path is not None:
        TimingLog(document=result.document, phases=dict(result.timings)).save(timings_path)

    return outcome
