"""
Extractor Package

Pulls multiple-choice questions and their answers out of quiz PDFs,
whether the PDF carries a text layer or is a scan.

**PIPELINE:**

| Stage | Module |
|-------|--------|
| Open document | `utils.pdf` |
| Words (text layer, then OCR) | `reading` |
| Lines and reading order | `layout` |
| Question blocks, answer key | `detection` |
| Validation | `merge` |
| Orchestration | `pipeline`, `batch` |

Example:
    >>> from mcq_toolkit.extractor import extract_questions
    >>> result = extract_questions(Path("quiz.pdf"))
    >>> [q.to_dict() for q in result.questions]
"""

from .batch import BatchResult, DocumentOutcome, collect_documents, process_documents
from .config import ExtractionConfig
from .diagnostics import DiagnosticsCollector
from .errors import (
    DocumentProtected,
    DocumentUnreadable,
    ExtractionError,
    ExtractionUnavailable,
    StructureNotFound,
)
from .merge import MergeReport, merge_questions
from .pipeline import ExtractionResult, extract_questions

__all__ = [
    "BatchResult",
    "DiagnosticsCollector",
    "DocumentOutcome",
    "DocumentProtected",
    "DocumentUnreadable",
    "ExtractionConfig",
    "ExtractionError",
    "ExtractionResult",
    "ExtractionUnavailable",
    "MergeReport",
    "StructureNotFound",
    "collect_documents",
    "extract_questions",
    "merge_questions",
    "process_documents",
]
