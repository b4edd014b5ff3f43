"""
Module: extractor.diagnostics

Captures why questions or whole documents produced no output, and
generates diagnostic reports for analysis.

Issue types:
- dropped_question: A parsed block was discarded (reason in details)
- duplicate_number: The same question number was emitted twice
- structure_not_found: No answer key in any word source
- extraction_unavailable: OCR or rendering could not run
- document_unreadable: Input could not be opened at all
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set

logger = logging.getLogger(__name__)

DROPPED_QUESTION = "dropped_question"
DUPLICATE_NUMBER = "duplicate_number"
STRUCTURE_NOT_FOUND = "structure_not_found"
EXTRACTION_UNAVAILABLE = "extraction_unavailable"
DOCUMENT_UNREADABLE = "document_unreadable"

# Reasons a question block is discarded at merge time
REASON_MISSING_KEY = "missing_key"
REASON_INCOMPLETE_OPTIONS = "incomplete_options"
REASON_INVALID_ANSWER = "invalid_answer"


@dataclass
class DiagnosticIssue:
    """
    A single extraction issue.

    ``details`` carries issue-specific context such as the missing option
    letters or the word sources that were tried.
    """
    issue_type: str
    document: str
    message: str
    question_number: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "issue_type": self.issue_type,
            "document": self.document,
            "message": self.message,
        }
        if self.question_number is not None:
            d["question_number"] = self.question_number
        if self.details:
            d["details"] = self.details
        return d


class DiagnosticsCollector:
    """
    Thread-safe collector for extraction issues.

    One collector may be shared by every document of a batch.
    """

    def __init__(self):
        self._issues: List[DiagnosticIssue] = []
        self._lock = threading.Lock()
        self._documents: Set[str] = set()

    def _add(self, issue: DiagnosticIssue) -> None:
        with self._lock:
            self._issues.append(issue)
            self._documents.add(issue.document)

    def add_dropped_question(
        self,
        document: str,
        question_number: int,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record a question block discarded during merge."""
        self._add(DiagnosticIssue(
            issue_type=DROPPED_QUESTION,
            document=document,
            message=f"Q{question_number} dropped: {reason}",
            question_number=question_number,
            details={"reason": reason, **(details or {})},
        ))

    def add_duplicate_number(self, document: str, question_number: int, occurrences: int) -> None:
        self._add(DiagnosticIssue(
            issue_type=DUPLICATE_NUMBER,
            document=document,
            message=f"Q{question_number} appears {occurrences} times; all kept",
            question_number=question_number,
            details={"occurrences": occurrences},
        ))

    def add_structure_not_found(self, document: str, sources_tried: Sequence[str]) -> None:
        self._add(DiagnosticIssue(
            issue_type=STRUCTURE_NOT_FOUND,
            document=document,
            message="no structure recognized",
            details={"sources_tried": list(sources_tried)},
        ))

    def add_extraction_unavailable(self, document: str, error: str) -> None:
        self._add(DiagnosticIssue(
            issue_type=EXTRACTION_UNAVAILABLE,
            document=document,
            message=f"Extraction unavailable: {error}",
        ))

    def add_document_unreadable(self, document: str, error: str) -> None:
        self._add(DiagnosticIssue(
            issue_type=DOCUMENT_UNREADABLE,
            document=document,
            message=f"Unreadable document: {error}",
        ))

    def issues_for(self, document: str) -> List[DiagnosticIssue]:
        with self._lock:
            return [issue for issue in self._issues if issue.document == document]

    def generate_report(self) -> "DiagnosticsReport":
        with self._lock:
            return DiagnosticsReport.from_issues(list(self._issues), set(self._documents))

    @property
    def issue_count(self) -> int:
        with self._lock:
            return len(self._issues)


@dataclass
class DiagnosticsReport:
    """Complete diagnostics report."""
    generated_at: str
    documents: List[str]
    total_issues: int
    summary_by_type: Dict[str, int]
    issues: List[DiagnosticIssue]

    @classmethod
    def from_issues(cls, issues: List[DiagnosticIssue], documents: Set[str]) -> "DiagnosticsReport":
        summary_by_type: Dict[str, int] = {}
        for issue in issues:
            summary_by_type[issue.issue_type] = summary_by_type.get(issue.issue_type, 0) + 1

        return cls(
            generated_at=datetime.now(timezone.utc).isoformat(),
            documents=sorted(documents),
            total_issues=len(issues),
            summary_by_type=summary_by_type,
            issues=issues,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "documents": self.documents,
            "total_issues": self.total_issues,
            "summary_by_type": self.summary_by_type,
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info(f"Extraction diagnostics saved: {path}")
