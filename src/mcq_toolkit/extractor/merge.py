"""
Module: extractor.merge

Purpose:
    Merges parsed question drafts with the answer key and keeps only
    complete, answerable questions. Every discard is counted by reason.

Key Functions:
    - merge_questions(): Drafts + AnswerKey -> FinalQuestions + MergeReport
    - duplicate_numbers(): Question numbers that occur more than once

Key Classes:
    - MergeReport: Counts of emitted and dropped questions

Dependencies:
    - mcq_toolkit.core.models.questions: QuestionDraft, AnswerKey, FinalQuestion
    - extractor.diagnostics: Optional issue recording

Used By:
    - extractor.pipeline: Final stage of extract_questions()
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from mcq_toolkit.core.models.questions import ANSWER_LETTERS, AnswerKey, FinalQuestion, QuestionDraft
from .diagnostics import (
    REASON_INCOMPLETE_OPTIONS,
    REASON_INVALID_ANSWER,
    REASON_MISSING_KEY,
    DiagnosticsCollector,
)

logger = logging.getLogger(__name__)


@dataclass
class MergeReport:
    """
    Outcome counts of one merge.

    Attributes:
        emitted: Questions that passed every check.
        dropped: reason -> number of drafts discarded for it.
        duplicates: Question numbers emitted more than once.
    """
    emitted: int = 0
    dropped: Dict[str, int] = field(default_factory=dict)
    duplicates: Tuple[int, ...] = ()

    @property
    def dropped_total(self) -> int:
        return sum(self.dropped.values())

    def record_drop(self, reason: str) -> None:
        self.dropped[reason] = self.dropped.get(reason, 0) + 1


def duplicate_numbers(numbers: Iterable[int]) -> Dict[int, int]:
    """Map each repeated number to its occurrence count."""
    return {number: count for number, count in Counter(numbers).items() if count > 1}


def _drop_reason(draft: QuestionDraft, answer: Optional[str]) -> Optional[Tuple[str, dict]]:
    if answer is None:
        return REASON_MISSING_KEY, {}
    if answer not in ANSWER_LETTERS:
        return REASON_INVALID_ANSWER, {"answer": answer}
    if not draft.options.is_complete:
        return REASON_INCOMPLETE_OPTIONS, {"missing_options": list(draft.options.missing)}
    return None


def merge_questions(
    drafts: Sequence[QuestionDraft],
    key: AnswerKey,
    *,
    diagnostics: Optional[DiagnosticsCollector] = None,
    document: str = "",
) -> Tuple[Tuple[FinalQuestion, ...], MergeReport]:
    """
    Attach answers to drafts and discard anything incomplete.

    A draft is discarded when its number has no key entry, when the key
    letter is outside A-D, or when any of options A-D is empty. Output
    keeps the draft order. Repeated question numbers are all kept and
    flagged.

    Args:
        drafts: Drafts in production order.
        key: Parsed answer key.
        diagnostics: Optional collector for per-question issues.
        document: Document label used in diagnostics and logs.

    Returns:
        (questions, report)

    Example:
        >>> questions, report = merge_questions(drafts, key)
        >>> report.dropped
        {'incomplete_options': 1}
    """
    report = MergeReport()
    questions: List[FinalQuestion] = []

    for draft in drafts:
        answer = key.get(draft.number)
        drop = _drop_reason(draft, answer)
        if drop is not None:
            reason, details = drop
            report.record_drop(reason)
            logger.debug(f"{document}: Q{draft.number} dropped ({reason})")
            if diagnostics is not None:
                diagnostics.add_dropped_question(document, draft.number, reason, details)
            continue
        questions.append(FinalQuestion.from_draft(draft, answer))

    repeats = duplicate_numbers(q.number for q in questions)
    for number, count in sorted(repeats.items()):
        logger.warning(f"{document}: question {number} appears {count} times; keeping all")
        if diagnostics is not None:
            diagnostics.add_duplicate_number(document, number, count)

    report.emitted = len(questions)
    report.duplicates = tuple(sorted(repeats))
    if report.dropped_total:
        logger.info(f"{document}: dropped {report.dropped_total} question(s) {report.dropped}")
    return tuple(questions), report
