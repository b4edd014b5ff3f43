"""
Core Models Package

Immutable data models that flow through the extraction pipeline.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses (AnswerKey wraps a
read-only mapping). This ensures:
1. No accidental mutation while a document is being processed
2. Safe to pass between OCR worker threads
3. Every pipeline stage is a pure function of its inputs

| Stage | Model |
|-------|-------|
| Extraction | `Word` |
| Line grouping / column split | `Line` |
| Question scanning | `QuestionDraft`, `OptionSet` |
| Key table | `AnswerKey` |
| Output | `FinalQuestion` |
"""

from .words import Word, Line
from .questions import (
    ANSWER_LETTERS,
    OPTION_LETTERS,
    AnswerKey,
    FinalQuestion,
    OptionSet,
    QuestionDraft,
)

__all__ = [
    "ANSWER_LETTERS",
    "OPTION_LETTERS",
    "AnswerKey",
    "FinalQuestion",
    "Line",
    "OptionSet",
    "QuestionDraft",
    "Word",
]
