"""
MCQ Toolkit Core Package

Shared data models and output validation. These models are the single
source of truth for every extractor stage.
"""

from .models import AnswerKey, FinalQuestion, Line, OptionSet, QuestionDraft, Word

__all__ = [
    "AnswerKey",
    "FinalQuestion",
    "Line",
    "OptionSet",
    "QuestionDraft",
    "Word",
]
