"""
Module: questions

Purpose:
    Question records at each stage of assembly: the in-progress
    QuestionDraft built while scanning lines, the AnswerKey read from the
    key table, and the validated FinalQuestion handed to callers.

Key Classes:
    - OptionSet: Fixed record with the four option slots (a-d)
    - QuestionDraft: Immutable in-progress question (replaced, never mutated)
    - AnswerKey: Question number -> answer letter (last occurrence wins)
    - FinalQuestion: Validated output record with wire serialization

Dependencies:
    - dataclasses (std)
    - types (std)

Used By:
    - extractor.detection.questions: Builds QuestionDrafts
    - extractor.detection.answer_key: Builds AnswerKey
    - extractor.merge: Produces FinalQuestion
    - core.schemas.validator: Validates FinalQuestion wire records

Design Notes:
    Option letters are resolved to fixed slots as soon as the parser
    recognises them. Letter "e" is a recognised option marker (so its text
    is not glued onto option d) but has no slot downstream.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Tuple

OPTION_LETTERS: Tuple[str, ...] = ("a", "b", "c", "d")
RECOGNISED_OPTION_LETTERS: Tuple[str, ...] = OPTION_LETTERS + ("e",)
ANSWER_LETTERS: Tuple[str, ...] = ("A", "B", "C", "D")


def _join_text(existing: str, addition: str) -> str:
    """Join two text fragments with a single space, ignoring empties."""
    addition = addition.strip()
    if not existing:
        return addition
    if not addition:
        return existing
    return f"{existing} {addition}"


@dataclass(frozen=True)
class OptionSet:
    """
    The four option slots of a multiple-choice question.

    Attributes:
        a, b, c, d: Option text (empty string when not captured).

    Example:
        >>> opts = OptionSet().with_text("A", "Paris").append("a", "France")
        >>> opts.a
        'Paris France'
    """
    a: str = ""
    b: str = ""
    c: str = ""
    d: str = ""

    def get(self, letter: str) -> str:
        letter = letter.lower()
        if letter not in OPTION_LETTERS:
            return ""
        return getattr(self, letter)

    def with_text(self, letter: str, text: str) -> OptionSet:
        """Return a copy with ``letter`` set to ``text`` (letters outside a-d are ignored)."""
        letter = letter.lower()
        if letter not in OPTION_LETTERS:
            return self
        return replace(self, **{letter: text.strip()})

    def append(self, letter: str, text: str) -> OptionSet:
        """Return a copy with ``text`` appended to ``letter``'s current text."""
        letter = letter.lower()
        if letter not in OPTION_LETTERS:
            return self
        return replace(self, **{letter: _join_text(getattr(self, letter), text)})

    @property
    def is_complete(self) -> bool:
        """True when all four slots hold non-empty text."""
        return all(self.get(letter).strip() for letter in OPTION_LETTERS)

    @property
    def missing(self) -> Tuple[str, ...]:
        """Upper-case letters whose slot is empty."""
        return tuple(
            letter.upper() for letter in OPTION_LETTERS if not self.get(letter).strip()
        )


@dataclass(frozen=True)
class QuestionDraft:
    """
    In-progress question assembled from consecutive lines.

    Every transition returns a new draft, so the parser can thread drafts
    through a fold without aliasing.

    Attributes:
        number: Printed question number.
        stem: Question text accumulated so far.
        options: Captured option text.
        last_option: Most recently opened option letter (lower-case,
            may be "e"), or None when no option line has been seen.
    """
    number: int
    stem: str = ""
    options: OptionSet = field(default_factory=OptionSet)
    last_option: Optional[str] = None

    @property
    def has_options(self) -> bool:
        """True once at least one option line (a-e) has been captured."""
        return self.last_option is not None

    @property
    def is_acceptable(self) -> bool:
        """Acceptance rule for finalization: numbered and at least one option."""
        return self.number is not None and self.has_options

    def append_stem(self, text: str) -> QuestionDraft:
        return replace(self, stem=_join_text(self.stem, text))

    def open_option(self, letter: str, text: str) -> QuestionDraft:
        """
        Open (or continue) an option.

        The first line for a letter sets its text; a repeated letter
        appends to what was captured before.
        """
        letter = letter.lower()
        if self.options.get(letter):
            options = self.options.append(letter, text)
        else:
            options = self.options.with_text(letter, text)
        return replace(self, options=options, last_option=letter)

    def append_to_last_option(self, text: str) -> QuestionDraft:
        if self.last_option is None:
            return self
        return replace(self, options=self.options.append(self.last_option, text))


class AnswerKey:
    """
    Mapping from question number to answer letter.

    Built once from the key region. When a number recurs, the later
    occurrence overwrites the earlier one.

    Example:
        >>> key = AnswerKey.from_pairs([(1, "a"), (2, "C"), (1, "B")])
        >>> key.get(1)
        'B'
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[int, str]] = None):
        self._entries: Mapping[int, str] = MappingProxyType(dict(entries or {}))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, str]]) -> AnswerKey:
        entries: dict[int, str] = {}
        for number, letter in pairs:
            entries[int(number)] = letter.strip().upper()
        return cls(entries)

    def get(self, number: int) -> Optional[str]:
        return self._entries.get(number)

    def as_dict(self) -> dict[int, str]:
        return dict(self._entries)

    def __contains__(self, number: object) -> bool:
        return number in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnswerKey):
            return NotImplemented
        return dict(self._entries) == dict(other._entries)

    def __repr__(self) -> str:
        return f"AnswerKey({len(self)} entries)"


@dataclass(frozen=True)
class FinalQuestion:
    """
    Validated multiple-choice question (immutable).

    Attributes:
        number: Printed question number.
        stem: Question text.
        option_a..option_d: Option text, all non-empty.
        correct_answer: One of "A", "B", "C", "D".

    Invariants:
        - All four options are non-empty
        - correct_answer is A-D
        Violations raise ValueError on construction, so invalid records
        never reach callers.
    """
    number: int
    stem: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str

    def __post_init__(self) -> None:
        for letter in ANSWER_LETTERS:
            value = getattr(self, f"option_{letter.lower()}")
            if not value or not value.strip():
                raise ValueError(f"Q{self.number}: option {letter} is empty")
        if self.correct_answer not in ANSWER_LETTERS:
            raise ValueError(
                f"Q{self.number}: correct_answer must be one of A-D: {self.correct_answer!r}"
            )

    @classmethod
    def from_draft(cls, draft: QuestionDraft, answer: str) -> FinalQuestion:
        return cls(
            number=draft.number,
            stem=draft.stem,
            option_a=draft.options.a,
            option_b=draft.options.b,
            option_c=draft.options.c,
            option_d=draft.options.d,
            correct_answer=answer.upper(),
        )

    def to_dict(self) -> dict:
        """Serialize to the wire form consumed by ingestion jobs."""
        return {
            "number": self.number,
            "stem": self.stem,
            "optionA": self.option_a,
            "optionB": self.option_b,
            "optionC": self.option_c,
            "optionD": self.option_d,
            "correctAnswer": self.correct_answer,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FinalQuestion:
        return cls(
            number=data["number"],
            stem=data.get("stem", ""),
            option_a=data["optionA"],
            option_b=data["optionB"],
            option_c=data["optionC"],
            option_d=data["optionD"],
            correct_answer=data["correctAnswer"],
        )
