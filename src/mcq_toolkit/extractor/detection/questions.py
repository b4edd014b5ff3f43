"""
Module: extractor.detection.questions

Purpose:
    Question block parsing - scans reading-ordered lines into question
    drafts (number, stem, options). Implemented as a fold over the lines
    with an explicit immutable accumulator, so each step is a pure
    function of (state, line).

Key Functions:
    - parse_question_blocks(): Lines -> accepted QuestionDrafts
    - scan_question_blocks(): Same fold, returning the final ScanState
    - match_question_line() / match_option_line(): Line classifiers

Key Classes:
    - ScanState: Fold accumulator (live draft + finalized drafts)

Dependencies:
    - re (std), functools (std)
    - mcq_toolkit.core.models.questions: QuestionDraft

Used By:
    - extractor.pipeline: Parses lines preceding the answer key

Line Rules (applied in order):
    1. "<n><.|)|-><rest>"     -> finalize live draft, start draft n with stem <rest>
    2. no option yet, not an option line -> append to stem
    3. "<a-e><.|)|-><rest>"   -> open/continue that option
    4. option exists          -> append to most recently opened option
    Lines before the first question are ignored. A draft is accepted only
    if it has at least one option; numbered instructions without options
    are dropped silently.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from functools import partial, reduce
from typing import Iterable, List, Optional, Tuple

from mcq_toolkit.core.models.questions import RECOGNISED_OPTION_LETTERS, QuestionDraft
from mcq_toolkit.core.models.words import Line

logger = logging.getLogger(__name__)

QUESTION_LINE_PATTERN = re.compile(r"^\s*(\d{1,3})\s*[.)\-]\s*(.*)$")
OPTION_LINE_PATTERN = re.compile(r"^\s*\(?([a-eA-E])\s*[.)\-]\s*(.*)$")


def match_question_line(text: str) -> Optional[Tuple[int, str]]:
    """
    Match a question-number line.

    Example:
        >>> match_question_line("12) Which gas is inert?")
        (12, 'Which gas is inert?')
        >>> match_question_line("Which gas is inert?") is None
        True
    """
    match = QUESTION_LINE_PATTERN.match(text)
    if not match:
        return None
    return int(match.group(1)), match.group(2).strip()


def match_option_line(text: str) -> Optional[Tuple[str, str]]:
    """
    Match an option line; the letter is returned as printed.

    Example:
        >>> match_option_line("(b) Neon")
        ('b', 'Neon')
    """
    match = OPTION_LINE_PATTERN.match(text)
    if not match:
        return None
    return match.group(1), match.group(2).strip()


def _next_letter(letter: str) -> Optional[str]:
    """Following option letter in the same case, or None after "e"."""
    if letter.lower() not in RECOGNISED_OPTION_LETTERS[:-1]:
        return None
    return chr(ord(letter) + 1)


def expand_inline_options(letter: str, rest: str) -> List[Tuple[str, str]]:
    """
    Split "a. 5 b. 6 c. 7 d. 8" style lines into (letter, text) pairs.

    Only markers for the next letters in sequence, in the same case as the
    opening marker and preceded by whitespace, are split on.

    Example:
        >>> expand_inline_options("a", "5 b. 6 c) 7")
        [('a', '5'), ('b', '6'), ('c', '7')]
    """
    parts: List[Tuple[str, str]] = []
    current, text = letter, rest
    while True:
        following = _next_letter(current)
        if following is None:
            break
        marker = re.search(rf"(?<=\s)\(?{re.escape(following)}\s*[.)]\s+", text)
        if marker is None:
            break
        parts.append((current, text[: marker.start()].strip()))
        current, text = following, text[marker.end():]
    parts.append((current, text.strip()))
    return parts


@dataclass(frozen=True)
class ScanState:
    """
    Fold accumulator for question scanning.

    Attributes:
        current: Live draft, or None before the first question line.
        drafts: Accepted drafts in production order.
        rejected: Numbered blocks dropped for having no options.
    """
    current: Optional[QuestionDraft] = None
    drafts: Tuple[QuestionDraft, ...] = ()
    rejected: int = 0

    def finalize(self) -> ScanState:
        """Close the live draft, keeping it only if it is acceptable."""
        if self.current is None:
            return self
        if self.current.is_acceptable:
            return ScanState(current=None, drafts=self.drafts + (self.current,), rejected=self.rejected)
        logger.debug(f"Dropped numbered block {self.current.number}: no options")
        return ScanState(current=None, drafts=self.drafts, rejected=self.rejected + 1)


def scan_line(state: ScanState, line: Line, *, split_inline: bool = True) -> ScanState:
    """Apply one line to the scan state (pure)."""
    text = line.text

    question = match_question_line(text)
    if question is not None:
        number, stem = question
        closed = state.finalize()
        return replace(closed, current=QuestionDraft(number=number, stem=stem))

    draft = state.current
    if draft is None:
        return state

    option = match_option_line(text)
    if option is None:
        if draft.has_options:
            return replace(state, current=draft.append_to_last_option(text))
        return replace(state, current=draft.append_stem(text))

    letter, rest = option
    pieces = expand_inline_options(letter, rest) if split_inline else [(letter, rest)]
    for piece_letter, piece_text in pieces:
        draft = draft.open_option(piece_letter, piece_text)
    return replace(state, current=draft)


def scan_question_blocks(lines: Iterable[Line], *, split_inline_options: bool = True) -> ScanState:
    """Fold every line into a ScanState and finalize the live draft."""
    step = partial(scan_line, split_inline=split_inline_options)
    return reduce(step, lines, ScanState()).finalize()


def parse_question_blocks(
    lines: Iterable[Line],
    *,
    split_inline_options: bool = True,
) -> Tuple[QuestionDraft, ...]:
    """
    Parse reading-ordered lines into question drafts.

    Args:
        lines: Lines preceding the answer key, in reading order.
        split_inline_options: Split several options printed on one line.

    Returns:
        Accepted drafts in appearance order (not sorted by number;
        repeated numbers are all kept).

    Example:
        >>> drafts = parse_question_blocks(lines)
        >>> drafts[0].number, drafts[0].options.a
        (1, 'Paris')
    """
    state = scan_question_blocks(lines, split_inline_options=split_inline_options)
    logger.debug(f"Parsed {len(state.drafts)} question drafts ({state.rejected} numbered blocks without options)")
    return state.drafts
