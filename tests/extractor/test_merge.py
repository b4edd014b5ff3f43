"""
Tests for extractor.merge
"""

import pytest

from mcq_toolkit.core.models.questions import AnswerKey, OptionSet, QuestionDraft
from mcq_toolkit.extractor.diagnostics import DiagnosticsCollector
from mcq_toolkit.extractor.merge import duplicate_numbers, merge_questions


def _draft(number: int, **options) -> QuestionDraft:
    full = {"a": "w", "b": "x", "c": "y", "d": "z"}
    full.update(options)
    return QuestionDraft(number=number, stem=f"Question {number}?", options=OptionSet(**full), last_option="d")


class TestMergeQuestions:
    """Tests for merge_questions() function."""

    def test_merge_when_all_complete_then_emitted_in_draft_order(self):
        # Arrange
        drafts = [_draft(2), _draft(1)]
        key = AnswerKey.from_pairs([(1, "A"), (2, "D")])

        # Act
        questions, report = merge_questions(drafts, key)

        # Assert
        assert [(q.number, q.correct_answer) for q in questions] == [(2, "D"), (1, "A")]
        assert report.emitted == 2
        assert report.dropped_total == 0

    def test_merge_when_one_option_missing_then_only_that_question_dropped(self):
        drafts = [_draft(1), _draft(2, c=""), _draft(3)]
        key = AnswerKey.from_pairs([(1, "A"), (2, "B"), (3, "C")])

        questions, report = merge_questions(drafts, key)

        assert [q.number for q in questions] == [1, 3]
        assert report.dropped == {"incomplete_options": 1}

    def test_merge_when_number_not_in_key_then_dropped_as_missing_key(self):
        questions, report = merge_questions([_draft(5)], AnswerKey.from_pairs([(1, "A")]))
        assert questions == ()
        assert report.dropped == {"missing_key": 1}

    def test_merge_when_key_letter_e_then_dropped_as_invalid_answer(self):
        questions, report = merge_questions([_draft(1)], AnswerKey.from_pairs([(1, "E")]))
        assert questions == ()
        assert report.dropped == {"invalid_answer": 1}

    def test_merge_when_number_repeats_then_both_kept_and_flagged(self):
        drafts = [_draft(1), _draft(1, a="other")]
        questions, report = merge_questions(drafts, AnswerKey.from_pairs([(1, "B")]))
        assert [q.option_a for q in questions] == ["w", "other"]
        assert report.duplicates == (1,)

    def test_merge_when_collector_given_then_issues_recorded(self):
        # Arrange
        collector = DiagnosticsCollector()
        drafts = [_draft(1, b=""), _draft(2), _draft(2)]
        key = AnswerKey.from_pairs([(1, "A"), (2, "B")])

        # Act
        merge_questions(drafts, key, diagnostics=collector, document="quiz.pdf")

        # Assert
        report = collector.generate_report()
        assert report.summary_by_type == {"dropped_question": 1, "duplicate_number": 1}
        dropped = report.issues[0].to_dict()
        assert dropped["question_number"] == 1
        assert dropped["details"] == {"reason": "incomplete_options", "missing_options": ["B"]}

    def test_merge_when_no_drafts_then_empty(self):
        questions, report = merge_questions([], AnswerKey())
        assert questions == ()
        assert report.emitted == 0


class TestDuplicateNumbers:
    @pytest.mark.parametrize("numbers, expected", [
        ([1, 2, 3], {}),
        ([1, 2, 1, 1, 3, 3], {1: 3, 3: 2}),
    ])
    def test_duplicate_numbers_when_counted_then_only_repeats(self, numbers, expected):
        assert duplicate_numbers(numbers) == expected
