"""
Unit Tests for Schema Validation

Tests for the validator module.
"""

import pytest

from mcq_toolkit.core.schemas.validator import (
    DOCUMENT_RECORD_SCHEMA_VERSION,
    ValidationError,
    validate_document_record,
    validate_final_question,
)


@pytest.fixture
def valid_question_data() -> dict:
    return {
        "number": 1,
        "stem": "What is the capital of France?",
        "optionA": "Paris",
        "optionB": "Lyon",
        "optionC": "Nice",
        "optionD": "Lille",
        "correctAnswer": "A",
    }


class TestValidateFinalQuestion:
    """Tests for validate_final_question function."""

    def test_validate_when_valid_then_passes(self, valid_question_data):
        validate_final_question(valid_question_data)

    def test_validate_when_missing_option_then_raises(self, valid_question_data):
        del valid_question_data["optionD"]
        with pytest.raises(ValidationError) as exc_info:
            validate_final_question(valid_question_data)
        assert "optionD" in str(exc_info.value)

    def test_validate_when_blank_option_then_raises(self, valid_question_data):
        valid_question_data["optionB"] = "   "
        with pytest.raises(ValidationError) as exc_info:
            validate_final_question(valid_question_data, path="questions[0]")
        assert exc_info.value.path == "questions[0].optionB"

    def test_validate_when_answer_outside_a_to_d_then_raises(self, valid_question_data):
        valid_question_data["correctAnswer"] = "E"
        with pytest.raises(ValidationError):
            validate_final_question(valid_question_data)

    def test_validate_when_extra_field_then_raises(self, valid_question_data):
        valid_question_data["explanation"] = "Paris is the capital"
        with pytest.raises(ValidationError):
            validate_final_question(valid_question_data)

    def test_validate_when_not_dict_then_raises(self):
        with pytest.raises(ValidationError, match="must be a dict"):
            validate_final_question(["not", "a", "dict"])


class TestValidateDocumentRecord:
    """Tests for validate_document_record function."""

    def test_validate_when_valid_then_passes(self, valid_question_data):
        validate_document_record({
            "schema_version": DOCUMENT_RECORD_SCHEMA_VERSION,
            "document": "quiz.pdf",
            "source": "text_layer",
            "questions": [valid_question_data],
        })

    def test_validate_when_no_questions_then_passes(self):
        validate_document_record({
            "schema_version": DOCUMENT_RECORD_SCHEMA_VERSION,
            "document": "scan.pdf",
            "source": None,
            "questions": [],
        })

    def test_validate_when_missing_fields_then_lists_them(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_document_record({"document": "quiz.pdf"})
        assert "Missing field: questions" in exc_info.value.errors

    def test_validate_when_wrong_version_then_raises(self):
        with pytest.raises(ValidationError, match="schema version"):
            validate_document_record({
                "schema_version": 99,
                "document": "quiz.pdf",
                "source": "ocr",
                "questions": [],
            })

    def test_validate_when_bad_question_then_reports_index(self, valid_question_data):
        bad = dict(valid_question_data, correctAnswer="Z")
        with pytest.raises(ValidationError) as exc_info:
            validate_document_record({
                "schema_version": DOCUMENT_RECORD_SCHEMA_VERSION,
                "document": "quiz.pdf",
                "source": "text_layer",
                "questions": [valid_question_data, bad],
            })
        assert exc_info.value.path.startswith("questions[1]")
