"""
Schema Validation Utilities

Validates wire records against the bundled JSON schemas before they leave
the toolkit (batch JSONL output, CLI).

- `validate_final_question()` checks one `{number, stem, optionA..D,
  correctAnswer}` record
- `validate_document_record()` checks one JSONL line written per document
- Fail fast on any schema violation
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version for the per-document JSONL records
DOCUMENT_RECORD_SCHEMA_VERSION = 1


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_final_question(data: dict[str, Any], *, path: str = "") -> None:
    """
    Validate one question record against the FinalQuestion schema.

    Args:
        data: Wire-form question dictionary
        path: Prefix used in error paths (e.g. "questions[3]")

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Question record must be a dict", path=path)

    schema = _load_schema("final_question")
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        location = ".".join(str(p) for p in first.absolute_path)
        full_path = ".".join(p for p in (path, location) if p)
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=full_path,
            errors=[e.message for e in errors],
        )


def validate_document_record(data: dict[str, Any]) -> None:
    """
    Validate one per-document JSONL record.

    Expected shape:
        {"schema_version": 1, "document": str, "source": str | None,
         "questions": [FinalQuestion...]}

    Raises:
        ValidationError: If data is invalid
    """
    required = ["schema_version", "document", "source", "questions"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing],
        )

    version = data.get("schema_version")
    if version != DOCUMENT_RECORD_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported document record schema version: {version} "
            f"(expected {DOCUMENT_RECORD_SCHEMA_VERSION})",
            path="schema_version",
        )

    questions = data.get("questions")
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path="questions")

    for i, question in enumerate(questions):
        validate_final_question(question, path=f"questions[{i}]")
