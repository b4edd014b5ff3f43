"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_document_record,
    validate_final_question,
    ValidationError,
    DOCUMENT_RECORD_SCHEMA_VERSION,
)

__all__ = [
    "validate_document_record",
    "validate_final_question",
    "ValidationError",
    "DOCUMENT_RECORD_SCHEMA_VERSION",
]
