"""Validation engine, rule chains and messages."""

from eventform.validation.engine import ValidationEngine, default_validation_engine
from eventform.validation.messages import ErrorMessages
from eventform.validation.models import (
    ConditionalRequirement,
    FormValidationResult,
    RuleKind,
    ValidationResult,
    ValidationRule,
)
from eventform.validation.rules import clean_numbers, clean_text, is_valid_email

__all__ = [
    "ConditionalRequirement",
    "ErrorMessages",
    "FormValidationResult",
    "RuleKind",
    "ValidationEngine",
    "ValidationResult",
    "ValidationRule",
    "clean_numbers",
    "clean_text",
    "default_validation_engine",
    "is_valid_email",
]
