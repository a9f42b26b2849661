"""Validation rule and result models."""

import re
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class RuleKind(str, Enum):
    """Built-in rule kinds, evaluated in the order a chain declares them."""

    REQUIRED = "required"
    LENGTH = "length"
    FORMAT = "format"


class ValidationRule(BaseModel):
    """One rule of a field's validation chain.

    LENGTH and FORMAT see the trimmed value with ``strip_pattern`` matches
    removed, so a phone typed as ``300 123-4567`` is checked as digits.
    """

    kind: RuleKind
    message: str
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    pattern: str | None = None
    strip_pattern: str | None = None

    @model_validator(mode="after")
    def check_parameters(self) -> "ValidationRule":
        if self.kind == RuleKind.FORMAT and not self.pattern:
            raise ValueError("FORMAT rules need a pattern")
        if self.kind == RuleKind.LENGTH and self.min_length is None and self.max_length is None:
            raise ValueError("LENGTH rules need min_length or max_length")
        if self.pattern:
            re.compile(self.pattern)
        return self

    @classmethod
    def required(cls, message: str) -> "ValidationRule":
        return cls(kind=RuleKind.REQUIRED, message=message)

    @classmethod
    def length(
        cls,
        message: str,
        min_length: int | None = None,
        max_length: int | None = None,
        strip_pattern: str | None = None,
    ) -> "ValidationRule":
        return cls(
            kind=RuleKind.LENGTH,
            message=message,
            min_length=min_length,
            max_length=max_length,
            strip_pattern=strip_pattern,
        )

    @classmethod
    def format(
        cls,
        message: str,
        pattern: str,
        strip_pattern: str | None = None,
    ) -> "ValidationRule":
        return cls(
            kind=RuleKind.FORMAT,
            message=message,
            pattern=pattern,
            strip_pattern=strip_pattern,
        )


class ConditionalRequirement(BaseModel):
    """A field that is mandatory only while another field has a given value."""

    field: str
    depends_on: str
    equals: str
    message: str | None = None


class ValidationResult(BaseModel):
    """Outcome of validating one field."""

    key: str
    is_valid: bool
    error: str | None = None
    rule: RuleKind | None = None

    @classmethod
    def ok(cls, key: str) -> "ValidationResult":
        return cls(key=key, is_valid=True)

    @classmethod
    def fail(cls, key: str, error: str, rule: RuleKind | None = None) -> "ValidationResult":
        return cls(key=key, is_valid=False, error=error, rule=rule)


class FormValidationResult(BaseModel):
    """Outcome of validating the whole form.

    ``errors`` maps field key to its first failing message;
    ``missing_fields`` lists fields that failed because they were empty.
    """

    is_valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
    missing_fields: list[str] = Field(default_factory=list)
