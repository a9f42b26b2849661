"""Rule evaluation, default rule chains and input cleaning helpers."""

import re

from eventform.state.fields import FieldKey
from eventform.validation.messages import ErrorMessages
from eventform.validation.models import RuleKind, ValidationRule

NAME_PATTERN = r"^[a-zA-ZáéíóúÁÉÍÓÚñÑüÜ\s]+$"
DIGITS_PATTERN = r"^\d+$"
EMAIL_PATTERN = (
    r"^(([^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*)|(\".+\"))"
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)
PHONE_SEPARATORS = r"[\s\-\(\)\.]"

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_NOT_TEXT_RE = re.compile(r"[^a-zA-ZáéíóúÁÉÍÓÚñÑüÜ ]")
_NOT_NUMBER_RE = re.compile(r"[^\d ]")


def clean_text(text: str | None) -> str:
    """Keep only letters (accents included) and spaces."""
    if not text:
        return ""
    return _NOT_TEXT_RE.sub("", text)


def clean_numbers(text: str | None) -> str:
    """Keep only digits and spaces."""
    if not text:
        return ""
    return _NOT_NUMBER_RE.sub("", text)


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return _EMAIL_RE.match(value.strip().lower()) is not None


def evaluate_rule(rule: ValidationRule, value: str) -> bool:
    """Return True if ``value`` satisfies ``rule``."""
    text = value.strip()
    if rule.kind == RuleKind.REQUIRED:
        return bool(text)

    if rule.strip_pattern:
        text = re.sub(rule.strip_pattern, "", text)

    if rule.kind == RuleKind.LENGTH:
        if rule.min_length is not None and len(text) < rule.min_length:
            return False
        if rule.max_length is not None and len(text) > rule.max_length:
            return False
        return True

    # FORMAT
    return re.match(rule.pattern or "", text) is not None


def name_chain() -> list[ValidationRule]:
    return [
        ValidationRule.required(ErrorMessages.REQUIRED),
        ValidationRule.length(ErrorMessages.NAME_TOO_SHORT, min_length=2),
        ValidationRule.format(ErrorMessages.NAME_INVALID, NAME_PATTERN),
    ]


def document_chain() -> list[ValidationRule]:
    return [
        ValidationRule.required(ErrorMessages.REQUIRED),
        ValidationRule.format(ErrorMessages.DOCUMENT_INVALID, DIGITS_PATTERN),
        ValidationRule.length(ErrorMessages.DOCUMENT_LENGTH, min_length=6, max_length=18),
    ]


def email_chain() -> list[ValidationRule]:
    return [
        ValidationRule.required(ErrorMessages.REQUIRED),
        ValidationRule.format(ErrorMessages.EMAIL_INVALID, EMAIL_PATTERN),
    ]


def phone_chain() -> list[ValidationRule]:
    return [
        ValidationRule.required(ErrorMessages.REQUIRED),
        ValidationRule.format(
            ErrorMessages.PHONE_INVALID,
            DIGITS_PATTERN,
            strip_pattern=PHONE_SEPARATORS,
        ),
        ValidationRule.length(
            ErrorMessages.PHONE_TOO_SHORT,
            min_length=7,
            strip_pattern=PHONE_SEPARATORS,
        ),
    ]


def select_chain() -> list[ValidationRule]:
    return [ValidationRule.required(ErrorMessages.SELECT)]


def default_rule_chains() -> dict[str, list[ValidationRule]]:
    """Rule chains of the event-registration form."""
    return {
        FieldKey.FIRST_NAME: name_chain(),
        FieldKey.LAST_NAME: name_chain(),
        FieldKey.TYPE_DOC: select_chain(),
        FieldKey.DOCUMENT: document_chain(),
        FieldKey.EMAIL: email_chain(),
        FieldKey.PHONE_CODE: select_chain(),
        FieldKey.PHONE: phone_chain(),
        FieldKey.COUNTRY: select_chain(),
        FieldKey.TYPE_ATTENDEE: select_chain(),
        FieldKey.ATTENDANCE_DAY: select_chain(),
    }
