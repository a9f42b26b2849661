"""Validation engine.

Stateless rule evaluator: callers pass the value (and, for conditional
requirements, the current form values) and receive a structured result.
Validation never raises for invalid input.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

import structlog

from eventform.observability.logging import get_logger
from eventform.state.fields import FieldKey
from eventform.validation.messages import ErrorMessages
from eventform.validation.models import (
    ConditionalRequirement,
    FormValidationResult,
    RuleKind,
    ValidationResult,
    ValidationRule,
)
from eventform.validation.rules import default_rule_chains, evaluate_rule

if TYPE_CHECKING:
    from eventform.state.models import FieldState


class ValidationEngine:
    """Evaluates per-field rule chains and form-level requirements.

    Rules of a chain run in declared order and evaluation stops at the
    first failing rule. Fields without a chain are checked for presence
    only when listed in ``required_fields`` or while one of their
    conditional requirements holds.
    """

    def __init__(
        self,
        chains: Mapping[str, Iterable[ValidationRule]] | None = None,
        required_fields: Iterable[str] = (),
        conditional_requirements: Iterable[ConditionalRequirement] = (),
        authorization_field: str | None = None,
        accepted_authorization: str = "1",
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._chains: dict[str, list[ValidationRule]] = {
            key: list(rules) for key, rules in (chains or {}).items()
        }
        self._required = set(required_fields)
        self._conditionals = list(conditional_requirements)
        self.authorization_field = authorization_field
        self.accepted_authorization = accepted_authorization
        self._logger = logger or get_logger(__name__)

    def register_chain(self, key: str, rules: Iterable[ValidationRule]) -> None:
        """Register (or replace) the rule chain for a field."""
        self._chains[key] = list(rules)

    def has_chain(self, key: str) -> bool:
        return key in self._chains

    def chain(self, key: str) -> list[ValidationRule]:
        return list(self._chains.get(key, []))

    def add_conditional_requirement(self, requirement: ConditionalRequirement) -> None:
        self._conditionals.append(requirement)

    def is_required(self, key: str, values: Mapping[str, str] | None = None) -> bool:
        """Whether a field must be non-empty given the current form values."""
        if key == self.authorization_field or key in self._required:
            return True
        if any(r.kind == RuleKind.REQUIRED for r in self._chains.get(key, [])):
            return True
        return self._conditional_for(key, values) is not None

    def validate_field(
        self,
        key: str,
        value: str | None,
        values: Mapping[str, str] | None = None,
    ) -> ValidationResult:
        """Validate one field value.

        Args:
            key: Field key
            value: Raw value (None is treated as empty)
            values: Current form values, used by conditional requirements

        Returns:
            Result carrying the first failing rule's message, if any
        """
        text = value or ""

        if key == self.authorization_field:
            return self.validate_authorization(text)

        chain = self._chains.get(key)
        if chain is not None:
            # An empty optional field passes; format rules only apply to input
            if not text.strip() and not any(r.kind == RuleKind.REQUIRED for r in chain):
                return ValidationResult.ok(key)
            for rule in chain:
                if not evaluate_rule(rule, text):
                    return ValidationResult.fail(key, rule.message, rule.kind)
            return ValidationResult.ok(key)

        if text.strip():
            return ValidationResult.ok(key)

        if key in self._required:
            return ValidationResult.fail(key, ErrorMessages.REQUIRED, RuleKind.REQUIRED)

        conditional = self._conditional_for(key, values)
        if conditional is not None:
            return ValidationResult.fail(
                key,
                conditional.message or ErrorMessages.SELECT,
                RuleKind.REQUIRED,
            )

        return ValidationResult.ok(key)

    def validate_authorization(self, value: str | None) -> ValidationResult:
        key = self.authorization_field or "authorization"
        if (value or "").strip() == self.accepted_authorization:
            return ValidationResult.ok(key)
        return ValidationResult.fail(key, ErrorMessages.AUTHORIZATION, RuleKind.REQUIRED)

    def validate_form(
        self,
        states: Mapping[str, "FieldState"],
        *,
        bypass_authorization: bool = False,
    ) -> FormValidationResult:
        """Validate every visible field plus the authorization field.

        Hidden fields are exempt. The authorization field is checked
        regardless of visibility unless ``bypass_authorization`` is set.
        """
        values = {key: state.value for key, state in states.items()}
        errors: dict[str, str] = {}
        missing: list[str] = []

        for key, state in states.items():
            if key == self.authorization_field:
                if bypass_authorization:
                    continue
            elif not state.visible:
                continue

            result = self.validate_field(key, state.value, values)
            if result.is_valid:
                continue
            errors[key] = result.error or ErrorMessages.REQUIRED
            if result.rule == RuleKind.REQUIRED:
                missing.append(key)

        if errors:
            self._logger.info(
                "form_validation_failed",
                error_count=len(errors),
                fields=sorted(errors),
            )

        return FormValidationResult(
            is_valid=not errors,
            errors=errors,
            missing_fields=missing,
        )

    def _conditional_for(
        self,
        key: str,
        values: Mapping[str, str] | None,
    ) -> ConditionalRequirement | None:
        if values is None:
            return None
        for requirement in self._conditionals:
            if requirement.field == key and values.get(requirement.depends_on) == requirement.equals:
                return requirement
        return None


def default_validation_engine(
    *,
    required_fields: Iterable[str] = (),
    default_country: str = "COL",
    applicant_type: str = "Aspirante",
    authorization_field: str = "authorization_data",
    accepted_authorization: str = "1",
    logger: structlog.stdlib.BoundLogger | None = None,
) -> ValidationEngine:
    """Validation engine configured for the event-registration form."""
    location = [
        ConditionalRequirement(field=key, depends_on=FieldKey.COUNTRY, equals=default_country)
        for key in (FieldKey.DEPARTMENT, FieldKey.CITY)
    ]
    academic = [
        ConditionalRequirement(field=key, depends_on=FieldKey.TYPE_ATTENDEE, equals=applicant_type)
        for key in (
            FieldKey.ACADEMIC_LEVEL,
            FieldKey.FACULTY,
            FieldKey.PROGRAM,
            FieldKey.ADMISSION_PERIOD,
        )
    ]
    return ValidationEngine(
        chains=default_rule_chains(),
        required_fields=required_fields,
        conditional_requirements=location + academic,
        authorization_field=authorization_field,
        accepted_authorization=accepted_authorization,
        logger=logger,
    )
