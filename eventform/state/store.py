"""Field state store.

The store is the single owner of every ``FieldState`` of a form. Other
components read snapshots and write through the mutation methods below;
each mutation publishes its event on the form's bus.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

import structlog

from eventform.errors import UnknownFieldError
from eventform.events.bus import EventBus
from eventform.events.models import (
    FieldChanged,
    FieldDisabledChanged,
    FieldTouched,
    FieldVisibilityChanged,
    StateReset,
    SystemStateChanged,
    ValidationStateChanged,
)
from eventform.observability.logging import get_logger
from eventform.state.models import FieldDefinition, FieldState, StoreSummary, SystemState

if TYPE_CHECKING:
    from eventform.validation.engine import ValidationEngine


class FieldStateStore:
    """Holds field values, visibility, disabled/touched flags and errors.

    Field keys are fixed at construction. Updates naming an unknown key are
    rejected with a warning and never create a field.
    """

    def __init__(
        self,
        definitions: Iterable[FieldDefinition],
        bus: EventBus,
        validator: "ValidationEngine | None" = None,
        system: SystemState | None = None,
        *,
        authorization_field: str | None = None,
        accepted_authorization: str = "1",
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._definitions: dict[str, FieldDefinition] = {}
        for definition in definitions:
            if definition.key in self._definitions:
                raise ValueError(f"Duplicate field definition: {definition.key}")
            self._definitions[definition.key] = definition

        self._bus = bus
        self._validator = validator
        self._logger = logger or get_logger(__name__)
        self._authorization_field = authorization_field
        self._accepted_authorization = accepted_authorization

        self._initial_system = (system or SystemState()).model_copy()
        self._system = self._initial_system.model_copy()
        self._states: dict[str, FieldState] = self._initial_states()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def keys(self) -> list[str]:
        return list(self._states)

    def has_field(self, key: str) -> bool:
        return key in self._states

    def get_value(self, key: str) -> str | None:
        """Value of a field, or None if the form has no such field."""
        state = self._states.get(key)
        return state.value if state else None

    def get_state(self, key: str) -> FieldState:
        """Snapshot of a field's state.

        Raises:
            UnknownFieldError: If the form has no such field
        """
        state = self._states.get(key)
        if state is None:
            raise UnknownFieldError(key)
        return state.model_copy()

    def states(self) -> dict[str, FieldState]:
        return {key: state.model_copy() for key, state in self._states.items()}

    def values(self) -> dict[str, str]:
        return {key: state.value for key, state in self._states.items()}

    def is_visible(self, key: str) -> bool:
        state = self._states.get(key)
        return bool(state and state.visible)

    def is_disabled(self, key: str) -> bool:
        state = self._states.get(key)
        return bool(state and state.disabled)

    def is_touched(self, key: str) -> bool:
        state = self._states.get(key)
        return bool(state and state.touched)

    def initial_value(self, key: str) -> str | None:
        definition = self._definitions.get(key)
        return definition.default if definition else None

    def errors(self) -> dict[str, str]:
        return {
            key: state.error
            for key, state in self._states.items()
            if state.error is not None
        }

    def has_errors(self) -> bool:
        return any(state.error is not None for state in self._states.values())

    def is_valid(self) -> bool:
        return not self.has_errors()

    def system_state(self) -> SystemState:
        return self._system.model_copy()

    # ------------------------------------------------------------------
    # Field mutations
    # ------------------------------------------------------------------

    def update_field(self, key: str, value: str | None) -> bool:
        """Set a field value.

        Emits ``field.changed`` when the value differs. Touched fields are
        re-validated even when the value did not change, so a blur on an
        already-typed value surfaces its error.

        Returns:
            False if the field does not exist, True otherwise
        """
        state = self._states.get(key)
        if state is None:
            self._logger.warning("unknown_field_update", field=key)
            return False

        new_value = "" if value is None else str(value)
        previous = state.value
        if previous != new_value:
            state.value = new_value
            self._logger.debug("field_updated", field=key, previous=previous, current=new_value)
            self._bus.emit(FieldChanged(key=key, previous=previous, current=new_value))

        if state.touched:
            self.revalidate(key)

        return True

    def set_fields(self, values: Mapping[str, str | None]) -> dict[str, bool]:
        """Update several fields in order; returns the per-key outcome."""
        return {key: self.update_field(key, value) for key, value in values.items()}

    def set_field_visibility(self, key: str, visible: bool) -> bool:
        """Show or hide a field. Hiding a field clears its error."""
        state = self._states.get(key)
        if state is None:
            self._logger.warning("unknown_field_visibility", field=key)
            return False

        if not visible and state.error is not None:
            self.clear_validation_error(key)

        if state.visible == visible:
            return True

        state.visible = visible
        self._bus.emit(FieldVisibilityChanged(key=key, visible=visible))
        return True

    def set_field_disabled(self, key: str, disabled: bool) -> bool:
        state = self._states.get(key)
        if state is None:
            self._logger.warning("unknown_field_disabled", field=key)
            return False

        if state.disabled == disabled:
            return True

        state.disabled = disabled
        self._bus.emit(FieldDisabledChanged(key=key, disabled=disabled))
        return True

    def mark_field_as_touched(self, key: str) -> bool:
        """Mark a field as touched. Only the first transition emits an event."""
        state = self._states.get(key)
        if state is None:
            self._logger.warning("unknown_field_touched", field=key)
            return False

        if not state.touched:
            state.touched = True
            self._bus.emit(FieldTouched(key=key))
        return True

    # ------------------------------------------------------------------
    # Validation state
    # ------------------------------------------------------------------

    def set_validation_error(self, key: str, message: str) -> bool:
        """Record a field error.

        Hidden fields cannot hold errors; the call is ignored for them.
        ``validation.state_changed`` is emitted only when the form goes from
        valid to invalid.
        """
        state = self._states.get(key)
        if state is None:
            self._logger.warning("unknown_field_error", field=key)
            return False
        if not state.visible:
            self._logger.debug("hidden_field_error_ignored", field=key)
            return False

        was_valid = self.is_valid()
        state.error = message
        self._emit_validity_flip(was_valid)
        return True

    def clear_validation_error(self, key: str) -> bool:
        state = self._states.get(key)
        if state is None:
            self._logger.warning("unknown_field_error", field=key)
            return False
        if state.error is None:
            return True

        was_valid = self.is_valid()
        state.error = None
        self._emit_validity_flip(was_valid)
        return True

    def clear_validation_errors(self) -> None:
        was_valid = self.is_valid()
        for state in self._states.values():
            state.error = None
        self._emit_validity_flip(was_valid)

    def apply_validation(self, errors: Mapping[str, str]) -> None:
        """Replace every field error with ``errors`` in one step.

        Emits at most one ``validation.state_changed``.
        """
        was_valid = self.is_valid()
        for key, state in self._states.items():
            message = errors.get(key)
            state.error = message if message is not None and state.visible else None
        self._emit_validity_flip(was_valid)

    def revalidate(self, key: str) -> bool | None:
        """Re-run the field's rule chain and store the outcome.

        Returns:
            The validity of the field, or None when no validator is set
        """
        if self._validator is None or key not in self._states:
            return None

        state = self._states[key]
        result = self._validator.validate_field(key, state.value, self.values())
        if result.is_valid or not state.visible:
            self.clear_validation_error(key)
        else:
            self.set_validation_error(key, result.error or "")
        return result.is_valid

    # ------------------------------------------------------------------
    # System state
    # ------------------------------------------------------------------

    def set_system_state(self, name: str, value: bool) -> bool:
        if name not in SystemState.model_fields:
            self._logger.warning("unknown_system_state", name=name)
            return False

        if getattr(self._system, name) == value:
            return True

        setattr(self._system, name, value)
        self._bus.emit(SystemStateChanged(name=name, value=value))
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Restore construction-time defaults and clear touched flags and errors."""
        was_valid = self.is_valid()
        self._states = self._initial_states()
        self._system.is_submitting = False
        self._logger.info("form_state_reset")
        self._bus.emit(StateReset())
        self._emit_validity_flip(was_valid)

    def is_ready_to_submit(self) -> bool:
        """True when there are no errors, no submission is running, and the
        authorization field holds the accepted value (dev mode skips that
        last check)."""
        if self.has_errors() or self._system.is_submitting:
            return False
        if self._authorization_field is None or self._system.dev_mode:
            return True
        return self.get_value(self._authorization_field) == self._accepted_authorization

    def submission_payload(self) -> dict[str, str]:
        """Every non-empty field value, in schema order."""
        return {
            key: state.value
            for key, state in self._states.items()
            if state.value.strip()
        }

    def summary(self) -> StoreSummary:
        errors = self.errors()
        return StoreSummary(
            total_fields=len(self._states),
            visible_fields=sum(1 for s in self._states.values() if s.visible),
            touched_fields=sum(1 for s in self._states.values() if s.touched),
            error_count=len(errors),
            is_valid=not errors,
            system=self.system_state(),
            values=self.values(),
        )

    def _initial_states(self) -> dict[str, FieldState]:
        return {key: d.initial_state() for key, d in self._definitions.items()}

    def _emit_validity_flip(self, was_valid: bool) -> None:
        is_valid = self.is_valid()
        if is_valid != was_valid:
            self._bus.emit(
                ValidationStateChanged(is_valid=is_valid, error_count=len(self.errors()))
            )
