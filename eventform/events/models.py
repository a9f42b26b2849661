"""Form event types.

Every notification the engine publishes is one of the models below, keyed
by ``EventKind``. Kinds use category.name format (``field.changed``,
``validation.state_changed``) so renderers can filter by category.
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Event kinds published on the form event bus."""

    # Field lifecycle
    FIELD_CHANGED = "field.changed"
    FIELD_VISIBILITY_CHANGED = "field.visibility_changed"
    FIELD_DISABLED_CHANGED = "field.disabled_changed"
    FIELD_TOUCHED = "field.touched"
    FIELD_OPTIONS_CHANGED = "field.options_changed"

    # Form-wide
    VALIDATION_STATE_CHANGED = "validation.state_changed"
    STATE_RESET = "state.reset"
    SYSTEM_STATE_CHANGED = "system.state_changed"


class FormEvent(BaseModel):
    """Base class for all form events."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind

    @property
    def category(self) -> str:
        """Extract category from event kind. Example: 'field.changed' -> 'field'"""
        return self.kind.value.split(".")[0]

    @property
    def field_key(self) -> str | None:
        """Key of the field the event concerns, if any."""
        return getattr(self, "key", None)


class FieldChanged(FormEvent):
    """A field value changed."""

    kind: Literal[EventKind.FIELD_CHANGED] = EventKind.FIELD_CHANGED
    key: str
    previous: str
    current: str


class FieldVisibilityChanged(FormEvent):
    kind: Literal[EventKind.FIELD_VISIBILITY_CHANGED] = EventKind.FIELD_VISIBILITY_CHANGED
    key: str
    visible: bool


class FieldDisabledChanged(FormEvent):
    kind: Literal[EventKind.FIELD_DISABLED_CHANGED] = EventKind.FIELD_DISABLED_CHANGED
    key: str
    disabled: bool


class FieldTouched(FormEvent):
    kind: Literal[EventKind.FIELD_TOUCHED] = EventKind.FIELD_TOUCHED
    key: str


class FieldOptionsChanged(FormEvent):
    """The option list offered for a selector changed.

    ``options`` holds ``Option`` instances; it is typed loosely to keep the
    event layer free of the cascade models.
    """

    kind: Literal[EventKind.FIELD_OPTIONS_CHANGED] = EventKind.FIELD_OPTIONS_CHANGED
    key: str
    options: tuple[Any, ...] = ()


class ValidationStateChanged(FormEvent):
    """The form flipped between having errors and having none."""

    kind: Literal[EventKind.VALIDATION_STATE_CHANGED] = EventKind.VALIDATION_STATE_CHANGED
    is_valid: bool
    error_count: int = 0


class StateReset(FormEvent):
    kind: Literal[EventKind.STATE_RESET] = EventKind.STATE_RESET


class SystemStateChanged(FormEvent):
    kind: Literal[EventKind.SYSTEM_STATE_CHANGED] = EventKind.SYSTEM_STATE_CHANGED
    name: str
    value: bool


AnyFormEvent = Annotated[
    FieldChanged
    | FieldVisibilityChanged
    | FieldDisabledChanged
    | FieldTouched
    | FieldOptionsChanged
    | ValidationStateChanged
    | StateReset
    | SystemStateChanged,
    Field(discriminator="kind"),
]
