"""Typed event bus and form event models."""

from eventform.events.bus import EventBus, EventHandler, Subscription
from eventform.events.models import (
    AnyFormEvent,
    EventKind,
    FieldChanged,
    FieldDisabledChanged,
    FieldOptionsChanged,
    FieldTouched,
    FieldVisibilityChanged,
    FormEvent,
    StateReset,
    SystemStateChanged,
    ValidationStateChanged,
)

__all__ = [
    "AnyFormEvent",
    "EventBus",
    "EventHandler",
    "EventKind",
    "FieldChanged",
    "FieldDisabledChanged",
    "FieldOptionsChanged",
    "FieldTouched",
    "FieldVisibilityChanged",
    "FormEvent",
    "StateReset",
    "Subscription",
    "SystemStateChanged",
    "ValidationStateChanged",
]
