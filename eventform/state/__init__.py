"""Field state store, field models and the registration form schema."""

from eventform.state.fields import AttendeeType, FieldKey, default_field_definitions
from eventform.state.models import FieldDefinition, FieldState, StoreSummary, SystemState
from eventform.state.store import FieldStateStore
from eventform.state.utm import UTM_PARAMETERS, clean_utm_value, extract_utm_values

__all__ = [
    "AttendeeType",
    "FieldDefinition",
    "FieldKey",
    "FieldState",
    "FieldStateStore",
    "StoreSummary",
    "SystemState",
    "UTM_PARAMETERS",
    "clean_utm_value",
    "default_field_definitions",
    "extract_utm_values",
]
