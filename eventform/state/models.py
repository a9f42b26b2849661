"""Field state models."""

from typing import Any

from pydantic import BaseModel, Field


class FieldDefinition(BaseModel):
    """Construction-time definition of one form field.

    ``required`` only matters for fields without a registered rule chain.
    """

    key: str = Field(..., min_length=1)
    default: str = ""
    visible: bool = True
    disabled: bool = False
    required: bool = False
    label: str | None = None

    def initial_state(self) -> "FieldState":
        return FieldState(
            key=self.key,
            value=self.default,
            visible=self.visible,
            disabled=self.disabled,
        )


class FieldState(BaseModel):
    """Current state of one field.

    A field that is not visible never carries an error.
    """

    key: str
    value: str = ""
    visible: bool = True
    disabled: bool = False
    touched: bool = False
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.value.strip()


class SystemState(BaseModel):
    """Form-wide flags that are not field values."""

    is_submitting: bool = False
    dev_mode: bool = False
    test_mode: bool = False
    debug_mode: bool = False


class StoreSummary(BaseModel):
    """Snapshot counters used for debugging and logging."""

    total_fields: int
    visible_fields: int
    touched_fields: int
    error_count: int
    is_valid: bool
    system: SystemState
    values: dict[str, Any] = Field(default_factory=dict)
