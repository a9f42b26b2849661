"""Allow-list filters applied to cascading selectors.

Every list is opt-in: an empty list keeps the full dataset. Entries may be
codes or human names; names are compared accent- and case-insensitively.
"""

from pydantic import BaseModel, Field, field_validator


class FilterConfig(BaseModel):
    """Per-field allow-lists consumed read-only by the cascade resolver."""

    countries: list[str] = Field(default_factory=list)
    departments: list[str] = Field(default_factory=list)
    cities: list[str] = Field(default_factory=list)

    academic_levels: list[str] = Field(default_factory=list)
    faculties: list[str] = Field(default_factory=list)
    programs: list[str] = Field(default_factory=list)

    colleges: list[str] = Field(default_factory=list)
    college_cities: list[str] = Field(default_factory=list)
    college_calendars: list[str] = Field(default_factory=list)
    universities: list[str] = Field(default_factory=list)

    attendee_types: list[str] = Field(
        default_factory=lambda: [
            "Aspirante",
            "Padre de familia y/o acudiente",
            "Docente y/o psicoorientador",
            "Visitante PUJ",
            "Administrativo PUJ",
        ]
    )
    attendance_days: list[str] = Field(default_factory=list)

    country_priority: list[str] = Field(default_factory=lambda: ["colombia"])
    department_priority: list[str] = Field(default_factory=lambda: ["bogota"])

    @field_validator(
        "countries",
        "departments",
        "cities",
        "academic_levels",
        "faculties",
        "programs",
        "colleges",
        "college_cities",
        "college_calendars",
        "universities",
        mode="before",
    )
    @classmethod
    def accept_single_value(cls, value: object) -> object:
        """A bare string is a one-element allow-list."""
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value
