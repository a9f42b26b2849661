"""Reference dataset models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResourceKey(str, Enum):
    """Reference datasets the form loads."""

    LOCATIONS = "locations"
    PREFIXES = "prefixes"
    PROGRAMS = "programs"
    PERIODS = "periods"
    UNIVERSITIES = "universities"
    COLLEGES = "colleges"


class Option(BaseModel):
    """One selectable option, normalized from any dataset shape.

    ``meta`` carries dataset extras the cascade needs later (a department's
    cities, a college's city and calendar).
    """

    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    is_priority: bool = False
    meta: dict[str, Any] = Field(default_factory=dict)

    def with_priority(self, is_priority: bool = True) -> "Option":
        return self.model_copy(update={"is_priority": is_priority})

    def with_label(self, label: str) -> "Option":
        return self.model_copy(update={"label": label})


@dataclass
class CacheEntry:
    """A cached dataset and the time (epoch seconds) it was stored."""

    key: ResourceKey
    data: Any
    timestamp: float

    def is_fresh(self, now: float, ttl_hours: float) -> bool:
        return now < self.timestamp + ttl_hours * 3600
