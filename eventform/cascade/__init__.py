"""Cascade engine: dependency edges, text matching and the resolver."""

from eventform.cascade.edges import StandardCascades, allow, allow_scoped
from eventform.cascade.matching import (
    calendars_match,
    cities_match,
    mark_priority,
    matches_any,
    names_match,
    normalize_text,
    sort_by_priority,
)
from eventform.cascade.models import DependencyEdge, OptionSource
from eventform.cascade.resolver import DependencyResolver

__all__ = [
    "DependencyEdge",
    "DependencyResolver",
    "OptionSource",
    "StandardCascades",
    "allow",
    "allow_scoped",
    "calendars_match",
    "cities_match",
    "mark_priority",
    "matches_any",
    "names_match",
    "normalize_text",
    "sort_by_priority",
]
