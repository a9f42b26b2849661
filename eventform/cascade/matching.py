"""Fuzzy comparison of configured names against dataset names.

Operators write allow-lists by hand ("Col. San José", "Bogotá D.C.",
"Calendario A") while datasets spell things their own way. Comparisons
here are case-insensitive, accent-folded and punctuation-free, and know
the usual school-name abbreviations, city aliases and calendar labels.
"""

import re
import unicodedata
from collections.abc import Iterable, Sequence

from eventform.data.models import Option

_PUNCTUATION = re.compile(r"[^\w\s]")
_SPACES = re.compile(r"\s+")

# Full word -> abbreviations seen in configuration
ABBREVIATIONS: dict[str, tuple[str, ...]] = {
    "colegio": ("col", "c"),
    "instituto": ("inst", "i"),
    "liceo": ("lic",),
    "gimnasio": ("gim",),
    "academia": ("acad",),
    "escuela": ("esc",),
    "pedagogico": ("pedag",),
    "tecnico": ("tecn",),
    "nacional": ("nal",),
    "departamental": ("depto", "dpto"),
    "municipal": ("mpal",),
    "femenino": ("fem",),
    "masculino": ("masc",),
    "san": ("s",),
    "santa": ("sta",),
    "santo": ("sto",),
    "mayor": ("may",),
    "nuestra": ("ntra", "n"),
    "senora": ("sra", "snra"),
}

_EXPANSIONS: dict[str, str] = {
    abbrev: full for full, abbrevs in ABBREVIATIONS.items() for abbrev in abbrevs
}

CITY_ALIASES: dict[str, tuple[str, ...]] = {
    "bogota": ("bogota dc", "bogota d c", "santa fe de bogota"),
    "medellin": ("ciudad de medellin",),
    "cali": ("santiago de cali",),
    "barranquilla": ("ciudad de barranquilla",),
    "cartagena": ("cartagena de indias",),
}

CALENDAR_ALIASES: dict[str, tuple[str, ...]] = {
    "a": ("calendario a", "cal a", "academico"),
    "b": ("calendario b", "cal b", "academico b"),
    "flexible": ("flex", "mixto", "personalizado"),
}


def normalize_text(value: str | None) -> str:
    """Lower-case, strip accents and punctuation, collapse whitespace."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value.lower())
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    folded = _PUNCTUATION.sub(" ", folded)
    return _SPACES.sub(" ", folded).strip()


def _expand(normalized: str) -> str:
    return " ".join(_EXPANSIONS.get(token, token) for token in normalized.split())


def _canonical(normalized: str, aliases: dict[str, tuple[str, ...]]) -> str:
    for canonical, variants in aliases.items():
        if normalized == canonical or normalized in variants:
            return canonical
    return normalized


def names_match(dataset_name: str | None, configured: str | None) -> bool:
    """Institution names, tolerant of the usual abbreviations."""
    left, right = normalize_text(dataset_name), normalize_text(configured)
    if not left or not right:
        return False
    return left == right or _expand(left) == _expand(right)


def cities_match(dataset_city: str | None, configured: str | None) -> bool:
    left, right = normalize_text(dataset_city), normalize_text(configured)
    if not left or not right:
        return False
    return _canonical(left, CITY_ALIASES) == _canonical(right, CITY_ALIASES)


def calendars_match(dataset_calendar: str | None, configured: str | None) -> bool:
    left, right = normalize_text(dataset_calendar), normalize_text(configured)
    if not left or not right:
        return False
    return _canonical(left, CALENDAR_ALIASES) == _canonical(right, CALENDAR_ALIASES)


def matches_any(option: Option, allow_list: Iterable[str]) -> bool:
    """True if an allow-list entry names the option by value or by label."""
    value = normalize_text(option.value)
    label = _expand(normalize_text(option.label))
    for entry in allow_list:
        normalized = normalize_text(entry)
        if not normalized:
            continue
        if normalized == value or _expand(normalized) == label:
            return True
    return False


def contains_any(option: Option, substrings: Iterable[str]) -> bool:
    """True if the option label contains one of ``substrings``."""
    label = normalize_text(option.label)
    return any(
        normalized in label
        for normalized in (normalize_text(s) for s in substrings)
        if normalized
    )


def mark_priority(options: Iterable[Option], substrings: Sequence[str]) -> list[Option]:
    """Flag options whose label contains a priority substring."""
    if not substrings:
        return list(options)
    return [
        option.with_priority(True) if contains_any(option, substrings) else option
        for option in options
    ]


def sort_by_priority(options: Iterable[Option]) -> list[Option]:
    """Priority options first; relative order is kept within each group."""
    ordered = list(options)
    return [o for o in ordered if o.is_priority] + [o for o in ordered if not o.is_priority]
