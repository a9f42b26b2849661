"""UTM campaign parameters from a landing-page query string.

Each ``utm_<field>`` parameter maps onto the hidden field of the same
name. Values are trimmed, stripped of markup characters and truncated
before they reach the store.
"""

import re
from collections.abc import Mapping
from urllib.parse import parse_qs

from eventform.state.fields import FieldKey

MAX_UTM_LENGTH = 255

UTM_PARAMETERS: dict[str, str] = {
    f"utm_{key}": key
    for key in (
        FieldKey.SOURCE,
        FieldKey.SUB_SOURCE,
        FieldKey.MEDIUM,
        FieldKey.CAMPAIGN,
        FieldKey.ARTICLE,
        FieldKey.EVENT_NAME,
        FieldKey.EVENT_DATE,
    )
}

_MARKUP = re.compile(r"""[<>'"]""")

QueryParams = str | Mapping[str, str | list[str]]


def clean_utm_value(value: str) -> str:
    return _MARKUP.sub("", value.strip())[:MAX_UTM_LENGTH]


def extract_utm_values(query: QueryParams) -> dict[str, str]:
    """Field values carried by the UTM parameters of a query.

    Args:
        query: Raw query string (with or without a leading ``?``) or
            already parsed parameters

    Returns:
        Cleaned values keyed by field, for non-empty parameters only
    """
    if isinstance(query, str):
        params: Mapping[str, str | list[str]] = parse_qs(query.lstrip("?"))
    else:
        params = query

    values: dict[str, str] = {}
    for param, key in UTM_PARAMETERS.items():
        raw = params.get(param)
        if isinstance(raw, list):
            # First occurrence wins
            raw = raw[0] if raw else None
        if not raw:
            continue
        cleaned = clean_utm_value(raw)
        if cleaned:
            values[key] = cleaned
    return values
