"""Named recruiting locations and their upstream geo codes."""

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Upstream reuses the Los Angeles code for California.
AVAILABLE_LOCATIONS: dict[str, int] = {
    "Mumbai": 106164952,
    "Bangalore": 112376381,
    "Delhi": 106187582,
    "Chennai": 106888327,
    "Hyderabad": 105556991,
    "Kolkata": 111795395,
    "Pune": 114806696,
    "Ahmedabad": 104990346,
    "USA": 103644278,
    "New York City": 102571732,
    "San Francisco": 102277331,
    "Los Angeles": 103104382,
    "Texas": 102748644,
    "California": 103104382,
    "Florida": 104677530,
    "Washington": 106928490,
}

_BY_LOWER = {name.lower(): code for name, code in AVAILABLE_LOCATIONS.items()}


def resolve_geo_codes(values: Iterable[str]) -> list[int]:
    """Map location names or numeric codes to geo codes.

    Names match case-insensitively. Unknown names are logged and skipped.
    Duplicates are removed, first occurrence wins.
    """
    codes: list[int] = []
    for value in values:
        key = value.strip()
        if not key:
            continue
        if key.isdigit():
            code = int(key)
        else:
            found = _BY_LOWER.get(key.lower())
            if found is None:
                logger.warning("Unknown location '%s' - skipping", value)
                continue
            code = found
        if code not in codes:
            codes.append(code)
    return codes
