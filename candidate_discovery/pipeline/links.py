"""Outbound profile link with search-engine fallback.

A direct link is passed through verbatim, never rebuilt from the identity:
a reconstructed link can point to the wrong person.
"""

import logging
from urllib.parse import quote

from candidate_discovery.core.schemas import RawProfile

logger = logging.getLogger(__name__)

SEARCH_ENGINE_URL = "https://www.google.com/search?q="
PLATFORM_TERM = "LinkedIn"


def build_search_url(terms: list[str]) -> str:
    """Search-engine query for the given terms plus the platform name."""
    query = " ".join([*terms, PLATFORM_TERM])
    return f"{SEARCH_ENGINE_URL}{quote(query, safe='')}"


def resolve_profile_url(profile: RawProfile, identity: str) -> str:
    """Best available link for a profile. Never empty, never raises."""
    direct = (profile.linkedin_url or "").strip()
    if direct:
        return direct

    terms = [
        value.strip()
        for value in (profile.full_name, profile.job_title, profile.company, profile.location)
        if value and value.strip()
    ]
    logger.debug("No direct link for %s - falling back to search URL", identity)
    return build_search_url(terms)
