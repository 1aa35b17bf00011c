"""Stable candidate identity from an incomplete upstream profile.

Priority (first non-empty wins):
  1. public_id
  2. slug after /in/ in linkedin_url
  3. profile_id (numeric, meaningless outside the upstream)
  4. slugified name, suffixed with -at-{slugified company} when known

Step 4 always yields a value, so every profile is addressable. Two people
sharing name and employer collide there; that is accepted.
"""

import re

from candidate_discovery.core.schemas import RawProfile

PROFILE_SLUG_PATTERN = re.compile(r"linkedin\.com/in/([^/?#]+)", re.IGNORECASE)
_NON_SLUG = re.compile(r"[^a-z0-9]+")

FALLBACK_NAME = "unknown"


def slugify(text: str | None) -> str:
    """Lower-case, collapse non-alphanumerics to '-', trim dashes."""
    if not text:
        return ""
    return _NON_SLUG.sub("-", text.lower()).strip("-")


def extract_profile_slug(url: str | None) -> str | None:
    """Return the path segment after ``/in/`` in a profile link, if any."""
    if not url:
        return None
    match = PROFILE_SLUG_PATTERN.search(url)
    if match is None:
        return None
    slug = match.group(1).strip()
    return slug or None


def resolve_identity(profile: RawProfile) -> str:
    public_id = _clean(profile.public_id)
    if public_id:
        return public_id

    slug = extract_profile_slug(profile.linkedin_url)
    if slug:
        return slug

    profile_id = _clean(profile.profile_id)
    if profile_id:
        return profile_id

    name_slug = slugify(profile.full_name) or FALLBACK_NAME
    company_slug = slugify(profile.company)
    return f"{name_slug}-at-{company_slug}" if company_slug else name_slug


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None
