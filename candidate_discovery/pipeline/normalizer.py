"""RawProfile -> NormalizedCandidate, with empty-field elision.

Downstream consumers are token-budgeted, so absent data must be absent, not
present-as-empty. Payload size is bounded only by selection (2 education
entries, 3 roles); no text is ever truncated, ``about`` included.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from candidate_discovery.core.payload import remove_empty_fields
from candidate_discovery.core.schemas import (
    EducationSummary,
    NormalizedCandidate,
    RawEducation,
    RawExperience,
    RawProfile,
    RoleSummary,
)
from candidate_discovery.pipeline.experience import calculate_years_of_experience
from candidate_discovery.pipeline.identity import resolve_identity
from candidate_discovery.pipeline.links import resolve_profile_url

logger = logging.getLogger(__name__)

MAX_EDUCATION = 2
MAX_ROLES = 3
UNKNOWN_NAME = "Unknown"


def normalize_profile(profile: RawProfile, now: datetime | None = None) -> NormalizedCandidate:
    identity = resolve_identity(profile)
    years = calculate_years_of_experience(profile.experiences, now)

    return NormalizedCandidate(
        public_id=identity,
        name=_display_name(profile),
        headline=_text(profile.headline),
        title=_text(profile.job_title),
        company=_text(profile.company),
        location=_text(profile.location),
        experience_years=years if years > 0 else None,
        education=_education(profile.educations),
        recent_roles=_recent_roles(profile.experiences),
        profile_url=resolve_profile_url(profile, identity),
        about=_text(profile.about),
        company_logo_url=_text(profile.company_logo_url),
    )


def normalize_profiles(
    profiles: Iterable[RawProfile],
    now: datetime | None = None,
) -> list[NormalizedCandidate]:
    """Normalize a batch. One bad record never blocks the rest."""
    now = now or datetime.now()
    results: list[NormalizedCandidate] = []
    for index, profile in enumerate(profiles):
        try:
            results.append(normalize_profile(profile, now))
        except Exception:
            logger.warning("Failed to normalize profile #%d, skipping", index, exc_info=True)
    return results


def _display_name(profile: RawProfile) -> str:
    full_name = _text(profile.full_name)
    if full_name:
        return full_name
    parts = [p.strip() for p in (profile.first_name, profile.last_name) if p and p.strip()]
    return " ".join(parts) or UNKNOWN_NAME


def _text(value: str | None) -> str | None:
    """Return the value unchanged, or None when blank."""
    if value is None or not value.strip():
        return None
    return value


def _education(entries: list[RawEducation]) -> list[EducationSummary] | None:
    summaries = []
    for edu in entries[:MAX_EDUCATION]:
        fields = remove_empty_fields(
            {"degree": edu.degree, "field": edu.field_of_study, "school": edu.school}
        )
        if fields:
            summaries.append(EducationSummary(**fields))
    return summaries or None


def _recent_roles(entries: list[RawExperience]) -> list[RoleSummary] | None:
    summaries = []
    for exp in entries[:MAX_ROLES]:
        fields = remove_empty_fields(
            {
                "title": exp.title,
                "company": exp.company,
                "duration": exp.duration,
                "current": exp.is_current,
            }
        )
        if fields:
            summaries.append(RoleSummary(**fields))
    return summaries or None
