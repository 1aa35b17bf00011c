"""Presentation ordering for normalized candidates.

Heuristic, not relevance: candidates the narrative mentions come first
(earlier mention ranks higher), then richer profiles. Weights live in
RankingWeights so they can be tuned without changing the comparator.
"""

import logging
from collections.abc import Sequence

from candidate_discovery.core.config import RankingWeights
from candidate_discovery.core.schemas import NormalizedCandidate
from candidate_discovery.pipeline.identity import FALLBACK_NAME
from candidate_discovery.pipeline.normalizer import UNKNOWN_NAME

logger = logging.getLogger(__name__)


def mention_needles(candidate: NormalizedCandidate) -> list[str]:
    """Name and identity to look for, minus placeholders for missing data.

    A nameless profile is called "Unknown" and its fallback identity starts
    with "unknown"; ordinary prose must not count as mentioning it.
    """
    needles: list[str] = []
    name = candidate.name.strip()
    if name and name != UNKNOWN_NAME:
        needles.append(candidate.name)
    identity = candidate.public_id.strip()
    if identity and not _is_placeholder_identity(identity):
        needles.append(candidate.public_id)
    return needles


def mention_position(candidate: NormalizedCandidate, narrative: str) -> int | None:
    """Earliest index at which the narrative names the candidate, or None."""
    positions = [narrative.find(needle) for needle in mention_needles(candidate)]
    found = [pos for pos in positions if pos >= 0]
    return min(found) if found else None


def mention_bonus(position: int, narrative_length: int, weights: RankingWeights) -> float:
    """Up to ``mention_base`` points, less the further into the text."""
    if narrative_length <= 0:
        return weights.mention_base
    return weights.mention_base - (position / narrative_length) * weights.mention_position_span


def richness_score(candidate: NormalizedCandidate, weights: RankingWeights) -> float:
    """Tie-break score from how much displayable data a candidate carries."""
    score = 0.0

    about_len = len(candidate.about or "")
    if about_len > weights.about_long_threshold:
        score += weights.about_long_bonus
    elif about_len > weights.about_medium_threshold:
        score += weights.about_medium_bonus

    if candidate.education:
        score += weights.education_bonus

    if candidate.company_logo_url:
        score += weights.company_logo_bonus

    title_len = len(candidate.title or "")
    if title_len > weights.title_long_threshold:
        score += weights.title_long_bonus
    elif title_len > weights.title_medium_threshold:
        score += weights.title_medium_bonus

    location_len = len(candidate.location or "")
    if location_len > weights.location_long_threshold:
        score += weights.location_long_bonus
    elif location_len > weights.location_medium_threshold:
        score += weights.location_medium_bonus

    if len(candidate.company or "") > weights.company_name_threshold:
        score += weights.company_name_bonus

    return score


def rank_candidates(
    candidates: Sequence[NormalizedCandidate],
    narrative: str | None = None,
    weights: RankingWeights | None = None,
) -> list[NormalizedCandidate]:
    """Return candidates ordered for presentation, best first.

    Mentioned candidates always precede unmentioned ones. Within each group
    the order is by descending score; equal scores keep their input order.
    """
    weights = weights or RankingWeights()
    text = narrative or ""

    keyed: list[tuple[bool, float, NormalizedCandidate]] = []
    for candidate in candidates:
        score = richness_score(candidate, weights)
        position = mention_position(candidate, text) if text else None
        if position is not None:
            score += mention_bonus(position, len(text), weights)
        keyed.append((position is not None, score, candidate))

    # sorted() is stable, so ties keep upstream order
    keyed_sorted = sorted(keyed, key=lambda k: (k[0], k[1]), reverse=True)
    mentioned_count = sum(1 for k in keyed if k[0])
    logger.debug("Ranked %d candidates (%d mentioned)", len(keyed), mentioned_count)
    return [k[2] for k in keyed_sorted]


def _is_placeholder_identity(identity: str) -> bool:
    return identity == FALLBACK_NAME or identity.startswith(f"{FALLBACK_NAME}-at-")
