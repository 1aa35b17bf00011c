"""Orchestrator: wires poller, normalization, dedup, and ranking.

Data flow:
  1. SearchPoller: initiate -> poll -> fetch (terminal errors propagate)
  2. Truncate to the requested limit (upstream does not always respect it)
  3. Normalize each profile (identity, link, experience, elision)
  4. Drop duplicate identities within this result set, first one wins
  5. Optionally rank for presentation (after all normalization)
"""

import asyncio
import json
import logging
from collections.abc import Sequence
from datetime import datetime

from candidate_discovery.core.config import RankingWeights, Settings
from candidate_discovery.core.schemas import DiscoveryResult, NormalizedCandidate, SearchRequest
from candidate_discovery.pipeline.normalizer import normalize_profiles
from candidate_discovery.pipeline.poller import ProgressCallback, SearchPoller, Sleep
from candidate_discovery.pipeline.ranker import rank_candidates
from candidate_discovery.upstream.base import SearchUpstream

logger = logging.getLogger(__name__)


async def discover_candidates(
    request: SearchRequest,
    upstream: SearchUpstream,
    settings: Settings | None = None,
    *,
    sleep: Sleep = asyncio.sleep,
    on_progress: ProgressCallback | None = None,
    now: datetime | None = None,
) -> DiscoveryResult:
    """Run one search end to end and return deduplicated, normalized candidates.

    Raises:
        PipelineError: Any terminal failure of the upstream protocol.
    """
    settings = settings or Settings()
    poller = SearchPoller(upstream, settings.polling, sleep=sleep, on_progress=on_progress)

    logger.info("Searching candidates for '%s' (limit %d)", request.keywords, request.limit)
    results = await poller.run(request)
    logger.info(
        "Search done after %d status checks: %d profiles, %d available",
        poller.attempts, len(results.data), results.total_count,
    )

    profiles = results.data
    truncated = max(0, len(profiles) - request.limit)
    if truncated:
        logger.warning(
            "Upstream returned %d profiles but limit was %d - truncating",
            len(profiles), request.limit,
        )
        profiles = profiles[: request.limit]

    normalized = normalize_profiles(profiles, now)
    unique = _dedupe(normalized)

    return DiscoveryResult(
        candidates=unique,
        total_count=results.total_count,
        total_fetched=len(unique),
        duplicates_dropped=len(normalized) - len(unique),
        truncated=truncated,
    )


def rank(
    candidates: Sequence[NormalizedCandidate],
    narrative: str | None = None,
    weights: RankingWeights | None = None,
) -> list[NormalizedCandidate]:
    """Order candidates for presentation. See ``rank_candidates``."""
    return rank_candidates(candidates, narrative, weights)


def export_candidates_json(candidates: Sequence[NormalizedCandidate]) -> str:
    """Export candidates as a compact-payload JSON array."""
    return json.dumps([c.to_payload() for c in candidates], indent=2, ensure_ascii=False)


def _dedupe(candidates: list[NormalizedCandidate]) -> list[NormalizedCandidate]:
    seen: set[str] = set()
    unique: list[NormalizedCandidate] = []
    for candidate in candidates:
        if candidate.public_id in seen:
            logger.debug("Duplicate identity '%s' - dropping", candidate.public_id)
            continue
        seen.add(candidate.public_id)
        unique.append(candidate)
    return unique
