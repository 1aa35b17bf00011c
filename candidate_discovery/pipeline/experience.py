"""Total years of experience from employment intervals.

Concurrent roles are NOT de-overlapped: two simultaneous roles both count in
full. Existing rankings depend on this.
"""

import math
from collections.abc import Iterable
from datetime import datetime

from candidate_discovery.core.schemas import RawExperience


def months_elapsed(experience: RawExperience, now: datetime) -> int:
    """Elapsed months for one entry; 0 when it has no start year.

    Start month defaults to January. Current roles end now. Closed roles
    with a missing end default to the current year and December.
    """
    if experience.start_year is None:
        return 0
    start_month = experience.start_month or 1
    if experience.is_current:
        end_year, end_month = now.year, now.month
    else:
        end_year = experience.end_year or now.year
        end_month = experience.end_month or 12
    months = (end_year - experience.start_year) * 12 + (end_month - start_month)
    return max(months, 0)


def calculate_years_of_experience(
    experiences: Iterable[RawExperience],
    now: datetime | None = None,
) -> float:
    """Sum of all entries' months / 12, rounded half-up to one decimal."""
    now = now or datetime.now()
    total_months = sum(months_elapsed(exp, now) for exp in experiences)
    return math.floor(total_months / 12 * 10 + 0.5) / 10
