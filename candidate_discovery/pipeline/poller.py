"""Initiate -> poll -> fetch state machine for the asynchronous upstream.

States:
  Idle -> Initiated -> Polling -> Completed | Failed | TimedOut

Polling uses a fixed interval and a bounded attempt count, so the worst-case
wall-clock time is interval * max_attempts. The poller sleeps one interval
before every status check. Cancelling the awaiting task aborts the loop at
the next suspension point.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from candidate_discovery.core.config import PollingConfig
from candidate_discovery.core.errors import PipelineError, TimedOut, UpstreamError
from candidate_discovery.core.schemas import SearchRequest, SearchResults, SearchState, SearchStatus
from candidate_discovery.upstream.base import SearchUpstream

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
ProgressCallback = Callable[[SearchStatus, int], None]


class PollState(str, Enum):
    IDLE = "idle"
    INITIATED = "initiated"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class SearchPoller:
    """Drives one search through the upstream's three-step protocol.

    One instance per search. ``state`` and ``attempts`` are observable after
    ``run`` returns or raises.
    """

    def __init__(
        self,
        upstream: SearchUpstream,
        config: PollingConfig | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._upstream = upstream
        self._config = config or PollingConfig()
        self._sleep = sleep
        self._on_progress = on_progress
        self.state = PollState.IDLE
        self.attempts = 0

    async def run(self, request: SearchRequest) -> SearchResults:
        """Run the search to a terminal state.

        Returns:
            The fetched results once the upstream reports ``done``.

        Raises:
            UpstreamUnavailable: Credentials missing or upstream unreachable.
            InitiateRejected: Upstream refused the search.
            StatusCheckFailed: A status check returned a non-success status.
            UpstreamError: The upstream reported ``error``.
            TimedOut: Still pending/processing after ``max_attempts`` checks.
            FetchFailed: Results could not be fetched after ``done``.
        """
        if self.state is not PollState.IDLE:
            msg = f"SearchPoller already used (state={self.state.value})"
            raise RuntimeError(msg)

        try:
            handle = await self._upstream.initiate(request)
            self._transition(PollState.INITIATED)
            await self._poll(handle)
            return await self._upstream.fetch_results(handle)
        except PipelineError:
            if self.state not in (PollState.FAILED, PollState.TIMED_OUT):
                self._transition(PollState.FAILED)
            raise

    async def _poll(self, handle: str) -> None:
        self._transition(PollState.POLLING)
        max_attempts = self._config.max_attempts

        while self.attempts < max_attempts:
            await self._sleep(self._config.interval_seconds)
            status = await self._upstream.check_status(handle)
            self.attempts += 1
            logger.info(
                "Search status (attempt %d/%d): %s",
                self.attempts, max_attempts, status.state.value,
            )
            if self._on_progress is not None:
                self._on_progress(status, self.attempts)

            if status.state is SearchState.DONE:
                self._transition(PollState.COMPLETED)
                return
            if status.state is SearchState.ERROR:
                self._transition(PollState.FAILED)
                raise UpstreamError(status.message)

        self._transition(PollState.TIMED_OUT)
        raise TimedOut(self.attempts)

    def _transition(self, new_state: PollState) -> None:
        logger.debug("Poller %s -> %s", self.state.value, new_state.value)
        self.state = new_state
