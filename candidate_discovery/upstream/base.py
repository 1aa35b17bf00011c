"""Abstract contract for the asynchronous people-search upstream."""

from abc import ABC, abstractmethod

from candidate_discovery.core.schemas import SearchRequest, SearchResults, SearchStatus


class SearchUpstream(ABC):
    """The three raw upstream operations. No business logic lives here."""

    @abstractmethod
    async def initiate(self, request: SearchRequest) -> str:
        """Start a search and return the upstream's request handle."""

    @abstractmethod
    async def check_status(self, handle: str) -> SearchStatus:
        """Return the current processing state for a handle."""

    @abstractmethod
    async def fetch_results(self, handle: str) -> SearchResults:
        """Return the results of a search the upstream reported as done."""
