"""Pipeline error taxonomy.

Every error here is terminal for one discovery run and propagates to the
caller. Per-profile transforms never raise; they degrade instead.
"""


class PipelineError(Exception):
    """Base class for every failure surfaced by candidate discovery."""


class UpstreamUnavailable(PipelineError):
    """The upstream search service cannot be reached or is not configured."""


class ConfigurationMissing(UpstreamUnavailable):
    """Upstream credentials are absent. Raised before any network call."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        names = ", ".join(missing)
        super().__init__(f"Upstream search credentials not configured. Set: {names}")


class _HttpStatusError(PipelineError):
    """Upstream answered with a non-success HTTP status."""

    operation = "call upstream"

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Failed to {self.operation}: {status_code} {body}".rstrip())


class InitiateRejected(_HttpStatusError):
    operation = "initiate search"


class StatusCheckFailed(_HttpStatusError):
    operation = "check search status"


class FetchFailed(_HttpStatusError):
    operation = "get search results"


class UpstreamError(PipelineError):
    """The polled status itself reported ``error``; message kept verbatim."""

    def __init__(self, message: str) -> None:
        self.upstream_message = message
        super().__init__(f"Search failed: {message}")


class TimedOut(PipelineError):
    """Attempt budget exhausted while the search was still pending/processing."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Search timed out after {attempts} attempts")
