"""Core data models: search requests, upstream payloads, normalized candidates.

Upstream records are duck-typed and frequently incomplete, so every
RawProfile field is optional. Transforms must never assume presence.
"""

import logging
from enum import Enum
from typing import Any, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from candidate_discovery.core.payload import remove_empty_fields

logger = logging.getLogger(__name__)

MAX_LIMIT = 30
DEFAULT_LIMIT = 25


class SearchRequest(BaseModel):
    """Parameters for one upstream people search. Consumed once per search."""

    model_config = ConfigDict(frozen=True)

    keywords: str
    title_keywords: list[str] = Field(default_factory=list)
    current_company_names: list[str] = Field(default_factory=list)
    past_company_names: list[str] = Field(default_factory=list)
    geo_codes: list[int] = Field(default_factory=list)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)

    @field_validator("keywords")
    @classmethod
    def keywords_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "keywords must not be empty"
            raise ValueError(msg)
        return v.strip()

    @field_validator("title_keywords", "current_company_names", "past_company_names")
    @classmethod
    def drop_blank_terms(cls, v: list[str]) -> list[str]:
        return [term.strip() for term in v if term and term.strip()]

    @field_validator("geo_codes", mode="before")
    @classmethod
    def parse_geo_codes(cls, v: Any) -> list[int]:
        """Accept numeric strings; silently drop anything unparseable."""
        if v is None:
            return []
        codes: list[int] = []
        for item in v:
            try:
                codes.append(int(str(item).strip()))
            except ValueError:
                continue
        return codes

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, v: int) -> int:
        return min(v, MAX_LIMIT)

    def to_upstream_body(self) -> dict[str, Any]:
        """JSON body for ``POST /search-employees``; empty lists are omitted."""
        body: dict[str, Any] = {"keywords": self.keywords, "limit": self.limit}
        for key in ("title_keywords", "current_company_names", "past_company_names", "geo_codes"):
            value = getattr(self, key)
            if value:
                body[key] = list(value)
        return body


class SearchState(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


class SearchStatus(BaseModel):
    """One observation of the upstream's processing state."""

    state: SearchState = Field(default=SearchState.PROCESSING, alias="status")
    employees_scraped_so_far: int = 0
    message: str = ""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("state", mode="before")
    @classmethod
    def unknown_state_is_processing(cls, v: Any) -> Any:
        # Anything unrecognised keeps the poller waiting rather than failing.
        if isinstance(v, str) and v.lower() in {s.value for s in SearchState}:
            return v.lower()
        if isinstance(v, SearchState):
            return v
        return SearchState.PROCESSING

    @field_validator("employees_scraped_so_far", mode="before")
    @classmethod
    def count_or_zero(cls, v: Any) -> Any:
        return _int_or_none(v) or 0

    @field_validator("message", mode="before")
    @classmethod
    def message_or_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def is_terminal(self) -> bool:
        return self.state in (SearchState.DONE, SearchState.ERROR)


def _int_or_none(v: Any) -> int | None:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    try:
        return int(str(v).strip())
    except ValueError:
        return None


def _validate_each(model: type[BaseModel], items: Any) -> list[Any]:
    """Validate list items one by one, dropping the ones that do not fit."""
    if not isinstance(items, list):
        return []
    valid: list[Any] = []
    for item in items:
        if isinstance(item, model):
            valid.append(item)
            continue
        if not isinstance(item, dict):
            continue
        try:
            valid.append(model.model_validate(item))
        except ValidationError:
            logger.warning("Dropping malformed %s record", model.__name__, exc_info=True)
    return valid


_TEXT_ARGS = {str, type(None)}


def _is_scalar_text(v: Any) -> bool:
    return isinstance(v, str | int | float) and not isinstance(v, bool)


class _RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def null_non_scalar_text(cls, data: Any) -> Any:
        """A text field of the wrong shape becomes absent; the record survives."""
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for name, field in cls.model_fields.items():
            if set(get_args(field.annotation)) != _TEXT_ARGS:
                continue
            value = cleaned.get(name)
            if value is not None and not _is_scalar_text(value):
                logger.debug("Ignoring non-text %s.%s: %r", cls.__name__, name, value)
                cleaned[name] = None
        return cleaned


class RawEducation(_RawRecord):
    degree: str | None = None
    field_of_study: str | None = None
    school: str | None = None
    date_range: str | None = None
    start_year: int | None = None
    end_year: int | None = None

    @field_validator("start_year", "end_year", mode="before")
    @classmethod
    def lenient_int(cls, v: Any) -> int | None:
        return _int_or_none(v)


class RawExperience(_RawRecord):
    title: str | None = None
    company: str | None = None
    company_logo_url: str | None = None
    location: str | None = None
    description: str | None = None
    duration: str | None = None
    date_range: str | None = None
    start_year: int | None = None
    start_month: int | None = None
    end_year: int | None = None
    end_month: int | None = None
    is_current: bool | None = None

    @field_validator("start_year", "start_month", "end_year", "end_month", mode="before")
    @classmethod
    def lenient_int(cls, v: Any) -> int | None:
        return _int_or_none(v)

    @field_validator("is_current", mode="before")
    @classmethod
    def lenient_bool(cls, v: Any) -> bool | None:
        if v is None or v == "":
            return None
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1", "yes")
        return bool(v)


class RawProfile(_RawRecord):
    """One candidate as the upstream returns it. Nothing is guaranteed."""

    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    headline: str | None = None
    job_title: str | None = None
    company: str | None = None
    company_logo_url: str | None = None
    location: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    about: str | None = None
    public_id: str | None = None
    profile_id: str | None = None
    linkedin_url: str | None = None
    profile_image_url: str | None = None
    educations: list[RawEducation] = Field(default_factory=list)
    experiences: list[RawExperience] = Field(default_factory=list)

    @field_validator("profile_id", "public_id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> str | None:
        return str(v) if _is_scalar_text(v) else None

    @field_validator("educations", mode="before")
    @classmethod
    def valid_educations(cls, v: Any) -> list[Any]:
        return _validate_each(RawEducation, v)

    @field_validator("experiences", mode="before")
    @classmethod
    def valid_experiences(cls, v: Any) -> list[Any]:
        return _validate_each(RawExperience, v)


class SearchResults(BaseModel):
    """Payload of ``GET /get-search-results``."""

    data: list[RawProfile] = Field(default_factory=list)
    total_count: int = 0
    message: str = ""

    @field_validator("data", mode="before")
    @classmethod
    def valid_profiles(cls, v: Any) -> list[Any]:
        return _validate_each(RawProfile, v)

    @field_validator("total_count", mode="before")
    @classmethod
    def count_or_zero(cls, v: Any) -> Any:
        return _int_or_none(v) or 0

    @field_validator("message", mode="before")
    @classmethod
    def message_or_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)


class EducationSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    degree: str | None = None
    field: str | None = None
    school: str | None = None


class RoleSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str | None = None
    company: str | None = None
    duration: str | None = None
    current: bool | None = None


class NormalizedCandidate(BaseModel):
    """Consumer-facing candidate. Optional fields without data stay None.

    ``to_payload`` is the wire form: None and empty values are elided.
    """

    model_config = ConfigDict(frozen=True)

    public_id: str
    name: str
    headline: str | None = None
    title: str | None = None
    company: str | None = None
    location: str | None = None
    experience_years: float | None = None
    education: list[EducationSummary] | None = None
    recent_roles: list[RoleSummary] | None = None
    profile_url: str
    about: str | None = None
    company_logo_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return remove_empty_fields(self.model_dump()) or {}


class DiscoveryResult(BaseModel):
    """Outcome of one completed discovery run."""

    candidates: list[NormalizedCandidate] = Field(default_factory=list)
    total_count: int = 0
    total_fetched: int = 0
    duplicates_dropped: int = 0
    truncated: int = 0

    def to_payload(self) -> dict[str, Any]:
        """Agent-facing tool response."""
        if self.candidates:
            message = f"Found {len(self.candidates)} candidates matching your criteria."
        else:
            message = "No candidates found matching the search criteria."
        return {
            "success": True,
            "message": message,
            "total_count": self.total_count,
            "total_fetched": self.total_fetched,
            "data": [c.to_payload() for c in self.candidates],
        }
