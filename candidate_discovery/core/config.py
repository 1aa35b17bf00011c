"""Configuration models, YAML loader, and upstream credentials."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from candidate_discovery.core.errors import ConfigurationMissing

HOST_ENV_VAR = "RAPID_API_BASE"
KEY_ENV_VAR = "RAPID_API_KEY"


class UpstreamCredentials(BaseModel):
    """Host and API key for the RapidAPI people-search service."""

    model_config = ConfigDict(frozen=True)

    host: str
    api_key: str = Field(repr=False)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "UpstreamCredentials":
        """Read credentials from the environment.

        Raises:
            ConfigurationMissing: If either variable is unset or blank.
        """
        env = os.environ if environ is None else environ
        host = env.get(HOST_ENV_VAR, "").strip()
        api_key = env.get(KEY_ENV_VAR, "").strip()
        missing = [
            name for name, value in ((HOST_ENV_VAR, host), (KEY_ENV_VAR, api_key)) if not value
        ]
        if missing:
            raise ConfigurationMissing(missing)
        # Hosts are configured bare ("x.p.rapidapi.com"), tolerate a pasted URL.
        host = host.removeprefix("https://").removeprefix("http://").rstrip("/")
        return cls(host=host, api_key=api_key)


class PollingConfig(BaseModel):
    """Fixed-cadence polling budget: worst case is interval * max_attempts."""

    interval_seconds: float = Field(default=2.0, gt=0.0)
    max_attempts: int = Field(default=30, ge=1, le=600)


class UpstreamConfig(BaseModel):
    """Transport settings for upstream calls."""

    request_timeout_seconds: float = Field(default=30.0, gt=0.0)


class RankingWeights(BaseModel):
    """Heuristic presentation weights. Tunable without touching the comparator."""

    mention_base: float = 50.0
    mention_position_span: float = 20.0
    about_long_threshold: int = 100
    about_long_bonus: float = 15.0
    about_medium_threshold: int = 50
    about_medium_bonus: float = 10.0
    education_bonus: float = 8.0
    company_logo_bonus: float = 5.0
    title_long_threshold: int = 20
    title_long_bonus: float = 4.0
    title_medium_threshold: int = 10
    title_medium_bonus: float = 2.0
    location_long_threshold: int = 10
    location_long_bonus: float = 2.0
    location_medium_threshold: int = 5
    location_medium_bonus: float = 1.0
    company_name_threshold: int = 5
    company_name_bonus: float = 3.0


class Settings(BaseModel):
    """Top-level settings loaded from YAML. Every section has defaults."""

    polling: PollingConfig = Field(default_factory=PollingConfig)
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    ranking: RankingWeights = Field(default_factory=RankingWeights)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: Any = yaml.safe_load(path.read_text()) or {}
        if not isinstance(raw, dict):
            msg = f"Config root must be a mapping: {path}"
            raise ValueError(msg)
        return cls.model_validate(raw)
