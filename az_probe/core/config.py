"""Application configuration using Pydantic Settings.

This module implements the 12-Factor App configuration pattern,
loading settings from environment variables with validation. The same
settings object drives both the load probe and the AZ reporting service.
"""

import json
from enum import Enum
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from az_probe.utils.durations import parse_duration


class Environment(str, Enum):
    """Application environment types."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class Stage(BaseModel):
    """One step of a ramping load profile.

    Attributes:
        duration_sec: How long this stage lasts.
        users: Target number of concurrent users during the stage.
        spawn_rate: Users started (or stopped) per second to reach the target.
    """

    duration_sec: float = Field(..., gt=0)
    users: int = Field(..., ge=0)
    spawn_rate: float = Field(default=1.0, gt=0)


class Settings(BaseSettings):
    """Application settings with validation.

    All settings can be overridden via environment variables.
    Environment variables should match the field names exactly
    (case-insensitive).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Environment = Field(
        default=Environment.DEV,
        description="Application environment",
    )

    # Probe
    target_url: str = Field(
        default="http://localhost:8080/api/az",
        description="URL the probe issues GET requests against",
    )
    probe_users: int = Field(
        default=10,
        ge=1,
        description="Number of concurrent virtual users",
    )
    probe_spawn_rate: float = Field(
        default=10.0,
        gt=0,
        description="Users started per second",
    )
    probe_run_time: str = Field(
        default="1m",
        description="How long the constant-load scenario runs (e.g. 30s, 1m, 1h30m)",
    )
    probe_wait_min_sec: float = Field(
        default=0.0,
        ge=0.0,
        description="Minimum pause between iterations of one user",
    )
    probe_wait_max_sec: float = Field(
        default=0.0,
        ge=0.0,
        description="Maximum pause between iterations of one user",
    )
    probe_request_timeout_sec: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for a single probe request",
    )
    probe_expected_azs: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="AZ labels always listed in the run summary, even at zero",
    )
    probe_stages: list[Stage] = Field(
        default_factory=list,
        description="Ramping profile used by the stages load shape",
    )
    probe_metrics_port: int | None = Field(
        default=None,
        ge=1,
        le=65535,
        description="Expose probe counters on this port while a run is active",
    )

    # AZ reporting service
    app_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    app_port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Server port",
    )
    node_name: str | None = Field(
        default=None,
        description="Kubernetes node the pod runs on (Downward API)",
    )
    node_ip: str = Field(default="", description="Node IP (Downward API)")
    pod_name: str = Field(default="", description="Pod name (Downward API)")
    pod_namespace: str = Field(default="", description="Pod namespace (Downward API)")
    pod_ip: str = Field(default="", description="Pod IP (Downward API)")
    az_refresh_interval_sec: float = Field(
        default=60.0,
        ge=1.0,
        validation_alias=AliasChoices("az_refresh_interval_sec", "az_refresh_interval"),
        description="Interval between node metadata refreshes",
    )
    kube_api_timeout_sec: float = Field(
        default=2.0,
        gt=0,
        validation_alias=AliasChoices("kube_api_timeout_sec", "kube_api_timeout"),
        description="Timeout for Kubernetes API calls",
    )
    kube_api_url: str = Field(
        default="https://kubernetes.default.svc",
        description="In-cluster Kubernetes API server URL",
    )
    kube_token_path: str = Field(
        default="/var/run/secrets/kubernetes.io/serviceaccount/token",
        description="Service account token file",
    )
    kube_ca_path: str = Field(
        default="/var/run/secrets/kubernetes.io/serviceaccount/ca.crt",
        description="Cluster CA bundle",
    )
    access_log: bool = Field(
        default=False,
        description="Log every served info/AZ request",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("probe_expected_azs", mode="before")
    @classmethod
    def split_expected_azs(cls, v: object) -> object:
        """Accept a JSON list or a comma-separated string."""
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                return json.loads(stripped)
            return [item.strip() for item in stripped.split(",") if item.strip()]
        return v

    @field_validator("probe_run_time")
    @classmethod
    def check_run_time(cls, v: str) -> str:
        """Reject run times that are not a positive duration."""
        if parse_duration(v) <= 0:
            raise ValueError("probe_run_time must be greater than zero")
        return v.strip()

    @field_validator("az_refresh_interval_sec", "kube_api_timeout_sec", mode="before")
    @classmethod
    def parse_duration_seconds(cls, v: object) -> object:
        """Accept duration strings like "60s" or "500ms" as well as seconds."""
        if isinstance(v, str):
            return parse_duration(v)
        return v

    @model_validator(mode="after")
    def check_wait_range(self) -> "Settings":
        """Reject a wait window whose upper bound is below its lower bound."""
        if self.probe_wait_max_sec < self.probe_wait_min_sec:
            raise ValueError("probe_wait_max_sec must be >= probe_wait_min_sec")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == Environment.PROD

    @property
    def is_ramping(self) -> bool:
        """Check if a ramping stage profile is configured."""
        return len(self.probe_stages) > 0

    @property
    def probe_run_time_sec(self) -> float:
        """Constant-load run duration in seconds."""
        return parse_duration(self.probe_run_time)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
