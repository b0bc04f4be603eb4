"""Application configuration."""

import logging
import os
from datetime import timedelta

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from form_duration_tracker.domain.durations import (
    coerce_duration,
    format_duration,
    recommended_expiry,
)
from form_duration_tracker.domain.tracking import PolicyConfig, SessionConfig

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    attribute: str = "started_at"
    expirable: bool = True
    expiry_time: timedelta = timedelta(hours=2)
    on_actions: list[str] = ["new"]
    auto_params: list[str] | bool | None = None
    param_key: str | None = "submission"
    auto_cleanup: bool = True
    prevent_future: bool = True
    prevent_update: bool = True
    max_duration: timedelta | None = timedelta(hours=2)
    min_duration: timedelta | None = timedelta(seconds=5)
    session_cookie: str = "form_session"
    session_ttl: timedelta = timedelta(hours=24)
    admin_token: str | None = None
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="FORM_DURATION_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("expiry_time", "session_ttl", mode="before")
    @classmethod
    def _parse_expiry(cls, value: object) -> timedelta:
        return coerce_duration(value)

    @field_validator("max_duration", "min_duration", mode="before")
    @classmethod
    def _parse_optional_duration(cls, value: object) -> timedelta | None:
        if value is None or value == "":
            return None
        return coerce_duration(value)

    def policy_config(self) -> PolicyConfig:
        return PolicyConfig(
            prevent_future=self.prevent_future,
            prevent_update=self.prevent_update,
            max_duration=self.max_duration,
            min_duration=self.min_duration,
        )


def check_time_consistency(
    session_config: SessionConfig, policy_config: PolicyConfig
) -> str:
    """Log whether session expiry fits the max form duration.

    Returns ``"skipped"``, ``"mismatch"``, ``"much_longer"`` or ``"consistent"``.
    Advisory only: a mismatch is logged, never raised.
    """
    max_duration = policy_config.max_duration
    if not session_config.expirable or max_duration is None:
        return "skipped"
    expiry_time = session_config.expiry_time
    if expiry_time < max_duration:
        _logger.warning(
            "Session expires (%s) before the max form duration (%s); "
            "recommended expiry_time: %s",
            format_duration(expiry_time),
            format_duration(max_duration),
            format_duration(recommended_expiry(max_duration)),
        )
        return "mismatch"
    if expiry_time > max_duration * 2:
        _logger.info(
            "Session expiry (%s) is much longer than the max form duration (%s)",
            format_duration(expiry_time),
            format_duration(max_duration),
        )
        return "much_longer"
    return "consistent"
