"""Runtime settings and per-job user parameters for the unzip action."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any

from .exceptions import ConfigurationError

DEFAULT_NOTIFICATION_SUBJECT = "CodePipeline artifact published"
DEFAULT_METRICS_NAMESPACE = "CodePipelineUnzip"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Immutable function settings loaded from environment variables."""

    log_level: str
    metrics_namespace: str
    metrics_enabled: bool
    notification_subject: str

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables.

        An unknown LOG_LEVEL falls back to INFO.
        """
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
        return cls(
            log_level=log_level if log_level in LOG_LEVELS else "INFO",
            metrics_namespace=os.environ.get("METRICS_NAMESPACE", DEFAULT_METRICS_NAMESPACE),
            metrics_enabled=os.environ.get("METRICS_ENABLED", "true").lower()
            not in ("0", "false", "no", "off"),
            notification_subject=os.environ.get(
                "NOTIFICATION_SUBJECT", DEFAULT_NOTIFICATION_SUBJECT
            ),
        )


@dataclass(frozen=True)
class Config:
    """Immutable job configuration parsed from the action's UserParameters.

    Example UserParameters:
        {"bucket": "my-bucket", "key_prefix": "my/key/prefix"}
    """

    bucket: str
    key_prefix: str
    notification_subject: str = DEFAULT_NOTIFICATION_SUBJECT
    notification_sns_topic_arn: str | None = None

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.notification_sns_topic_arn)

    @classmethod
    def from_user_parameters(
        cls, raw: str | None, default_subject: str = DEFAULT_NOTIFICATION_SUBJECT
    ) -> Config:
        """Parse and validate the UserParameters JSON string.

        Raises:
            ConfigurationError: If the string is empty, is not a JSON object,
                or lacks a required field.
        """
        if not raw or not raw.strip():
            raise ConfigurationError("missing user params")

        try:
            params = json.loads(raw)
        except ValueError as exc:
            raise ConfigurationError(f"invalid user params: {exc}") from exc

        if not isinstance(params, dict):
            raise ConfigurationError("user params must be a JSON object")

        def _require(name: str) -> str:
            value = _optional(name)
            if not value:
                raise ConfigurationError(f"missing '{name}' in user params")
            return value

        def _optional(name: str) -> str | None:
            value: Any = params.get(name)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"'{name}' in user params must be a string")
            return value

        return cls(
            bucket=_require("bucket"),
            key_prefix=_require("key_prefix"),
            notification_subject=_optional("notification_subject") or default_subject,
            notification_sns_topic_arn=_optional("notification_sns_topic_arn") or None,
        )
