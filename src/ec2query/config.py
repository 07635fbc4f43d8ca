"""Client configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

DEFAULT_REGION = "us-east-1"
DEFAULT_API_VERSION = "2014-06-15"


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for an EC2Client."""

    region: str = DEFAULT_REGION
    endpoint: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    http_timeout: float = 30.0
    poll_interval: float = 1.0
    poll_deadline: float = 60.0
    poll_initial_delay: float = 0.5
    profile_name: Optional[str] = field(default=None, repr=False)

    @property
    def endpoint_url(self) -> str:
        """Endpoint URL, always ending in a slash."""
        url = self.endpoint or f"https://ec2.{self.region}.amazonaws.com/"
        return url if url.endswith("/") else url + "/"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "ClientConfig":
        """Build a configuration from environment variables.

        Reads ``EC2_URL``, ``AWS_REGION`` / ``AWS_DEFAULT_REGION``,
        ``EC2_API_VERSION`` and ``AWS_PROFILE``. Keyword overrides that are
        not None take precedence.
        """
        env = os.environ if environ is None else environ
        config = cls(
            region=env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or DEFAULT_REGION,
            endpoint=env.get("EC2_URL") or None,
            api_version=env.get("EC2_API_VERSION") or DEFAULT_API_VERSION,
            profile_name=env.get("AWS_PROFILE") or None,
        )
        return config.with_overrides(**overrides)

    def with_overrides(self, **overrides: Any) -> "ClientConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
