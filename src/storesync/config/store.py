"""Record-store API configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

STORE_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Holds the HTTP record-store location and client resilience settings."""

    api_url: str
    project_key: str
    resilience: ResilienceConfig

    @property
    def project_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/{self.project_key}/"


def get_store_config(*, resilience: ResilienceConfig | None = None) -> StoreConfig:
    values = require_env_vars(("STORESYNC_API_URL", "STORESYNC_PROJECT_KEY"))
    api_url = values["STORESYNC_API_URL"]
    project_key = values["STORESYNC_PROJECT_KEY"]

    headers: dict[str, str] = {"Accept": "application/json"}
    token = os.getenv("STORESYNC_API_TOKEN")
    if token and token.strip():
        headers["Authorization"] = f"Bearer {token.strip()}"

    return StoreConfig(
        api_url=api_url,
        project_key=project_key,
        resilience=resilience
        or ResilienceConfig(
            name="store",
            base_url=f"{api_url.rstrip('/')}/{project_key}/",
            timeout_seconds=STORE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
            retry=RetryPolicy(total=4),
            default_headers=headers,
        ),
    )
