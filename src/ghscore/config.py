"""
Runtime configuration for ghscore.

Everything is read from the environment once, at process entry, and handed to the
orchestrator and the GitHub handler as a ``Settings`` instance.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_BUS_FACTOR_THRESHOLD = 50.0
DEFAULT_MAX_WORKERS = 1


@dataclass(frozen=True)
class Settings:
    github_token: str
    api_url: str = DEFAULT_API_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    bus_factor_threshold: float = DEFAULT_BUS_FACTOR_THRESHOLD
    max_workers: int = DEFAULT_MAX_WORKERS

    def __repr__(self) -> str:
        # keep the token out of logs and tracebacks
        return (
            f"Settings(api_url={self.api_url!r}, request_timeout={self.request_timeout}, "
            f"max_retries={self.max_retries}, "
            f"bus_factor_threshold={self.bus_factor_threshold}, "
            f"max_workers={self.max_workers})"
        )


def _number(environ: Mapping[str, str], key: str, default, cast):
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from exc


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    Raises ConfigurationError when GITHUB_TOKEN is missing or a numeric
    variable cannot be parsed or is out of range.
    """
    env = os.environ if environ is None else environ

    token = (env.get("GITHUB_TOKEN") or "").strip()
    if not token:
        raise ConfigurationError(
            "GITHUB_TOKEN is not set. Export a GitHub personal access token, e.g.\n"
            "  export GITHUB_TOKEN='your_token_here'"
        )

    api_url = (env.get("GITHUB_API_URL") or DEFAULT_API_URL).strip().rstrip("/")
    timeout = _number(env, "GHSCORE_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float)
    retries = _number(env, "GHSCORE_MAX_RETRIES", DEFAULT_MAX_RETRIES, int)
    threshold = _number(
        env, "GHSCORE_BUS_FACTOR_THRESHOLD", DEFAULT_BUS_FACTOR_THRESHOLD, float
    )
    workers = _number(env, "GHSCORE_MAX_WORKERS", DEFAULT_MAX_WORKERS, int)

    if timeout <= 0:
        raise ConfigurationError("GHSCORE_REQUEST_TIMEOUT must be positive")
    if retries < 0:
        raise ConfigurationError("GHSCORE_MAX_RETRIES must be >= 0")
    if not 0 < threshold <= 100:
        raise ConfigurationError("GHSCORE_BUS_FACTOR_THRESHOLD must be in (0, 100]")
    if workers < 1:
        raise ConfigurationError("GHSCORE_MAX_WORKERS must be >= 1")

    return Settings(
        github_token=token,
        api_url=api_url,
        request_timeout=timeout,
        max_retries=retries,
        bus_factor_threshold=threshold,
        max_workers=workers,
    )
