from typing import Optional


class GhScoreError(Exception):
    """Base class for every error raised by ghscore."""


class ConfigurationError(GhScoreError):
    """Required configuration is missing or malformed. Fatal at startup."""


class InvalidURLError(GhScoreError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(
            f"Invalid URL: {url} (expected https://github.com/<owner>/<repo>)"
        )


class GitHubAPIError(GhScoreError):
    """Transport failure or non-2xx response from the GitHub API."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(GitHubAPIError):
    """The API answered 2xx but the payload does not have the expected shape."""


class RegistryError(GhScoreError):
    """A package-registry lookup used for link normalization failed."""
