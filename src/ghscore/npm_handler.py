import logging
import re
from typing import Optional
from urllib.parse import unquote

import requests

from .errors import RegistryError

NPM_REGISTRY_URL = "https://registry.npmjs.org"
NPM_PACKAGE_PATTERN = re.compile(
    r"https?://(?:www\.)?npmjs\.(?:com|org)/package/((?:@[^/]+/)?[^/?#]+)"
)
GITHUB_SOURCE_PATTERN = re.compile(r"github\.com[/:]([^/]+)/([^/#?]+?)(?:\.git)?/?(?:[#?].*)?$")


def github_url_from_repository_field(repository) -> Optional[str]:
    """Turn the ``repository`` field of an npm manifest into a canonical GitHub URL."""
    if isinstance(repository, dict):
        repository = repository.get("url")
    if not isinstance(repository, str) or not repository:
        return None
    if repository.startswith("github:"):
        repository = "github.com/" + repository[len("github:"):]
    elif re.fullmatch(r"[^/:@\s]+/[^/:@\s]+", repository):
        # "owner/repo" shorthand defaults to GitHub
        repository = "github.com/" + repository
    match = GITHUB_SOURCE_PATTERN.search(repository)
    if not match:
        return None
    return f"https://github.com/{match.group(1)}/{match.group(2)}"


class NpmHandler:
    """Maps npm package pages to the GitHub repository they are built from."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._session = session or requests.Session()
        self._timeout = timeout

    def close(self) -> None:
        self._session.close()

    def normalize(self, url: str) -> str:
        """Return the GitHub source URL for an npm package URL; other URLs pass through."""
        match = NPM_PACKAGE_PATTERN.match(url)
        if not match:
            return url
        package = unquote(match.group(1))
        registry_url = f"{NPM_REGISTRY_URL}/{package.replace('/', '%2F')}"
        try:
            response = self._session.get(registry_url, timeout=self._timeout)
            response.raise_for_status()
            manifest = response.json()
        except requests.RequestException as exc:
            raise RegistryError(f"npm registry lookup failed for {package}: {exc}") from exc
        except ValueError as exc:
            raise RegistryError(f"npm registry returned invalid JSON for {package}") from exc

        github_url = github_url_from_repository_field(manifest.get("repository"))
        if github_url is None:
            logging.info("npm package %s declares no GitHub repository", package)
            return url
        logging.debug("Normalized %s to %s", url, github_url)
        return github_url
