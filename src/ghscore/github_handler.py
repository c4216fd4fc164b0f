import base64
import logging
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import Settings
from .errors import GitHubAPIError, MalformedResponseError
from .schemas import (
    CONTENTS,
    CONTRIBUTORS,
    ISSUES,
    ContentEntry,
    ContributorPayload,
    IssuePayload,
    LicensePayload,
    ReadmePayload,
    RepositoryPayload,
)
from .types import RepositoryRef

RETRY_STATUSES = (429, 500, 502, 503, 504)
# contributors are paginated 100 per page; deeper pages barely move the bus factor
MAX_CONTRIBUTOR_PAGES = 5


def build_session(settings: Settings) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "Authorization": f"Bearer {settings.github_token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "ghscore/0.1",
        }
    )
    retry = Retry(
        total=settings.max_retries,
        backoff_factor=0.5,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class GitHubHandler:
    """Thin client for the GitHub REST endpoints the metrics consume.

    Every payload is validated at this boundary; calculators only ever see
    typed models. Transport failures and non-2xx answers raise GitHubAPIError,
    a payload of the wrong shape raises MalformedResponseError.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self._base = settings.api_url
        self._timeout = settings.request_timeout
        self._session = session or build_session(settings)

    def close(self) -> None:
        self._session.close()

    def _request(self, path: str, params: Optional[dict] = None) -> requests.Response:
        url = path if path.startswith("http") else f"{self._base}{path}"
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.Timeout as exc:
            raise GitHubAPIError(f"timed out after {self._timeout}s fetching {url}", url) from exc
        except requests.RequestException as exc:
            raise GitHubAPIError(f"network error fetching {url}: {exc}", url) from exc

        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining and remaining.isdigit() and int(remaining) < 10:
            logging.warning(
                "GitHub API rate limit low: %s requests remaining", remaining
            )
        return response

    def _check(self, response: requests.Response) -> None:
        if response.ok:
            return
        status = response.status_code
        if status == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            message = (
                f"GitHub API rate limit exceeded (resets at "
                f"{response.headers.get('X-RateLimit-Reset', 'unknown')})"
            )
        elif status == 401:
            message = "GitHub API unauthorized (401); GITHUB_TOKEN appears to be invalid"
        else:
            message = f"GitHub API returned {status} for {response.url}"
        raise GitHubAPIError(message, response.url, status)

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"response from {response.url} is not JSON", response.url, response.status_code
            ) from exc

    def _get(self, path: str, params: Optional[dict] = None, missing_ok: bool = False) -> Any:
        response = self._request(path, params)
        if missing_ok and response.status_code == 404:
            logging.debug("No resource at %s", response.url)
            return None
        self._check(response)
        if response.status_code == 204 or not response.content:
            return None
        return self._json(response)

    @staticmethod
    def _validate(schema, data: Any, what: str):
        try:
            if isinstance(schema, TypeAdapter):
                return schema.validate_python(data)
            if isinstance(schema, type) and issubclass(schema, BaseModel):
                return schema.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(f"malformed {what} payload: {exc}") from exc
        raise TypeError(f"unsupported schema {schema!r}")

    def fetch_contributors(self, ref: RepositoryRef) -> List[ContributorPayload]:
        contributors: List[ContributorPayload] = []
        url: Optional[str] = f"/repos/{ref.owner}/{ref.name}/contributors"
        params: Optional[dict] = {"per_page": 100, "anon": 1}
        pages = 0
        while url and pages < MAX_CONTRIBUTOR_PAGES:
            response = self._request(url, params)
            self._check(response)
            pages += 1
            # an empty repository answers 204 No Content
            if response.status_code == 204 or not response.content:
                break
            contributors.extend(
                self._validate(CONTRIBUTORS, self._json(response), "contributors")
            )
            url = response.links.get("next", {}).get("url")
            params = None  # the next link already carries the query
        return contributors

    def fetch_license(self, ref: RepositoryRef) -> Optional[LicensePayload]:
        data = self._get(f"/repos/{ref.owner}/{ref.name}/license", missing_ok=True)
        if data is None:
            return None
        return self._validate(LicensePayload, data, "license")

    def fetch_repo(self, ref: RepositoryRef) -> RepositoryPayload:
        data = self._get(f"/repos/{ref.owner}/{ref.name}")
        return self._validate(RepositoryPayload, data, "repository")

    def fetch_readme(self, ref: RepositoryRef) -> Optional[str]:
        data = self._get(f"/repos/{ref.owner}/{ref.name}/readme", missing_ok=True)
        if data is None:
            return None
        readme = self._validate(ReadmePayload, data, "readme")
        if readme.encoding != "base64":
            return readme.content
        try:
            return base64.b64decode(readme.content).decode("utf-8", errors="ignore")
        except (ValueError, TypeError) as exc:
            raise MalformedResponseError(f"README of {ref.slug} is not valid base64") from exc

    def fetch_root_contents(self, ref: RepositoryRef) -> List[ContentEntry]:
        data = self._get(f"/repos/{ref.owner}/{ref.name}/contents", missing_ok=True)
        if not data:
            return []
        return self._validate(CONTENTS, data, "contents")

    def fetch_workflows(self, ref: RepositoryRef) -> List[ContentEntry]:
        data = self._get(
            f"/repos/{ref.owner}/{ref.name}/contents/.github/workflows", missing_ok=True
        )
        if not data:
            return []
        return self._validate(CONTENTS, data, "workflow listing")

    def fetch_issues(self, ref: RepositoryRef, per_page: int = 100) -> List[IssuePayload]:
        """Most recently updated issues and pull requests, open and closed."""
        data = self._get(
            f"/repos/{ref.owner}/{ref.name}/issues",
            params={"state": "all", "per_page": per_page, "sort": "updated"},
        )
        if not data:
            return []
        return self._validate(ISSUES, data, "issues")
