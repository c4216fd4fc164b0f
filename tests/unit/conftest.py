from datetime import datetime, timedelta, timezone

import pytest

from ghscore.config import Settings
from ghscore.errors import GitHubAPIError
from ghscore.schemas import (
    ContentEntry,
    ContributorPayload,
    IssuePayload,
    LicenseDetail,
    LicensePayload,
    RepositoryPayload,
)

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_issue(number, state="closed", days_open=2, pull_request=False, age_days=10):
    created = NOW - timedelta(days=age_days)
    return IssuePayload(
        number=number,
        state=state,
        created_at=created,
        closed_at=created + timedelta(days=days_open) if state == "closed" else None,
        pull_request={"url": "x"} if pull_request else None,
    )


class FakeGitHubHandler:
    """In-memory stand-in for GitHubHandler; ``failures`` maps method name -> exception."""

    def __init__(self, contributors=None, failures=None):
        self.contributors = contributors if contributors is not None else [
            ContributorPayload(login="a", contributions=90),
            ContributorPayload(login="b", contributions=10),
        ]
        self.failures = failures or {}
        self.calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def _call(self, name, ref, value):
        self.calls.append((name, ref.slug))
        if name in self.failures:
            raise self.failures[name]
        return value

    def fetch_contributors(self, ref):
        return self._call("fetch_contributors", ref, self.contributors)

    def fetch_license(self, ref):
        return self._call(
            "fetch_license",
            ref,
            LicensePayload(license=LicenseDetail(name="MIT License", spdx_id="MIT")),
        )

    def fetch_repo(self, ref):
        return self._call(
            "fetch_repo",
            ref,
            RepositoryPayload(full_name=ref.slug, has_wiki=True),
        )

    def fetch_readme(self, ref):
        return self._call(
            "fetch_readme", ref, "# Hello\n## Installation\npip install hello\n## Usage\n"
        )

    def fetch_root_contents(self, ref):
        return self._call(
            "fetch_root_contents",
            ref,
            [
                ContentEntry(name="tests", path="tests", type="dir"),
                ContentEntry(name="README.md", path="README.md", type="file"),
            ],
        )

    def fetch_workflows(self, ref):
        return self._call(
            "fetch_workflows",
            ref,
            [ContentEntry(name="ci.yml", path=".github/workflows/ci.yml", type="file")],
        )

    def fetch_issues(self, ref):
        return self._call(
            "fetch_issues",
            ref,
            [make_issue(1), make_issue(2, state="open"), make_issue(3, pull_request=True)],
        )


@pytest.fixture
def settings():
    return Settings(github_token="test-token")


@pytest.fixture
def handler():
    return FakeGitHubHandler()


@pytest.fixture
def api_error():
    return GitHubAPIError("GitHub API returned 500", "https://api.github.com/x", 500)


@pytest.fixture
def fake_handler_cls():
    return FakeGitHubHandler


@pytest.fixture
def issue():
    return make_issue


@pytest.fixture
def now():
    return NOW
