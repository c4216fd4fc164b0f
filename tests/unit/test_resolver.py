import pytest

from ghscore.resolver import parse_github_url
from ghscore.types import RepositoryRef


@pytest.mark.parametrize(
    "owner, repo",
    [("octocat", "Hello-World"), ("cloudinary", "cloudinary_npm"), ("a", "b.js")],
)
def test_parse_round_trip(owner, repo):
    ref = parse_github_url(f"https://github.com/{owner}/{repo}")
    assert ref == RepositoryRef(owner=owner, name=repo)


def test_parse_uses_first_two_segments():
    ref = parse_github_url("https://github.com/lodash/lodash/tree/main/src")
    assert ref == RepositoryRef("lodash", "lodash")


@pytest.mark.parametrize(
    "url",
    [
        "not-a-url",
        "",
        "https://github.com/octocat",
        "https://github.com/",
        "http://github.com/octocat/Hello-World",
        "https://gitlab.com/octocat/Hello-World",
        "https://www.npmjs.com/package/express",
    ],
)
def test_parse_rejects_other_shapes(url):
    assert parse_github_url(url) is None


def test_slug():
    assert RepositoryRef("octocat", "Hello-World").slug == "octocat/Hello-World"
