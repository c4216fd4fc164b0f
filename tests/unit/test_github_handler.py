import base64
import json
from unittest.mock import Mock

import pytest
import requests

from ghscore.config import Settings
from ghscore.errors import GitHubAPIError, MalformedResponseError
from ghscore.github_handler import GitHubHandler, build_session
from ghscore.types import RepositoryRef

REF = RepositoryRef("octocat", "Hello-World")


def make_response(status=200, payload=None, headers=None, url="https://api.github.com/x"):
    response = requests.Response()
    response.status_code = status
    response._content = b"" if payload is None else json.dumps(payload).encode("utf-8")
    response.headers.update(headers or {})
    response.url = url
    response.encoding = "utf-8"
    return response


def make_handler(*responses):
    session = Mock(spec=requests.Session)
    session.get.side_effect = list(responses)
    return GitHubHandler(Settings(github_token="t", request_timeout=3), session=session), session


def test_session_sends_bearer_token():
    session = build_session(Settings(github_token="abc123"))
    assert session.headers["Authorization"] == "Bearer abc123"
    adapter = session.get_adapter("https://api.github.com")
    assert adapter.max_retries.total == 2
    assert 500 in adapter.max_retries.status_forcelist


def test_fetch_contributors():
    handler, session = make_handler(
        make_response(payload=[{"login": "a", "contributions": 90}, {"login": "b", "contributions": 10}])
    )
    contributors = handler.fetch_contributors(REF)
    assert [(c.login, c.contributions) for c in contributors] == [("a", 90), ("b", 10)]
    args, kwargs = session.get.call_args
    assert args[0] == "https://api.github.com/repos/octocat/Hello-World/contributors"
    assert kwargs["timeout"] == 3


def test_fetch_contributors_follows_next_link():
    next_url = "https://api.github.com/repositories/1/contributors?page=2"
    handler, session = make_handler(
        make_response(
            payload=[{"login": "a", "contributions": 5}],
            headers={"Link": f'<{next_url}>; rel="next"'},
        ),
        make_response(payload=[{"login": "b", "contributions": 1}]),
    )
    assert len(handler.fetch_contributors(REF)) == 2
    assert session.get.call_args_list[1].args[0] == next_url


def test_fetch_contributors_empty_repository():
    handler, _ = make_handler(make_response(status=204))
    assert handler.fetch_contributors(REF) == []


def test_server_error_raises_api_error():
    handler, _ = make_handler(make_response(status=500))
    with pytest.raises(GitHubAPIError) as excinfo:
        handler.fetch_contributors(REF)
    assert excinfo.value.status_code == 500


def test_rate_limit_message():
    handler, _ = make_handler(
        make_response(status=403, headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "99"})
    )
    with pytest.raises(GitHubAPIError, match="rate limit exceeded"):
        handler.fetch_repo(REF)


def test_network_error_raises_api_error():
    handler, _ = make_handler(requests.ConnectionError("refused"))
    with pytest.raises(GitHubAPIError, match="network error"):
        handler.fetch_repo(REF)


def test_timeout_raises_api_error():
    handler, _ = make_handler(requests.Timeout())
    with pytest.raises(GitHubAPIError, match="timed out"):
        handler.fetch_issues(REF)


def test_malformed_contributor_payload():
    handler, _ = make_handler(make_response(payload=[{"login": "a"}]))
    with pytest.raises(MalformedResponseError):
        handler.fetch_contributors(REF)


def test_non_json_body():
    response = make_response()
    response._content = b"<html>"
    handler, _ = make_handler(response)
    with pytest.raises(MalformedResponseError):
        handler.fetch_repo(REF)


def test_missing_license_is_none():
    handler, _ = make_handler(make_response(status=404, payload={"message": "Not Found"}))
    assert handler.fetch_license(REF) is None


def test_fetch_license():
    handler, _ = make_handler(
        make_response(payload={"license": {"key": "mit", "name": "MIT License", "spdx_id": "MIT"}})
    )
    assert handler.fetch_license(REF).license.spdx_id == "MIT"


def test_fetch_readme_decodes_base64():
    content = base64.b64encode("# Hello World\n".encode()).decode()
    handler, _ = make_handler(make_response(payload={"content": content, "encoding": "base64"}))
    assert handler.fetch_readme(REF) == "# Hello World\n"


def test_missing_readme_is_none():
    handler, _ = make_handler(make_response(status=404))
    assert handler.fetch_readme(REF) is None


def test_missing_workflows_is_empty():
    handler, _ = make_handler(make_response(status=404))
    assert handler.fetch_workflows(REF) == []


def test_fetch_issues():
    handler, session = make_handler(
        make_response(
            payload=[
                {"number": 1, "state": "open", "created_at": "2024-01-01T00:00:00Z"},
                {
                    "number": 2,
                    "state": "closed",
                    "created_at": "2024-01-01T00:00:00Z",
                    "closed_at": "2024-01-03T00:00:00Z",
                    "pull_request": {"url": "https://api.github.com/x"},
                },
            ]
        )
    )
    issues = handler.fetch_issues(REF)
    assert [i.is_pull_request for i in issues] == [False, True]
    assert session.get.call_args.kwargs["params"]["state"] == "all"


def test_low_rate_limit_is_logged(caplog):
    handler, _ = make_handler(
        make_response(payload={"full_name": "octocat/Hello-World"}, headers={"X-RateLimit-Remaining": "3"})
    )
    with caplog.at_level("WARNING"):
        repo = handler.fetch_repo(REF)
    assert repo.full_name == "octocat/Hello-World"
    assert "rate limit low" in caplog.text
