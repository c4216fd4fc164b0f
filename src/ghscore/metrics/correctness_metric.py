from typing import Iterable

from ..schemas import ContentEntry, IssuePayload
from ..types import RepositoryRef

TEST_DIRS = {"test", "tests", "spec", "specs", "__tests__", "testing"}
CI_FILES = {".travis.yml", ".gitlab-ci.yml", "azure-pipelines.yml", "jenkinsfile", ".circleci"}


def issue_closure_ratio(issues: Iterable[IssuePayload]) -> float:
    """Closed share of real issues (pull requests excluded); 0.5 when there are none."""
    real = [issue for issue in issues if not issue.is_pull_request]
    if not real:
        return 0.5
    closed = sum(1 for issue in real if issue.state == "closed")
    return closed / len(real)


def score_correctness(
    root_entries: Iterable[ContentEntry],
    workflows: Iterable[ContentEntry],
    issues: Iterable[IssuePayload],
) -> float:
    names = {entry.name.lower() for entry in root_entries}
    has_tests = bool(names & TEST_DIRS)
    has_ci = any(
        entry.name.endswith((".yml", ".yaml")) for entry in workflows
    ) or bool(names & CI_FILES)

    score = 0.0
    if has_tests:
        score += 0.35
    if has_ci:
        score += 0.25
    score += 0.4 * issue_closure_ratio(issues)
    return max(0.0, min(1.0, score))


class CorrectnessMetric:
    name = "correctness"

    def compute(self, ref: RepositoryRef, handler) -> float:
        entries = handler.fetch_root_contents(ref)
        workflows = handler.fetch_workflows(ref)
        issues = handler.fetch_issues(ref)
        return score_correctness(entries, workflows, issues)
