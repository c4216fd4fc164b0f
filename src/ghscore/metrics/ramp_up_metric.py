from typing import Iterable, Optional

from ..schemas import ContentEntry, RepositoryPayload
from ..types import RepositoryRef

README_SATURATION_CHARS = 5000
SECTION_KEYWORDS = {
    "install": ("install", "installation", "setup", "set up"),
    "usage": ("usage", "how to use", "how-to"),
    "example": ("example", "examples", "sample", "demo"),
    "quickstart": ("quickstart", "quick start", "getting started", "get started"),
    "contributing": ("contributing", "contribute", "development"),
}
DOC_DIRS = {"docs", "doc", "documentation", "wiki"}
EXAMPLE_DIRS = {"examples", "example", "samples", "demo", "demos"}


def score_ramp_up(
    readme: Optional[str],
    repo: Optional[RepositoryPayload],
    root_entries: Iterable[ContentEntry] = (),
) -> float:
    """How quickly a new engineer can get productive, from docs signals only."""
    score = 0.0
    text = (readme or "").lower()
    if text.strip():
        score += 0.3
        score += 0.2 * min(1.0, len(text) / README_SATURATION_CHARS)
        for keywords in SECTION_KEYWORDS.values():
            if any(keyword in text for keyword in keywords):
                score += 0.06

    dirs = {entry.name.lower() for entry in root_entries if entry.type == "dir"}
    has_docs = bool(dirs & DOC_DIRS)
    if repo is not None:
        has_docs = has_docs or repo.has_wiki or bool(repo.homepage)
    if has_docs:
        score += 0.1
    if dirs & EXAMPLE_DIRS:
        score += 0.1

    return max(0.0, min(1.0, score))


class RampUpMetric:
    name = "ramp_up"

    def compute(self, ref: RepositoryRef, handler) -> float:
        readme = handler.fetch_readme(ref)
        repo = handler.fetch_repo(ref)
        entries = handler.fetch_root_contents(ref)
        return score_ramp_up(readme, repo, entries)
