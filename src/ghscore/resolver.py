import re
from typing import Optional

from .types import RepositoryRef

# owner and repo are the first two path segments after the host
GITHUB_URL_PATTERN = re.compile(r"https://github\.com/([^/]+)/([^/]+)")


def parse_github_url(url: str) -> Optional[RepositoryRef]:
    """Extract owner/name from a GitHub URL, or None when the URL has another shape."""
    if not url:
        return None
    match = GITHUB_URL_PATTERN.match(url)
    if not match:
        return None
    return RepositoryRef(owner=match.group(1), name=match.group(2))
