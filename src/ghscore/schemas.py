"""
Pydantic models for the GitHub REST payloads ghscore consumes.

Declared fields are the ones the metrics read, plus the identifying ``number``
and ``path`` keys; everything else GitHub sends is ignored.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ContributorPayload(_Payload):
    """Entry of ``GET /repos/{owner}/{repo}/contributors``.

    Anonymous contributors (``anon=1``) carry ``name``/``email`` instead of ``login``.
    """
    login: Optional[str] = None
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    contributions: int = Field(..., ge=0)

    def identity(self) -> str:
        """Login for accounts; anonymous entries are told apart by email, not display name."""
        for value in (self.login, self.email, self.name):
            if value:
                return value
        return str(self.id) if self.id is not None else "unknown"


class LicenseDetail(_Payload):
    name: str
    spdx_id: Optional[str] = None


class LicensePayload(_Payload):
    """Body of ``GET /repos/{owner}/{repo}/license``."""
    license: Optional[LicenseDetail] = None


class RepositoryPayload(_Payload):
    """Body of ``GET /repos/{owner}/{repo}``."""
    full_name: str
    homepage: Optional[str] = None
    has_wiki: bool = False


class ContentEntry(_Payload):
    """Directory listing entry of ``GET /repos/{owner}/{repo}/contents/{path}``."""
    name: str
    path: str
    type: str


class IssuePayload(_Payload):
    """Entry of ``GET /repos/{owner}/{repo}/issues``; pull requests carry ``pull_request``."""
    number: int
    state: str
    created_at: datetime
    closed_at: Optional[datetime] = None
    pull_request: Optional[dict] = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


class ReadmePayload(_Payload):
    content: str = ""
    encoding: str = "base64"


CONTRIBUTORS = TypeAdapter(List[ContributorPayload])
CONTENTS = TypeAdapter(List[ContentEntry])
ISSUES = TypeAdapter(List[IssuePayload])
