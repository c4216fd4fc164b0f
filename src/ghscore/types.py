from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class TimedResult(Generic[T]):
    output: T
    elapsed_seconds: float


@dataclass(frozen=True)
class Contributor:
    login_or_id: str
    contributions: int  # >= 0


@dataclass(frozen=True)
class LicenseInfo:
    spdx_id: Optional[str]
    name: str
    lgpl_compatible: bool


@dataclass(frozen=True)
class ReportRow:
    # One NDJSON record per scored repository; latencies are in seconds.
    # A None score means that metric failed and was left out of the net score.
    url: str
    net_score: Optional[float]
    net_score_latency: Optional[float]
    ramp_up: Optional[float]
    ramp_up_latency: Optional[float]
    correctness: Optional[float]
    correctness_latency: Optional[float]
    bus_factor: Optional[float]
    bus_factor_latency: Optional[float]
    responsive_maintainer: Optional[float]
    responsive_maintainer_latency: Optional[float]
    license: Optional[LicenseInfo]
    license_latency: Optional[float]


@dataclass(frozen=True)
class ErrorRow:
    url: str
    error: str
