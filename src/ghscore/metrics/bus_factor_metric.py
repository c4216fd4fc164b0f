from typing import Iterable, List

from ..schemas import ContributorPayload
from ..types import Contributor

DEFAULT_THRESHOLD = 50.0


def to_contributors(payloads: Iterable[ContributorPayload]) -> List[Contributor]:
    """Collapse API entries into Contributors, unique by identity."""
    counts: dict = {}
    for payload in payloads:
        key = payload.identity()
        counts[key] = counts.get(key, 0) + payload.contributions
    return [Contributor(login, total) for login, total in counts.items()]


def calculate_bus_factor(
    contributors: Iterable[Contributor], threshold: float = DEFAULT_THRESHOLD
) -> int:
    """Smallest number of top contributors whose share of all contributions
    reaches ``threshold`` percent.

    Returns the raw count; normalization to [0, 1] happens in ``scoring``.
    No contributors, or no contributions at all, gives 0.
    """
    ranked = sorted(contributors, key=lambda c: c.contributions, reverse=True)
    total = sum(c.contributions for c in ranked)
    if total <= 0:
        return 0

    running = 0
    bus_factor = 0
    for contributor in ranked:
        running += contributor.contributions
        bus_factor += 1
        if running * 100.0 / total >= threshold:
            break
    return bus_factor


class BusFactorMetric:
    """Bus factor over an already fetched contributor list."""

    name = "bus_factor"

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def compute(self, contributors: Iterable[Contributor]) -> int:
        return calculate_bus_factor(contributors, self.threshold)
