from typing import Any, List, Protocol

from ..types import RepositoryRef


class Metric(Protocol):
    """A calculator that fetches what it needs through the handler and scores it.

    ``compute`` returns a defined low or neutral value when the repository has
    no data for it; it only raises for transport failures.
    """

    name: str

    def compute(self, ref: RepositoryRef, handler: Any) -> Any: ...


REGISTRY: List[Metric] = []


def register(metric: Metric) -> None:
    if any(existing.name == metric.name for existing in REGISTRY):
        return
    REGISTRY.append(metric)
