"""
Responsive maintainer metric (0..1).

Looks at the most recently updated issues and pull requests:
- closed_ratio = closed items / all items
- speed = 1 / (1 + median_days_to_close / 30), over the closed items
- score = 0.5 * closed_ratio + 0.5 * speed
No items at all is neutral (0.5); items but nothing ever closed scores speed 0.
"""
from datetime import datetime, timezone
from statistics import median
from typing import Iterable, Optional

from ..schemas import IssuePayload
from ..types import RepositoryRef

HALF_LIFE_DAYS = 30.0


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def score_responsiveness(
    issues: Iterable[IssuePayload], now: Optional[datetime] = None
) -> float:
    items = list(issues)
    if not items:
        return 0.5

    closed = [item for item in items if item.state == "closed" and item.closed_at]
    closed_ratio = len(closed) / len(items)
    if closed:
        days = [
            max(0.0, (_as_utc(i.closed_at) - _as_utc(i.created_at)).total_seconds() / 86400)
            for i in closed
        ]
        speed = 1.0 / (1.0 + median(days) / HALF_LIFE_DAYS)
    else:
        speed = 0.0

    # issues still open for over a year count against the maintainers
    now = now or datetime.now(timezone.utc)
    stale = sum(
        1
        for item in items
        if item.state == "open" and (now - _as_utc(item.created_at)).days > 365
    )
    score = 0.5 * closed_ratio + 0.5 * speed - 0.1 * (stale / len(items))
    return max(0.0, min(1.0, score))


class ResponsivenessMetric:
    name = "responsive_maintainer"

    def compute(self, ref: RepositoryRef, handler) -> float:
        return score_responsiveness(handler.fetch_issues(ref))
