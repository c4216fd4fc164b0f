"""
Per-repository scoring pipeline.

For each URL: resolve owner/repo, fetch contributors, run every metric under the
timer, aggregate the four scores and hand a finished row to the sink. Repositories
are processed strictly one after another so output order matches input order.
"""
import concurrent.futures
import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, Iterator, Optional, Protocol, Union

from .config import Settings
from .errors import GhScoreError, InvalidURLError
from .metrics import REGISTRY, BusFactorMetric, to_contributors
from .resolver import parse_github_url
from .scoring import compute_net_score, normalize_bus_factor
from .timing import timed
from .types import ErrorRow, ReportRow, RepositoryRef, TimedResult

Row = Union[ReportRow, ErrorRow]


class Sink(Protocol):
    def write(self, row: Row) -> None: ...


def resolve(url: str) -> RepositoryRef:
    ref = parse_github_url(url)
    if ref is None:
        raise InvalidURLError(url)
    return ref


def _run_metric(metric: Any, ref: RepositoryRef, handler: Any) -> TimedResult:
    return timed(lambda: metric.compute(ref, handler))


def run_metrics(
    ref: RepositoryRef, handler: Any, max_workers: int = 1
) -> Dict[str, Optional[TimedResult]]:
    """Run every registered metric for one repository.

    A metric that hits a GitHub/transport error is logged and reported as None;
    the others still complete.
    """
    results: Dict[str, Optional[TimedResult]] = {}

    def record(name: str, outcome) -> None:
        try:
            result = outcome()
        except GhScoreError as exc:
            logging.error("Metric %s failed for %s: %s", name, ref.slug, exc)
            results[name] = None
            return
        logging.debug(
            "Metric %s for %s took %.4fs", name, ref.slug, result.elapsed_seconds
        )
        results[name] = result

    if max_workers <= 1:
        for metric in REGISTRY:
            record(metric.name, lambda m=metric: _run_metric(m, ref, handler))
        return results

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=min(max_workers, len(REGISTRY))
    ) as executor:
        futures = {
            metric.name: executor.submit(_run_metric, metric, ref, handler)
            for metric in REGISTRY
        }
        # collect in registry order so logs and results are deterministic
        for name, future in futures.items():
            record(name, future.result)
    return results


def _score(result: Optional[TimedResult]):
    return None if result is None else result.output


def _latency(result: Optional[TimedResult]):
    return None if result is None else result.elapsed_seconds


def process_url(url: str, github_handler: Any, settings: Settings) -> ReportRow:
    """Score one repository.

    Raises InvalidURLError when the URL is not a GitHub repository URL and
    GitHubAPIError when the contributor list cannot be fetched.
    """
    ref = resolve(url)
    contributors = timed(lambda: to_contributors(github_handler.fetch_contributors(ref)))
    logging.debug(
        "Fetched %d contributors for %s in %.4fs",
        len(contributors.output),
        ref.slug,
        contributors.elapsed_seconds,
    )

    bus_factor_metric = BusFactorMetric(settings.bus_factor_threshold)
    bus_factor = timed(lambda: bus_factor_metric.compute(contributors.output))
    results = run_metrics(ref, github_handler, settings.max_workers)

    ramp_up = results.get("ramp_up")
    correctness = results.get("correctness")
    responsive = results.get("responsive_maintainer")
    license_result = results.get("license")

    if None in (ramp_up, correctness, responsive):
        # partial results are never aggregated
        net_score = None
    else:
        net_score = timed(
            lambda: compute_net_score(
                normalize_bus_factor(bus_factor.output),
                ramp_up.output,
                correctness.output,
                responsive.output,
            )
        )

    return ReportRow(
        url=url,
        net_score=_score(net_score),
        net_score_latency=_latency(net_score),
        ramp_up=_score(ramp_up),
        ramp_up_latency=_latency(ramp_up),
        correctness=_score(correctness),
        correctness_latency=_latency(correctness),
        bus_factor=normalize_bus_factor(bus_factor.output),
        bus_factor_latency=bus_factor.elapsed_seconds,
        responsive_maintainer=_score(responsive),
        responsive_maintainer_latency=_latency(responsive),
        license=_score(license_result),
        license_latency=_latency(license_result),
    )


def iter_reports(
    urls: Iterable[str],
    github_handler: Any,
    settings: Settings,
    npm_handler: Any = None,
) -> Iterator[Row]:
    """Yield one row per URL, in input order; failures become ErrorRows."""
    for url in urls:
        logging.info("Processing URL: %s", url)
        target = url
        try:
            if npm_handler is not None:
                target = npm_handler.normalize(url)
            row = process_url(target, github_handler, settings)
        except InvalidURLError as exc:
            logging.error("%s", exc)
            yield ErrorRow(url, str(exc))
            continue
        except GhScoreError as exc:
            ref = parse_github_url(target)
            subject = ref.slug if ref else url
            logging.error("Error scoring %s: %s", subject, exc)
            yield ErrorRow(url, f"Error scoring {subject}: {exc}")
            continue
        # report the URL as it appeared in the input, not the normalized one
        if target != url:
            row = replace(row, url=url)
        logging.info("Emitted report for %s (net score %s)", url, row.net_score)
        yield row


def score_urls(
    urls: Iterable[str],
    github_handler: Any,
    settings: Settings,
    sink: Sink,
    npm_handler: Any = None,
) -> int:
    """Score every URL, writing each row before the next repository starts.

    Returns the number of rows that were errors.
    """
    failures = 0
    for row in iter_reports(urls, github_handler, settings, npm_handler):
        sink.write(row)
        if isinstance(row, ErrorRow):
            failures += 1
    return failures
