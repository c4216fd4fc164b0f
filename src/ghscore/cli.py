import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import load_settings
from .errors import ConfigurationError
from .github_handler import GitHubHandler
from .npm_handler import NpmHandler
from .pipeline import score_urls
from .reporter import NdjsonWriter, default_output_path


def setup_logging():
    log_file = os.environ.get("LOG_FILE")
    raw_level = os.environ.get("LOG_LEVEL", "0")
    try:
        log_level = int(raw_level)
    except ValueError:
        log_level = 0

    level_map = {
        0: logging.CRITICAL + 1,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    level = level_map.get(log_level, logging.ERROR)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_path.touch()
        handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(formatter)
    handler.setLevel(level)
    root_logger.addHandler(handler)


def read_urls(path: Path) -> List[str]:
    """One URL per line; blank lines and surrounding whitespace are ignored."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ghscore",
        description="Score GitHub repositories listed in a URL file and emit NDJSON.",
    )
    parser.add_argument("url_file", help="File with one repository URL per line.")
    parser.add_argument(
        "-o",
        "--output",
        help=(
            "NDJSON destination, appended to after every repository. Defaults to a "
            "sibling of URL_FILE with a .ndjson suffix; '-' writes to stdout."
        ),
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging()
    args = parse_args(list(sys.argv[1:] if argv is None else argv))

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logging.critical("Configuration error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logging.debug("Loaded %r", settings)

    url_path = Path(args.url_file)
    if not url_path.exists():
        logging.error("URL file not found: %s", url_path)
        print(f"Error: URL file not found: {url_path}", file=sys.stderr)
        return 1
    try:
        urls = read_urls(url_path)
    except (OSError, UnicodeDecodeError) as e:
        logging.error("Failed to read URL file %s: %s", url_path, e)
        print(f"Error reading file {url_path}: {e}", file=sys.stderr)
        return 1

    out_path = None
    if args.output != "-":
        out_path = Path(args.output) if args.output else default_output_path(url_path)
        if out_path.resolve() == url_path.resolve():
            logging.error("Output path %s is the URL file itself", out_path)
            print(
                f"Error: output {out_path} would append into the URL file; pass --output",
                file=sys.stderr,
            )
            return 1
        try:
            stream = out_path.open("a", encoding="utf-8")
        except OSError as e:
            logging.error("Failed to open output %s: %s", out_path, e)
            print(f"Error opening output {out_path}: {e}", file=sys.stderr)
            return 1

    github_handler = GitHubHandler(settings)
    npm_handler = NpmHandler(timeout=settings.request_timeout)
    try:
        if out_path is None:
            sink = NdjsonWriter(sys.stdout)
            failures = score_urls(urls, github_handler, settings, sink, npm_handler)
        else:
            with stream:
                sink = NdjsonWriter(stream)
                failures = score_urls(urls, github_handler, settings, sink, npm_handler)
            logging.info("Wrote %d records to %s", sink.count, out_path)
    finally:
        github_handler.close()
        npm_handler.close()

    logging.info("Scored %d URLs, %d failed", len(urls), failures)
    return 0


def entrypoint() -> None:
    sys.exit(main())
