from __future__ import annotations

import logging
import argparse
import re
import subprocess
import sys
from pathlib import Path
from typing import Sequence

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


from ghscore.cli import setup_logging  # noqa: E402


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Utility entrypoint for installing dependencies, "
            "running tests, and scoring URL files."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "install", help="Install the project in editable mode using pip."
    )
    subparsers.add_parser(
        "test", help="Run the pytest suite with coverage enabled."
    )

    score_parser = subparsers.add_parser(
        "score",
        help=(
            "Score repositories listed in the provided URL file "
            "and append NDJSON to a sibling .ndjson file."
        ),
    )
    score_parser.add_argument(
        "url_file",
        nargs="?",
        default="urls.txt",
        help="Path to a file containing one URL per line (defaults to urls.txt).",
    )
    score_parser.add_argument(
        "-o",
        "--output",
        help="NDJSON destination; '-' writes to stdout.",
    )

    return parser.parse_args(argv)


def do_install() -> int:
    base_cmd = [sys.executable, "-m", "pip", "install"]
    in_virtualenv = sys.prefix != getattr(sys, "base_prefix", sys.prefix)
    user_flags: list[str] = [] if in_virtualenv else ["--user"]

    try:
        command = base_cmd + user_flags + ["-e", f"{ROOT}[test]"]
        logging.debug("Installing project via: %s", " ".join(command))
        subprocess.check_call(command)
    except subprocess.CalledProcessError as exc:
        return exc.returncode
    return 0


def do_test() -> int:
    cmd = [
        sys.executable,
        "-m",
        "pytest",
        "tests",
        "--disable-warnings",
        "--cov=ghscore",
        "--cov-report=term-missing",
    ]
    logging.debug("Running pytest command: %s", " ".join(cmd))
    proc = subprocess.run(cmd, cwd=ROOT, text=True, capture_output=True)
    output = (proc.stdout or "") + (proc.stderr or "")

    collected = re.search(r"collected\s+(\d+)", output)
    passed = re.search(r"(\d+)\s+passed", output)
    coverage = re.search(r"TOTAL\s+.*?(\d+)%", output)

    total = int(collected.group(1)) if collected else 0
    success = int(passed.group(1)) if passed else 0
    cov_percent = int(coverage.group(1)) if coverage else 0

    print(
        f"{success}/{total} test cases passed. "
        f"{cov_percent}% line coverage achieved."
    )
    if proc.returncode != 0 and output:
        print(output)
    return proc.returncode


def do_score(url_file: str, output: str | None = None) -> int:
    """Score repositories from the provided URL file."""
    from ghscore.cli import main as cli_main

    argv = [url_file]
    if output:
        argv += ["--output", output]
    return cli_main(argv)


def main(argv: Sequence[str] | None = None) -> int:
    raw_args = list(argv) if argv is not None else sys.argv[1:]
    setup_logging()
    if not raw_args:
        return do_score("urls.txt")

    cmd = raw_args[0]
    if cmd not in {"install", "test", "score"}:
        if len(raw_args) != 1:
            print(
                "Usage: run.py [install|test|score <URL_FILE>] or run.py <URL_FILE>",
                file=sys.stderr,
            )
            return 1
        return do_score(cmd)

    args = parse_args(raw_args)
    if args.command == "score":
        logging.info("Starting score command")
        return do_score(args.url_file, args.output)

    logging.info("Starting %s command", args.command)
    code = do_install() if args.command == "install" else do_test()
    if code == 0:
        logging.info("%s command completed successfully", args.command.capitalize())
    else:
        logging.error("%s command failed with exit code %s", args.command.capitalize(), code)
    return code


if __name__ == "__main__":
    sys.exit(main())
