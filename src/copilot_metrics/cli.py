"""Command-line argument parsing for the Copilot metrics proxy."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed CLI arguments. ``command`` is ``"serve"`` or ``"report"``.
    """
    parser = argparse.ArgumentParser(
        prog="copilot-metrics",
        description=(
            "Serve or report GitHub Copilot usage metrics "
            "(daily acceptance and accepted lines by language)."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser(
        "serve",
        help="Run the HTTP proxy that keeps the GitHub token server-side.",
    )
    serve.add_argument(
        "--host",
        default=None,
        help="Address to bind (default: HOST or 0.0.0.0).",
    )
    serve.add_argument(
        "--port",
        type=_positive_int,
        default=None,
        help="Port to listen on (default: PORT or 3000).",
    )

    report = subparsers.add_parser(
        "report",
        help="Fetch metrics with GITHUB_TOKEN and print a text report.",
    )
    report.add_argument(
        "--org",
        default=None,
        help="GitHub organization name (default: GITHUB_ORG).",
    )
    report.add_argument(
        "--top",
        type=_positive_int,
        default=5,
        help="Number of languages to list (default: 5).",
    )

    return parser.parse_args(argv)
