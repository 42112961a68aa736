"""Application entry point for the Copilot metrics proxy."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

import uvicorn

from .aggregation import to_daily_series, to_language_ranking
from .cli import parse_args
from .config import ConfigStore, load_credential_from_env, load_settings
from .errors import ApiError, AuthenticationError, ConfigurationError, UpstreamError
from .github_client import GitHubMetricsClient
from .logging_setup import setup_logging
from .server import create_app
from .stats import generate_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4


def run_server(host: Optional[str] = None, port: Optional[int] = None) -> int:
    """Start the HTTP proxy and block until it stops."""
    settings = load_settings()
    setup_logging(settings.log_level)

    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )
    return EXIT_OK


def run_report(org: Optional[str] = None, top: int = 5) -> int:
    """Fetch metrics with the environment credential and print a report."""
    settings = load_settings()
    setup_logging(settings.log_level)

    credential = load_credential_from_env(org=org)
    client = GitHubMetricsClient(
        store=ConfigStore(credential),
        base_url=settings.api_base_url,
        timeout_seconds=settings.timeout_seconds,
    )
    try:
        print(f"Fetching Copilot metrics for organization '{credential.org}'...")
        records = client.fetch_metrics()
    finally:
        client.close()

    series = to_daily_series(records)
    ranking = to_language_ranking(records)
    logger.info("Aggregated Copilot metrics", extra={"days": len(series), "languages": len(ranking)})

    print(generate_report(org=credential.org, series=series, ranking=ranking, top=top))
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, dispatch the command and map errors to exit codes."""
    try:
        args = parse_args(argv)
        if args.command == "serve":
            return run_server(host=args.host, port=args.port)
        return run_report(org=args.org, top=args.top)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION
    except AuthenticationError as exc:
        print(f"Authentication error: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION
    except UpstreamError as exc:
        print(f"GitHub API error ({exc.status}): {exc.body}", file=sys.stderr)
        return EXIT_API
    except ApiError as exc:
        print(f"GitHub API error: {exc}", file=sys.stderr)
        return EXIT_API
    except Exception:
        logger.exception("Unexpected error")
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    raise SystemExit(main())
