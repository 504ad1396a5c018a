"""CLI entrypoint for the issue tracker."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn
from pydantic import ValidationError

from itops_issue_tracker import __version__
from itops_issue_tracker.server.app import create_app
from itops_issue_tracker.server.config import ServerSettings
from itops_issue_tracker.tracker.logging import configure_logging
from itops_issue_tracker.tracker.users import UserDirectory

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="itops-tracker",
        description="ItOps issue tracker API server",
    )
    parser.add_argument("--version", action="version", version=f"itops-issue-tracker {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default=None, help="Bind address (overrides ITOPS_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (overrides ITOPS_PORT)")

    subparsers.add_parser("users", help="List the users issues can be assigned to")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "users":
        for user in UserDirectory.default().list():
            print(f"{user.id}\t{user.name}")
        return 0

    # Command-line values are passed as init kwargs, which win over env and `.env`.
    overrides: dict[str, object] = {}
    if args.host is not None:
        overrides["ITOPS_HOST"] = args.host
    if args.port is not None:
        overrides["ITOPS_PORT"] = args.port

    try:
        settings = ServerSettings(**overrides)
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, access_log=settings.access_log)

    logger.info(
        "Starting ItOps Issue Tracker API server",
        extra={"host": settings.host, "port": settings.port},
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
    return 0
