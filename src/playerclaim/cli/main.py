from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from playerclaim.cli.commands import (
    admin_cmd,
    claims_cmd,
    directory_cmd,
    doctor_cmd,
    identity_cmd,
    init_cmd,
    web_cmd,
)
from playerclaim.cli.context import CLIContext
from playerclaim.core.config import load_paths, load_settings
from playerclaim.core.errors import PlayerClaimError
from playerclaim.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playerclaim",
        description="Player profile claim CLI",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project root to use for .playerclaim data (default: current working directory)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    init_cmd.register(subparsers)
    directory_cmd.register(subparsers)
    claims_cmd.register(subparsers)
    identity_cmd.register(subparsers)
    admin_cmd.register(subparsers)
    doctor_cmd.register(subparsers)
    web_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        ctx = CLIContext(paths=load_paths(args.project_root), settings=load_settings(), console=console)
        return handler(args, ctx)
    except PlayerClaimError as exc:
        logger.error(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
