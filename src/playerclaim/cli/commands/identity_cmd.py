from __future__ import annotations

import argparse

from rich.panel import Panel
from rich.prompt import Prompt

from playerclaim.application.services.identity_service import validate_declared_identity
from playerclaim.cli.context import CLIContext, require_services


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("identity", help="National identity verification")
    identity_subparsers = parser.add_subparsers(dest="identity_command", required=True)

    verify_parser = identity_subparsers.add_parser("verify", help="Submit identity for the pending claim")
    verify_parser.add_argument("--user-id", required=True)
    verify_parser.add_argument(
        "--national-id",
        help="11-digit national identity number (prompted without echo when omitted)",
    )
    verify_parser.add_argument("--first-name", required=True)
    verify_parser.add_argument("--last-name", required=True)
    verify_parser.add_argument("--birth-year", type=int, required=True)
    verify_parser.set_defaults(handler=run_verify)


def run_verify(args: argparse.Namespace, ctx: CLIContext) -> int:
    national_id = args.national_id or Prompt.ask("National identity number", password=True, console=ctx.console)
    declared = validate_declared_identity(national_id, args.first_name, args.last_name, args.birth_year)

    services = require_services(ctx)
    outcome = services.identity.verify_identity(args.user_id, declared)
    ctx.console.print(
        Panel.fit(
            "\n".join(
                [
                    f"Claim ID: {outcome.claim_request_id}",
                    f"Status: {outcome.status}",
                    "Your identity was verified. An administrator will review the claim.",
                ]
            ),
            title="Identity Verified",
        )
    )
    return 0
