from __future__ import annotations

import argparse

from rich.table import Table

from playerclaim.cli.context import CLIContext, require_services
from playerclaim.domain.models.directory import ROLES


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("directory", help="Seed users and players")
    directory_subparsers = parser.add_subparsers(dest="directory_command", required=True)

    user_parser = directory_subparsers.add_parser("add-user", help="Register a user")
    user_parser.add_argument("--email", required=True)
    user_parser.add_argument("--role", choices=list(ROLES), default="free")
    user_parser.set_defaults(handler=run_add_user)

    player_parser = directory_subparsers.add_parser("add-player", help="Add a player profile")
    player_parser.add_argument("--first-name", required=True)
    player_parser.add_argument("--last-name", required=True)
    player_parser.add_argument("--birth-year", type=int)
    player_parser.add_argument("--club")
    player_parser.add_argument("--league")
    player_parser.add_argument("--position")
    player_parser.set_defaults(handler=run_add_player)

    unclaimed_parser = directory_subparsers.add_parser("unclaimed", help="List players nobody has claimed")
    unclaimed_parser.add_argument("--limit", type=int, default=100)
    unclaimed_parser.set_defaults(handler=run_unclaimed)


def run_add_user(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = require_services(ctx)
    user = services.directory.add_user(args.email, role=args.role)
    ctx.console.print(f"[green]User added[/green] {user.id} ({user.email}, {user.role})")
    return 0


def run_add_player(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = require_services(ctx)
    player = services.directory.add_player(
        first_name=args.first_name,
        last_name=args.last_name,
        birth_year=args.birth_year,
        club=args.club,
        league=args.league,
        position=args.position,
    )
    ctx.console.print(f"[green]Player added[/green] {player.id} ({player.full_name})")
    return 0


def run_unclaimed(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = require_services(ctx)
    players = services.directory.list_unclaimed_players(limit=args.limit)

    out = Table(title=f"Unclaimed Players ({len(players)})")
    out.add_column("ID")
    out.add_column("Name")
    out.add_column("Born")
    out.add_column("Club", overflow="fold")
    out.add_column("Position")
    for p in players:
        out.add_row(p.id, p.full_name, str(p.birth_year or ""), p.club or "", p.position or "")

    ctx.console.print(out)
    return 0
