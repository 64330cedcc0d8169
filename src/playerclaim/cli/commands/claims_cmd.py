from __future__ import annotations

import argparse

from rich.panel import Panel

from playerclaim.cli.context import CLIContext, require_services


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("claims", help="Start and inspect profile claims")
    claims_subparsers = parser.add_subparsers(dest="claims_command", required=True)

    start_parser = claims_subparsers.add_parser("start", help="Claim a player profile")
    start_parser.add_argument("--user-id", required=True)
    start_parser.add_argument("--player-id", required=True)
    start_parser.set_defaults(handler=run_start)

    show_parser = claims_subparsers.add_parser("show", help="Show the user's latest claim")
    show_parser.add_argument("--user-id", required=True)
    show_parser.set_defaults(handler=run_show)

    custom_parser = claims_subparsers.add_parser("custom-data", help="Edit a claimed player's profile data")
    custom_parser.add_argument("--user-id", required=True)
    custom_parser.add_argument("--player-id", required=True)
    custom_parser.add_argument("--bio")
    custom_parser.add_argument("--height", type=float)
    custom_parser.add_argument("--weight", type=float)
    custom_parser.add_argument("--preferred-foot")
    custom_parser.add_argument("--photo-url")
    custom_parser.add_argument("--instagram")
    custom_parser.add_argument("--video-url", action="append", dest="video_urls", help="Repeatable")
    custom_parser.set_defaults(handler=run_custom_data)


def run_start(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = require_services(ctx)
    result = services.claims.start_claim(args.user_id, args.player_id)
    ctx.console.print(
        Panel.fit(
            "\n".join(
                [
                    f"Claim ID: {result.claim_request_id}",
                    f"Status: {result.status}",
                    f"Next step: {result.next_step}",
                ]
            ),
            title="Claim Started",
        )
    )
    return 0


def run_show(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = require_services(ctx)
    summary = services.claims.get_my_claim(args.user_id)
    if summary is None:
        ctx.console.print("[yellow]No claims for this user[/yellow]")
        return 0

    claim = summary.claim
    lines = [
        f"Claim ID: {claim.id}",
        f"Status: {claim.status}",
        f"Created: {claim.created_at}",
        f"Reviewed: {claim.reviewed_at or '-'}",
    ]
    if claim.review_rationale:
        lines.append(f"Rationale: {claim.review_rationale}")
    if summary.player is not None:
        lines.append(
            f"Player: {summary.player.first_name} {summary.player.last_name} "
            f"({summary.player.club or '-'}, {summary.player.position or '-'})"
        )
    ctx.console.print(Panel.fit("\n".join(lines), title="My Claim"))
    return 0


def run_custom_data(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = require_services(ctx)
    changes: dict[str, object] = {
        "bio": args.bio,
        "height": args.height,
        "weight": args.weight,
        "preferred_foot": args.preferred_foot,
        "photo_url": args.photo_url,
        "instagram": args.instagram,
    }
    if args.video_urls:
        changes["videos"] = [{"url": url} for url in args.video_urls]

    data = services.profiles.update_custom_data(
        args.user_id,
        args.player_id,
        {key: value for key, value in changes.items() if value is not None},
    )
    ctx.console.print(f"[green]Profile updated[/green] {data.player_id} at {data.updated_at}")
    return 0
