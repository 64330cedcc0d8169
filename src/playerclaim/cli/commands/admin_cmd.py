from __future__ import annotations

import argparse
import json

from rich.panel import Panel
from rich.table import Table

from playerclaim.application.wiring import Services
from playerclaim.cli.context import CLIContext, require_services
from playerclaim.core.errors import ForbiddenError
from playerclaim.domain.models.directory import ROLE_ADMIN, ROLES


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("admin", help="Review claims and manage users")
    parser.add_argument("--admin-id", required=True, help="Acting administrator user ID")
    admin_subparsers = parser.add_subparsers(dest="admin_command", required=True)

    pending_parser = admin_subparsers.add_parser("pending", help="List claims awaiting review")
    pending_parser.set_defaults(handler=run_pending)

    approve_parser = admin_subparsers.add_parser("approve", help="Approve a claim")
    approve_parser.add_argument("--claim-id", required=True)
    approve_parser.set_defaults(handler=run_approve)

    reject_parser = admin_subparsers.add_parser("reject", help="Reject a claim")
    reject_parser.add_argument("--claim-id", required=True)
    reject_parser.add_argument("--reason")
    reject_parser.set_defaults(handler=run_reject)

    audit_parser = admin_subparsers.add_parser("audit", help="Show the audit log")
    audit_parser.add_argument("--page", type=int, default=1)
    audit_parser.add_argument("--limit", type=int, default=50)
    audit_parser.set_defaults(handler=run_audit)

    users_parser = admin_subparsers.add_parser("users", help="List users")
    users_parser.add_argument("--page", type=int, default=1)
    users_parser.add_argument("--limit", type=int, default=50)
    users_parser.add_argument("--role", choices=list(ROLES))
    users_parser.set_defaults(handler=run_users)

    role_parser = admin_subparsers.add_parser("set-role", help="Change a user's role")
    role_parser.add_argument("--user-id", required=True)
    role_parser.add_argument("--role", required=True, choices=list(ROLES))
    role_parser.set_defaults(handler=run_set_role)

    dashboard_parser = admin_subparsers.add_parser("dashboard", help="Show headline counts")
    dashboard_parser.set_defaults(handler=run_dashboard)


def _admin_services(args: argparse.Namespace, ctx: CLIContext) -> Services:
    services = require_services(ctx)
    admin = services.directory.get_user(args.admin_id)
    if admin is None or admin.role != ROLE_ADMIN:
        raise ForbiddenError("Administrator role required.")
    return services


def run_pending(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = _admin_services(args, ctx)
    reviews = services.adjudication.list_pending_reviews()

    out = Table(title=f"Pending Reviews ({len(reviews)})")
    out.add_column("Claim ID")
    out.add_column("Submitted")
    out.add_column("User", overflow="fold")
    out.add_column("Declared identity")
    out.add_column("Player", overflow="fold")
    for r in reviews:
        identity = ""
        if r.identity is not None:
            identity = f"{r.identity.first_name} {r.identity.last_name} ({r.identity.birth_year})"
        player = ""
        if r.player is not None:
            player = f"{r.player.first_name} {r.player.last_name} ({r.player.birth_year or '-'}, {r.player.club or '-'})"
        out.add_row(r.claim_id, r.created_at, r.user_email or r.user_id, identity, player)

    ctx.console.print(out)
    return 0


def run_approve(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = _admin_services(args, ctx)
    result = services.adjudication.approve(args.claim_id, args.admin_id)
    ctx.console.print(f"[green]Approved[/green] {result.claim_id} at {result.reviewed_at}")
    return 0


def run_reject(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = _admin_services(args, ctx)
    result = services.adjudication.reject(args.claim_id, args.admin_id, args.reason)
    ctx.console.print(f"[yellow]Rejected[/yellow] {result.claim_id} at {result.reviewed_at}")
    return 0


def run_audit(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = _admin_services(args, ctx)
    page = services.audit.list(page=args.page, limit=args.limit)

    out = Table(title=f"Audit Log (page {page.page}, {page.total} total)")
    out.add_column("When")
    out.add_column("Admin")
    out.add_column("Action")
    out.add_column("Target")
    out.add_column("Meta", overflow="fold")
    for e in page.entries:
        out.add_row(
            e.created_at,
            e.admin_id,
            e.action,
            f"{e.target_type}:{e.target_id}",
            json.dumps(e.meta, ensure_ascii=False, sort_keys=True),
        )

    ctx.console.print(out)
    return 0


def run_users(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = _admin_services(args, ctx)
    page = services.admin.list_users(page=args.page, limit=args.limit, role=args.role)

    out = Table(title=f"Users (page {page.page}, {page.total} total)")
    out.add_column("ID")
    out.add_column("Email", overflow="fold")
    out.add_column("Role")
    out.add_column("Verification")
    out.add_column("Attempts")
    out.add_column("Created")
    for u in page.users:
        out.add_row(u.id, u.email, u.role, u.verification_status, str(u.claim_attempts), u.created_at)

    ctx.console.print(out)
    return 0


def run_set_role(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = _admin_services(args, ctx)
    user = services.admin.set_user_role(args.user_id, args.role, args.admin_id)
    ctx.console.print(f"[green]Role updated[/green] {user.email} -> {user.role}")
    return 0


def run_dashboard(args: argparse.Namespace, ctx: CLIContext) -> int:
    services = _admin_services(args, ctx)
    stats = services.admin.dashboard_stats()
    ctx.console.print(
        Panel.fit(
            "\n".join(
                [
                    f"Users: {stats.total_users}",
                    f"Premium users: {stats.premium_users}",
                    f"Players: {stats.total_players}",
                    f"Claimed players: {stats.claimed_players}",
                    f"Claims awaiting review: {stats.pending_claims}",
                ]
            ),
            title="Dashboard",
        )
    )
    return 0
