from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from typing import Any

from fastapi import FastAPI, Header, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from playerclaim.application.services.identity_service import validate_declared_identity
from playerclaim.application.services.project_service import ProjectService
from playerclaim.application.wiring import build_services
from playerclaim.core.config import AppPaths, AppSettings, load_settings
from playerclaim.core.errors import ClaimFlowError, ErrorKind, ForbiddenError
from playerclaim.domain.models.directory import ROLE_ADMIN
from playerclaim.infrastructure.verification.kps_client import VerificationProvider

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.ATTEMPTS_EXHAUSTED: 409,
    ErrorKind.VALIDATION_FAILED: 422,
    ErrorKind.INVALID_INPUT: 422,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.INTERNAL_ERROR: 500,
}


class StartClaimRequest(BaseModel):
    player_id: str


class VerifyIdentityRequest(BaseModel):
    national_id: str
    first_name: str
    last_name: str
    birth_year: int


class RejectClaimRequest(BaseModel):
    reason: str | None = None


class SetRoleRequest(BaseModel):
    role: str


class CustomDataRequest(BaseModel):
    bio: str | None = None
    height: float | None = None
    weight: float | None = None
    preferred_foot: str | None = None
    photo_url: str | None = None
    videos: list[dict[str, Any]] | None = None
    instagram: str | None = None
    career_history: list[dict[str, Any]] | None = None


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return value


def create_app(
    paths: AppPaths,
    settings: AppSettings | None = None,
    provider: VerificationProvider | None = None,
) -> FastAPI:
    app = FastAPI(title="playerclaim", version="0.1.0")

    ProjectService(paths).init_project()
    services = build_services(paths.db_path, settings or load_settings(), provider=provider)

    @app.exception_handler(ClaimFlowError)
    async def _claim_flow_error(request: Request, exc: ClaimFlowError) -> JSONResponse:
        status_code = ERROR_STATUS[exc.kind]
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"error": exc.kind.value, "detail": str(exc)})

    def _require_admin(user_id: str) -> str:
        user = services.directory.get_user(user_id)
        if user is None or user.role != ROLE_ADMIN:
            raise ForbiddenError("Administrator role required.")
        return user.id

    @app.get("/api/health")
    def health() -> dict[str, Any]:
        return {"ok": True}

    @app.get("/api/players/unclaimed")
    def unclaimed_players(limit: int = Query(default=100, ge=1, le=1000)) -> dict[str, Any]:
        players = services.directory.list_unclaimed_players(limit=limit)
        return {"count": len(players), "players": _jsonable(players)}

    @app.post("/api/claims")
    def start_claim(payload: StartClaimRequest, x_user_id: str = Header()) -> dict[str, Any]:
        result = services.claims.start_claim(x_user_id, payload.player_id)
        return {"ok": True, **_jsonable(result)}

    @app.get("/api/claims/me")
    def my_claim(x_user_id: str = Header()) -> dict[str, Any]:
        summary = services.claims.get_my_claim(x_user_id)
        return {"claim": _jsonable(summary.claim) if summary else None, "player": _jsonable(summary.player) if summary else None}

    @app.put("/api/claims/players/{player_id}/custom-data")
    def update_custom_data(player_id: str, payload: CustomDataRequest, x_user_id: str = Header()) -> dict[str, Any]:
        data = services.profiles.update_custom_data(x_user_id, player_id, payload.model_dump(exclude_unset=True))
        return {"ok": True, "custom_data": _jsonable(data)}

    @app.post("/api/identity/verify")
    def verify_identity(payload: VerifyIdentityRequest, x_user_id: str = Header()) -> dict[str, Any]:
        declared = validate_declared_identity(
            payload.national_id,
            payload.first_name,
            payload.last_name,
            payload.birth_year,
        )
        outcome = services.identity.verify_identity(x_user_id, declared)
        return {"ok": True, "claim_request_id": outcome.claim_request_id, "status": outcome.status}

    @app.get("/api/admin/claims/pending")
    def pending_reviews(x_user_id: str = Header()) -> dict[str, Any]:
        _require_admin(x_user_id)
        reviews = services.adjudication.list_pending_reviews()
        return {"count": len(reviews), "claims": _jsonable(reviews)}

    @app.put("/api/admin/claims/{claim_id}/approve")
    def approve_claim(claim_id: str, x_user_id: str = Header()) -> dict[str, Any]:
        admin_id = _require_admin(x_user_id)
        return {"ok": True, **_jsonable(services.adjudication.approve(claim_id, admin_id))}

    @app.put("/api/admin/claims/{claim_id}/reject")
    def reject_claim(
        claim_id: str,
        payload: RejectClaimRequest | None = None,
        x_user_id: str = Header(),
    ) -> dict[str, Any]:
        admin_id = _require_admin(x_user_id)
        return {"ok": True, **_jsonable(services.adjudication.reject(claim_id, admin_id, payload.reason if payload else None))}

    @app.get("/api/admin/audit-logs")
    def audit_logs(page: int = 1, limit: int = 50, x_user_id: str = Header()) -> dict[str, Any]:
        _require_admin(x_user_id)
        result = services.audit.list(page=page, limit=limit)
        return {"data": _jsonable(result.entries), "meta": {"total": result.total, "page": result.page, "limit": result.limit}}

    @app.get("/api/admin/users")
    def users(page: int = 1, limit: int = 50, role: str | None = None, x_user_id: str = Header()) -> dict[str, Any]:
        _require_admin(x_user_id)
        result = services.admin.list_users(page=page, limit=limit, role=role)
        return {"data": _jsonable(result.users), "meta": {"total": result.total, "page": result.page, "limit": result.limit}}

    @app.put("/api/admin/users/{user_id}/role")
    def set_user_role(user_id: str, payload: SetRoleRequest, x_user_id: str = Header()) -> dict[str, Any]:
        admin_id = _require_admin(x_user_id)
        user = services.admin.set_user_role(user_id, payload.role, admin_id)
        return {"ok": True, "user": {"id": user.id, "email": user.email, "role": user.role}}

    @app.get("/api/admin/dashboard")
    def dashboard(x_user_id: str = Header()) -> dict[str, Any]:
        _require_admin(x_user_id)
        return _jsonable(services.admin.dashboard_stats())

    return app
