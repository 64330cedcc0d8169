from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from playerclaim.application.services.project_service import ProjectService
from playerclaim.application.wiring import Services, build_services
from playerclaim.core.config import AppPaths, AppSettings
from playerclaim.core.errors import ProjectNotInitializedError


@dataclass(slots=True)
class CLIContext:
    paths: AppPaths
    settings: AppSettings
    console: Console


def require_services(ctx: CLIContext) -> Services:
    project_service = ProjectService(ctx.paths)
    if not project_service.is_initialized():
        raise ProjectNotInitializedError(
            f"Project is not initialized. Run 'playerclaim init' first in {ctx.paths.project_root}"
        )
    project_service.init_project()
    return build_services(ctx.paths.db_path, ctx.settings)
