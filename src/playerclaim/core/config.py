from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from playerclaim.core.errors import ConfigurationError


@dataclass(frozen=True)
class AppPaths:
    project_root: Path
    data_dir: Path
    db_path: Path


@dataclass(frozen=True)
class AppSettings:
    verification_mode: str
    kps_endpoint: str
    verification_timeout_seconds: float
    identity_hash_rounds: int


DEFAULT_DATA_DIRNAME = ".playerclaim"
DEFAULT_KPS_ENDPOINT = "https://tckimlik.nvi.gov.tr/Service/KPSPublic.asmx"
DEFAULT_VERIFICATION_TIMEOUT_SECONDS = 10.0
DEFAULT_IDENTITY_HASH_ROUNDS = 12
VERIFICATION_MODES = ("strict", "permissive")


def load_paths(project_root: Path | None = None) -> AppPaths:
    root = (project_root or Path.cwd()).expanduser().resolve()

    home_raw = os.getenv("PLAYERCLAIM_HOME")
    if home_raw:
        data_dir = Path(home_raw).expanduser().resolve()
    else:
        data_dir = root / DEFAULT_DATA_DIRNAME

    return AppPaths(
        project_root=root,
        data_dir=data_dir,
        db_path=data_dir / "playerclaim.db",
    )


def read_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings() -> AppSettings:
    mode = (os.getenv("PLAYERCLAIM_VERIFICATION_MODE") or "strict").strip().lower()
    if mode not in VERIFICATION_MODES:
        raise ConfigurationError(
            f"PLAYERCLAIM_VERIFICATION_MODE must be one of {', '.join(VERIFICATION_MODES)}; got {mode!r}"
        )

    # bcrypt accepts 4..31; anything else falls back to the default cost.
    rounds = read_int_env("PLAYERCLAIM_IDENTITY_HASH_ROUNDS", DEFAULT_IDENTITY_HASH_ROUNDS)
    if not 4 <= rounds <= 31:
        rounds = DEFAULT_IDENTITY_HASH_ROUNDS

    return AppSettings(
        verification_mode=mode,
        kps_endpoint=os.getenv("PLAYERCLAIM_KPS_ENDPOINT") or DEFAULT_KPS_ENDPOINT,
        verification_timeout_seconds=read_float_env(
            "PLAYERCLAIM_VERIFICATION_TIMEOUT_SECONDS",
            DEFAULT_VERIFICATION_TIMEOUT_SECONDS,
        ),
        identity_hash_rounds=rounds,
    )
