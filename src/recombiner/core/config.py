from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppPaths:
    project_root: Path
    data_dir: Path
    catalog_path: Path


@dataclass(frozen=True)
class HttpSettings:
    timeout_seconds: float
    user_agent: str


DEFAULT_DATA_DIRNAME = ".recombiner"
DEFAULT_HTTP_TIMEOUT = 20.0
DEFAULT_USER_AGENT = "teachbook-recombiner/0.1"


def load_paths(project_root: Path | None = None) -> AppPaths:
    root = (project_root or Path.cwd()).expanduser().resolve()

    home_raw = os.getenv("RECOMBINER_HOME")
    if home_raw:
        data_dir = Path(home_raw).expanduser().resolve()
    else:
        data_dir = root / DEFAULT_DATA_DIRNAME

    return AppPaths(
        project_root=root,
        data_dir=data_dir,
        catalog_path=data_dir / "catalog.json",
    )


def load_http_settings() -> HttpSettings:
    user_agent = (os.getenv("RECOMBINER_USER_AGENT") or "").strip() or DEFAULT_USER_AGENT
    return HttpSettings(
        timeout_seconds=_read_float_env("RECOMBINER_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        user_agent=user_agent,
    )


def _read_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default
