from __future__ import annotations

import os
import subprocess
from functools import lru_cache
from importlib import metadata
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DISTRIBUTION_NAME = "vector-maestro"


@lru_cache(maxsize=1)
def project_version() -> str:
    try:
        version = metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"
    return str(version).strip() or "0.0.0"


@lru_cache(maxsize=1)
def project_revision() -> str:
    env_value = str(os.getenv("MAESTRO_BUILD_REVISION", "")).strip()
    if env_value:
        return env_value
    try:
        revision = (
            subprocess.check_output(
                ["git", "rev-parse", "--short", "HEAD"],
                cwd=PROJECT_ROOT,
                stderr=subprocess.DEVNULL,
                text=True,
            )
            .strip()
        )
    except (OSError, subprocess.CalledProcessError):
        return "dev"
    return revision or "dev"


__all__ = ["project_revision", "project_version"]
