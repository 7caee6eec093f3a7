"""
CLI Utilities

Core utility functions for WingOps.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from wingops.constants import ROOT_ENV_VAR, REPORT_TIMESTAMP_FORMAT


def get_project_root() -> Path:
    """
    Get the application repository root.

    WINGOPS_ROOT wins; otherwise the current working directory, which is
    where the tool is expected to be run from (contains backend/, frontend/).
    """
    override = os.environ.get(ROOT_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    return Path.cwd()


def resolve_path(path: str, root: Optional[Path] = None) -> Path:
    """Resolve a config-relative path against the project root."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return (root or get_project_root()) / candidate


def timestamp_now(fmt: str = REPORT_TIMESTAMP_FORMAT) -> str:
    """Local timestamp string used in file names."""
    return datetime.now().strftime(fmt)
