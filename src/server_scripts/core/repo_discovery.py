"""Repository root discovery.

Works without a full SscContext so that configuration can be loaded before the
context is created.
"""

import logging
import os
import shutil
from collections.abc import Mapping
from pathlib import Path

from server_scripts.core.subprocess_utils import run_subprocess_with_context

logger = logging.getLogger(__name__)

REPO_ROOT_ENV_VAR = "SSC_REPO_ROOT"


def discover_repo_root(cwd: Path, env: Mapping[str, str] | None = None) -> Path:
    """Find the repository root that script paths are relative to.

    Priority:
    1. The SSC_REPO_ROOT environment variable
    2. `git rev-parse --show-toplevel` run from cwd
    3. cwd itself
    """
    environ = os.environ if env is None else env

    override = environ.get(REPO_ROOT_ENV_VAR)
    if override:
        root = Path(override).expanduser().resolve()
        logger.debug("Repo root from %s: %s", REPO_ROOT_ENV_VAR, root)
        return root

    if shutil.which("git") is not None:
        result = run_subprocess_with_context(
            ["git", "rev-parse", "--show-toplevel"],
            "find git repository root",
            cwd=cwd,
            check=False,
        )
        toplevel = result.stdout.strip()
        if result.returncode == 0 and toplevel:
            logger.debug("Repo root from git: %s", toplevel)
            return Path(toplevel)

    logger.debug("Not inside a git repository, using cwd %s", cwd)
    return cwd
