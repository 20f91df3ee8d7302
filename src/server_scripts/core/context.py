"""Application context with dependency injection."""

import os
from dataclasses import dataclass
from pathlib import Path

import click

from server_scripts.cli.output import user_output
from server_scripts.core.clock import Clock, RealClock
from server_scripts.core.config import SscConfig, load_config
from server_scripts.core.executor import Executor, RealExecutor
from server_scripts.core.models import Registry
from server_scripts.core.repo_discovery import discover_repo_root
from server_scripts.core.service_ops import RealServiceOps, ServiceOps
from server_scripts.core.snapshot import load_registry


@dataclass(frozen=True)
class SscContext:
    """Immutable context holding all dependencies for ssc operations.

    Created at CLI entry point and threaded through the application via
    click's ctx.obj. The registry is not part of the context: every command
    that needs it loads it fresh from disk.
    """

    config: SscConfig
    executor: Executor
    service_ops: ServiceOps
    clock: Clock
    cwd: Path  # Current working directory at CLI invocation
    privileged: bool  # Effective user is root
    debug: bool

    @property
    def repo_root(self) -> Path:
        return self.config.repo_root

    def load_registry(self) -> Registry:
        """Load the registry snapshot named by the configuration.

        Raises:
            ConfigMissing: If the snapshot does not exist
            ConfigInvalid: If the snapshot is malformed
        """
        return load_registry(self.config.manifest_path)

    @staticmethod
    def for_test(
        config: SscConfig | None = None,
        executor: Executor | None = None,
        service_ops: ServiceOps | None = None,
        clock: Clock | None = None,
        cwd: Path | None = None,
        repo_root: Path | None = None,
        privileged: bool = False,
        debug: bool = False,
    ) -> "SscContext":
        """Create test context with optional pre-configured fakes.

        Args:
            config: Optional SscConfig. If None, uses defaults rooted at repo_root.
            executor: Optional Executor. If None, creates FakeExecutor.
            service_ops: Optional ServiceOps. If None, creates FakeServiceOps with
                systemctl and journalctl installed and no units.
            clock: Optional Clock. If None, creates FakeClock.
            cwd: Optional current working directory. If None, uses repo_root.
            repo_root: Root used for the default config. If None, uses sentinel_path().
            privileged: Whether to behave as if running as root.
            debug: Whether debug mode is on.

        Example:
            >>> executor = FakeExecutor(exit_code=3)
            >>> ctx = SscContext.for_test(repo_root=tmp_path, executor=executor)
            >>> result = runner.invoke(cli, ["run", "backup-example"], obj=ctx)
        """
        from tests.fakes.clock import FakeClock
        from tests.fakes.executor import FakeExecutor
        from tests.fakes.service_ops import FakeServiceOps
        from tests.test_utils.paths import sentinel_path

        if repo_root is None:
            repo_root = config.repo_root if config is not None else sentinel_path()

        if config is None:
            config = SscConfig(repo_root=repo_root)

        if executor is None:
            executor = FakeExecutor()

        if service_ops is None:
            service_ops = FakeServiceOps()

        if clock is None:
            clock = FakeClock()

        return SscContext(
            config=config,
            executor=executor,
            service_ops=service_ops,
            clock=clock,
            cwd=cwd or repo_root,
            privileged=privileged,
            debug=debug,
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        tuple[Path | None, str | None]: (path, error_message)
        - If successful: (Path, None)
        - If directory deleted: (None, error_message)
    """
    try:
        cwd_path = Path.cwd()
        return (cwd_path, None)
    except (FileNotFoundError, OSError):
        return (
            None,
            "Current working directory no longer exists",
        )


def create_context(*, debug: bool = False) -> SscContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Raises:
        ConfigInvalid: If `.ssc/config.toml` exists but is malformed
    """
    # 1. Capture cwd (no deps)
    cwd_result, error_msg = safe_cwd()
    if cwd_result is None:
        assert error_msg is not None
        user_output(click.style("Error: ", fg="red") + error_msg)
        user_output("Please change to a valid directory and try again.")
        raise SystemExit(1)

    cwd = cwd_result

    # 2. Locate the repository and load its config
    repo_root = discover_repo_root(cwd)
    config = load_config(repo_root)

    return SscContext(
        config=config,
        executor=RealExecutor(),
        service_ops=RealServiceOps(),
        clock=RealClock(),
        cwd=cwd,
        privileged=os.geteuid() == 0,
        debug=debug,
    )
