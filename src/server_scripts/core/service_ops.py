"""Service supervision and log query operations.

This module provides a clean abstraction over systemctl and journalctl calls,
making the status/logs commands testable without a live init system.

Architecture:
- ServiceOps: Abstract base class defining the interface
- RealServiceOps: Production implementation using systemctl/journalctl
- journal_plan: Builds the terminal-dispatch plan for log pass-through
"""

import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from server_scripts.core.errors import ToolingMissing
from server_scripts.core.resolver import ExecutionPlan
from server_scripts.core.subprocess_utils import run_subprocess_with_context

logger = logging.getLogger(__name__)

SYSTEMCTL = "systemctl"
JOURNALCTL = "journalctl"

# systemctl status exit code for "no such unit"
_UNIT_NOT_FOUND = 4


@dataclass(frozen=True)
class UnitState:
    """ActiveState/SubState pair reported by the service manager."""

    active_state: str
    sub_state: str


UNKNOWN_STATE = UnitState(active_state="unknown", sub_state="unknown")


def timer_for_service(service: str) -> str:
    """Name of the timer unit conventionally paired with a service unit."""
    return f"{service.removesuffix('.service')}.timer"


def journal_plan(service: str, extra_args: Sequence[str]) -> ExecutionPlan:
    """Plan that hands the process to journalctl for the given unit."""
    return ExecutionPlan(program=JOURNALCTL, args=("-u", service, *extra_args))


class ServiceOps(ABC):
    """Abstract process-supervision and log-query operations."""

    @abstractmethod
    def get_installed_tool_path(self, tool_name: str) -> str | None:
        """Return the path of an installed tool, or None if not on PATH."""
        ...

    def require_tool(self, tool_name: str) -> str:
        """Return the tool path.

        Raises:
            ToolingMissing: If the tool is not installed
        """
        path = self.get_installed_tool_path(tool_name)
        if path is None:
            raise ToolingMissing(
                tool_name, hint=f"{tool_name} is part of systemd; install it or run on a systemd host"
            )
        return path

    @abstractmethod
    def get_unit_state(self, unit: str) -> UnitState:
        """Return ActiveState and SubState for a unit."""
        ...

    @abstractmethod
    def is_active(self, unit: str) -> bool: ...

    @abstractmethod
    def is_enabled(self, unit: str) -> bool: ...

    @abstractmethod
    def get_unit_status(self, unit: str) -> str | None:
        """Return human-readable status text, or None if the unit does not exist."""
        ...

    @abstractmethod
    def has_timer(self, timer: str) -> bool: ...

    @abstractmethod
    def list_timers(self, timer: str | None = None) -> str:
        """Return the timer listing, optionally restricted to one timer."""
        ...

    @abstractmethod
    def get_journal(self, unit: str, lines: int) -> str:
        """Return the last `lines` journal lines for a unit."""
        ...

    def build_journal_plan(self, unit: str, extra_args: Sequence[str]) -> ExecutionPlan:
        """Plan for handing the terminal over to journalctl.

        Raises:
            ToolingMissing: If journalctl is not installed
        """
        self.require_tool(JOURNALCTL)
        return journal_plan(unit, extra_args)


class RealServiceOps(ServiceOps):
    """Production implementation using systemctl and journalctl."""

    def get_installed_tool_path(self, tool_name: str) -> str | None:
        return shutil.which(tool_name)

    def _systemctl(self, args: list[str], operation: str):
        self.require_tool(SYSTEMCTL)
        cmd = [SYSTEMCTL, *args]
        logger.debug("Running: %s", cmd)
        return run_subprocess_with_context(cmd, operation, check=False)

    def get_unit_state(self, unit: str) -> UnitState:
        result = self._systemctl(
            ["show", unit, "--property=ActiveState", "--property=SubState"],
            f"query state of {unit}",
        )
        if result.returncode != 0:
            return UNKNOWN_STATE

        values: dict[str, str] = {}
        for line in result.stdout.splitlines():
            key, sep, value = line.partition("=")
            if sep:
                values[key.strip()] = value.strip()

        return UnitState(
            active_state=values.get("ActiveState") or "unknown",
            sub_state=values.get("SubState") or "unknown",
        )

    def is_active(self, unit: str) -> bool:
        result = self._systemctl(["is-active", "--quiet", unit], f"check if {unit} is active")
        return result.returncode == 0

    def is_enabled(self, unit: str) -> bool:
        result = self._systemctl(["is-enabled", "--quiet", unit], f"check if {unit} is enabled")
        return result.returncode == 0

    def get_unit_status(self, unit: str) -> str | None:
        result = self._systemctl(["status", unit, "--no-pager"], f"get status of {unit}")
        if result.returncode == _UNIT_NOT_FOUND:
            return None
        return result.stdout

    def has_timer(self, timer: str) -> bool:
        result = self._systemctl(["list-timers", "--all", "--no-pager"], "list timers")
        return timer in result.stdout

    def list_timers(self, timer: str | None = None) -> str:
        args = ["list-timers", "--all", "--no-pager"]
        if timer is not None:
            args.insert(1, timer)
        return self._systemctl(args, "list timers").stdout

    def get_journal(self, unit: str, lines: int) -> str:
        self.require_tool(JOURNALCTL)
        cmd = [JOURNALCTL, "-u", unit, "-n", str(lines), "--no-pager"]
        logger.debug("Running: %s", cmd)
        return run_subprocess_with_context(cmd, f"read journal of {unit}", check=False).stdout
