"""Resolution and policy engine.

Turns a user-supplied script name into an ExecutionPlan, or raises a
ResolutionError. Steps, in order:

1. NameCheck: the name must match SCRIPT_NAME_PATTERN. This is the only
   injection-prevention boundary, so it runs before any lookup or file access.
2. Lookup: the name must exist in the registry.
3. FileCheck: the recorded path must be a regular file under repo_root.
4. StatusGate: deprecated scripts need an explicit force flag.
5. PrivilegeDecision: root-requiring scripts are wrapped with the elevation
   command unless the process is already privileged.
6. Emit: program, verbatim args, elevation flag.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from server_scripts.core.errors import (
    DeprecatedBlocked,
    FileMissing,
    InvalidName,
    NoServiceAssociated,
    NotFound,
)
from server_scripts.core.models import ScriptRecord, Status

logger = logging.getLogger(__name__)

SCRIPT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

DEFAULT_ELEVATION_COMMAND = "sudo"


@dataclass(frozen=True)
class ExecutionPlan:
    """Everything needed to hand the process over to a target program."""

    program: str
    args: tuple[str, ...]
    elevate: bool = False
    elevation_command: str = DEFAULT_ELEVATION_COMMAND
    script_name: str | None = None
    deprecated_override: bool = False

    @property
    def argv(self) -> list[str]:
        """Full argument vector, starting with the executable to look up."""
        if self.elevate:
            return [self.elevation_command, self.program, *self.args]
        return [self.program, *self.args]


def is_valid_script_name(name: str) -> bool:
    return SCRIPT_NAME_PATTERN.fullmatch(name) is not None


def validate_script_name(name: str) -> str:
    """Return name unchanged if it is safe to use.

    Raises:
        InvalidName: If name contains anything outside [A-Za-z0-9._-]
    """
    if not is_valid_script_name(name):
        logger.debug("Rejected script name %r", name)
        raise InvalidName(name)
    return name


def lookup(registry: Mapping[str, ScriptRecord], name: str) -> ScriptRecord:
    """Validate name and fetch its record without touching the file system.

    Raises:
        InvalidName: If name fails validation
        NotFound: If name is not registered
    """
    validate_script_name(name)
    if name not in registry:
        raise NotFound(name)
    return registry[name]


def resolve(
    registry: Mapping[str, ScriptRecord],
    name: str,
    *,
    repo_root: Path,
    args: Sequence[str] = (),
    force: bool = False,
    privileged: bool = False,
    elevation_command: str = DEFAULT_ELEVATION_COMMAND,
) -> ExecutionPlan:
    """Resolve name to an ExecutionPlan.

    Args:
        registry: Loaded registry
        name: User-supplied script name
        repo_root: Root that record paths are relative to
        args: Trailing CLI arguments, passed through verbatim
        force: Allow deprecated scripts
        privileged: Whether the current process already runs as root
        elevation_command: Privilege-escalation front-end (default: sudo)

    Raises:
        InvalidName, NotFound, FileMissing, DeprecatedBlocked
    """
    record = lookup(registry, name)

    full_path = repo_root / record.path
    if not full_path.is_file():
        raise FileMissing(name, str(full_path))

    deprecated_override = False
    if record.status is Status.DEPRECATED:
        if not force:
            raise DeprecatedBlocked(name)
        logger.debug("Running deprecated script %s with --force", name)
        deprecated_override = True

    elevate = record.requires_root and not privileged
    logger.debug(
        "Resolved %s -> %s (requires_root=%s, privileged=%s, elevate=%s)",
        name,
        full_path,
        record.requires_root,
        privileged,
        elevate,
    )

    return ExecutionPlan(
        program=str(full_path.absolute()),
        args=tuple(args),
        elevate=elevate,
        elevation_command=elevation_command,
        script_name=name,
        deprecated_override=deprecated_override,
    )


def service_for(record: ScriptRecord) -> str:
    """Return the service unit associated with record.

    Raises:
        NoServiceAssociated: If the record has no service
    """
    if record.service is None:
        raise NoServiceAssociated(record.name)
    return record.service
