"""Registry builder: scan a script tree and produce a registry snapshot.

The scan policy (allowed extensions, excluded directory and file names) is
plain data injected into the builder. The builder selects the first existing
scan root, never merging several roots.
"""

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from server_scripts.core.clock import Clock
from server_scripts.core.declaration import MAX_SCAN_LINES, parse_declaration
from server_scripts.core.errors import NoScriptsFound, ScanRootMissing
from server_scripts.core.models import (
    CategoryInfo,
    Deployment,
    Registry,
    RegistryMetadata,
    ScriptRecord,
    ScriptType,
    Status,
    parse_bool,
    parse_service,
)

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.1.1"
GENERATOR = "ssc generate"

DEFAULT_EXTENSIONS = (".sh", ".py")
DEFAULT_EXCLUDED_DIRS = (".venv", "venv", "node_modules", "__pycache__", ".git")
DEFAULT_EXCLUDED_FILES = ("__init__.py",)

# Deprecated type values and their replacements
TYPE_MIGRATIONS: dict[str, ScriptType] = {
    "cli-tool": ScriptType.ADMIN,
}


@dataclass(frozen=True)
class ScanPolicy:
    """Which files under a scan root count as scripts."""

    extensions: frozenset[str] = frozenset(DEFAULT_EXTENSIONS)
    excluded_dirs: frozenset[str] = frozenset(DEFAULT_EXCLUDED_DIRS)
    excluded_files: frozenset[str] = frozenset(DEFAULT_EXCLUDED_FILES)

    def includes_dir(self, dir_name: str) -> bool:
        return dir_name not in self.excluded_dirs

    def includes_file(self, file_name: str) -> bool:
        if file_name in self.excluded_files:
            return False
        return Path(file_name).suffix in self.extensions


@dataclass(frozen=True)
class BuildWarning:
    """Non-fatal diagnostic emitted while building."""

    path: str
    message: str
    hints: tuple[str, ...] = ()


@dataclass(frozen=True)
class BuildResult:
    """Outcome of a scan: the registry plus what was found along the way."""

    scan_root: Path
    candidates: list[Path]
    registry: Registry
    warnings: list[BuildWarning] = field(default_factory=list)

    @property
    def script_count(self) -> int:
        return len(self.registry)

    @property
    def with_declaration_count(self) -> int:
        if self.registry.metadata is None:
            return 0
        return self.registry.metadata.with_frontmatter


def select_scan_root(repo_root: Path, scan_roots: Sequence[str]) -> Path:
    """Return the first configured scan root that exists on disk.

    Raises:
        ScanRootMissing: If none of the configured roots is a directory
    """
    for root in scan_roots:
        candidate = repo_root / root
        if candidate.is_dir():
            logger.debug("Selected scan root %s", candidate)
            return candidate
    raise ScanRootMissing(list(scan_roots))


def find_candidates(scan_root: Path, policy: ScanPolicy) -> list[Path]:
    """Recursively enumerate script files under scan_root, sorted by full path."""
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(scan_root):
        # Prune excluded directories in place so os.walk skips them
        dirnames[:] = [d for d in dirnames if policy.includes_dir(d)]
        for file_name in filenames:
            if not policy.includes_file(file_name):
                continue
            path = Path(dirpath) / file_name
            # Regular files only; symlinked scripts are skipped
            if path.is_file() and not path.is_symlink():
                found.append(path)
    return sorted(found, key=str)


def derive_name(path: Path) -> str:
    return path.stem


def derive_category(path: Path, scan_root: Path) -> str:
    """First path segment beneath scan_root; the root's own name for top-level files."""
    relative = path.relative_to(scan_root)
    if len(relative.parts) > 1:
        return relative.parts[0]
    return scan_root.name


def _read_head(path: Path) -> str:
    with path.open(encoding="utf-8", errors="replace") as f:
        lines = []
        for _ in range(MAX_SCAN_LINES):
            line = f.readline()
            if not line:
                break
            lines.append(line)
    return "".join(lines)


def build_record(
    path: Path, *, repo_root: Path, scan_root: Path
) -> tuple[ScriptRecord, bool, list[BuildWarning]]:
    """Build a single record from a script file.

    Returns:
        (record, has_declaration, warnings)
    """
    relative_path = path.relative_to(repo_root).as_posix()
    name = derive_name(path)
    category = derive_category(path, scan_root)
    warnings: list[BuildWarning] = []

    try:
        head = _read_head(path)
    except OSError as e:
        logger.debug("Could not read %s", relative_path, exc_info=True)
        warnings.append(
            BuildWarning(
                path=relative_path,
                message=f"Cannot read {relative_path}: {e.strerror or e}; using defaults",
                hints=("Check the file permissions, then re-run: ssc generate",),
            )
        )
        return ScriptRecord(name=name, path=relative_path, category=category), False, warnings

    declaration = parse_declaration(head)

    if declaration is None:
        logger.debug("No declaration in %s, using defaults", relative_path)
        return ScriptRecord(name=name, path=relative_path, category=category), False, warnings

    raw_type = declaration.value_or("type", ScriptType.ADMIN.value)
    migrated = TYPE_MIGRATIONS.get(raw_type.strip().lower())
    if migrated is not None:
        warnings.append(
            BuildWarning(
                path=relative_path,
                message=(
                    f"Script {path.name}: type '{raw_type}' is deprecated, "
                    f"auto-migrating to '{migrated.value}'"
                ),
                hints=(
                    f"Update declaration: type: {migrated.value}",
                    f"Or use deployment field: deployment: {raw_type}",
                ),
            )
        )
        script_type = migrated
    else:
        script_type = ScriptType.parse(raw_type)

    record = ScriptRecord(
        name=name,
        path=relative_path,
        category=category,
        type=script_type,
        status=Status.parse(declaration.value_or("status", Status.ACTIVE.value)),
        deployment=Deployment.parse(declaration.value_or("deployment", Deployment.MANUAL.value)),
        service=parse_service(declaration.value_or("service", "none")),
        requires_root=parse_bool(declaration.value_or("requires_root", "false")),
    )
    return record, True, warnings


class RegistryBuilder:
    """Scans the first existing scan root and builds a Registry."""

    def __init__(
        self,
        *,
        repo_root: Path,
        scan_roots: Sequence[str],
        policy: ScanPolicy,
        categories: dict[str, CategoryInfo],
        clock: Clock,
    ) -> None:
        self._repo_root = repo_root
        self._scan_roots = list(scan_roots)
        self._policy = policy
        self._categories = categories
        self._clock = clock

    def build(self) -> BuildResult:
        """Scan and build the registry.

        Raises:
            ScanRootMissing: If no configured scan root exists
            NoScriptsFound: If the selected root holds no candidate files
        """
        scan_root = select_scan_root(self._repo_root, self._scan_roots)
        candidates = find_candidates(scan_root, self._policy)
        if not candidates:
            raise NoScriptsFound(
                str(scan_root.relative_to(self._repo_root)), sorted(self._policy.extensions)
            )

        scripts: dict[str, ScriptRecord] = {}
        declared: dict[str, bool] = {}
        warnings: list[BuildWarning] = []

        for path in candidates:
            record, has_declaration, record_warnings = build_record(
                path, repo_root=self._repo_root, scan_root=scan_root
            )
            warnings.extend(record_warnings)

            previous = scripts.get(record.name)
            if previous is not None:
                warnings.append(
                    BuildWarning(
                        path=record.path,
                        message=(
                            f"Duplicate script name '{record.name}': "
                            f"{record.path} replaces {previous.path}"
                        ),
                    )
                )
            scripts[record.name] = record
            declared[record.name] = has_declaration

        metadata = RegistryMetadata(
            version=SNAPSHOT_VERSION,
            generated=self._clock.now().isoformat(timespec="seconds"),
            generator=GENERATOR,
            total_scripts=len(scripts),
            with_frontmatter=sum(1 for flag in declared.values() if flag),
        )
        logger.debug(
            "Built registry: %d scripts (%d with declaration) from %d files",
            metadata.total_scripts,
            metadata.with_frontmatter,
            len(candidates),
        )

        registry = Registry(
            scripts=scripts, categories=dict(self._categories), metadata=metadata
        )
        return BuildResult(
            scan_root=scan_root, candidates=candidates, registry=registry, warnings=warnings
        )
