"""Registry data model: script records, enums and the in-memory registry."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum


class Status(Enum):
    """Lifecycle status. Only DEPRECATED affects execution policy."""

    ACTIVE = "active"
    DEPRECATED = "deprecated"
    DEVELOPMENT = "development"
    EXPERIMENTAL = "experimental"
    PRODUCTION = "production"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "Status":
        """Map a raw declaration value to a Status, falling back to UNKNOWN."""
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


class Tier(Enum):
    """Four-level classification used for default visibility and colouring."""

    INTERACTIVE = "interactive"
    ONE_TIME = "one-time"
    BACKGROUND = "background"
    INTERNAL = "internal"


class ScriptType(Enum):
    """Script type tag. Unrecognised values become OTHER."""

    ADMIN = "admin"
    CHECK = "check"
    MONITORING = "monitoring"
    MAINTENANCE = "maintenance"
    SETUP = "setup"
    AUTOMATION = "automation"
    DEPLOYMENT = "deployment"
    MIGRATION = "migration"
    BACKUP = "backup"
    DAEMON = "daemon"
    LIBRARY = "library"
    HELPER = "helper"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "ScriptType":
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.OTHER

    @property
    def tier(self) -> Tier:
        return _TYPE_TIERS[self]


_TYPE_TIERS: dict[ScriptType, Tier] = {
    ScriptType.ADMIN: Tier.INTERACTIVE,
    ScriptType.CHECK: Tier.INTERACTIVE,
    ScriptType.MONITORING: Tier.INTERACTIVE,
    ScriptType.MAINTENANCE: Tier.INTERACTIVE,
    ScriptType.OTHER: Tier.INTERACTIVE,
    ScriptType.SETUP: Tier.ONE_TIME,
    ScriptType.AUTOMATION: Tier.ONE_TIME,
    ScriptType.DEPLOYMENT: Tier.ONE_TIME,
    ScriptType.MIGRATION: Tier.ONE_TIME,
    ScriptType.BACKUP: Tier.BACKGROUND,
    ScriptType.DAEMON: Tier.BACKGROUND,
    ScriptType.LIBRARY: Tier.INTERNAL,
    ScriptType.HELPER: Tier.INTERNAL,
}


class Deployment(Enum):
    """How a script is deployed. Informational only."""

    MANUAL = "manual"
    SCHEDULED = "scheduled"
    AUTOMATED = "automated"
    SYSTEMD_TIMER = "systemd-timer"
    TRIGGERED = "triggered"
    CLI_TOOL = "cli-tool"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "Deployment":
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.OTHER


# Serialized form of "no associated service"
NO_SERVICE = "none"


def parse_service(value: str | None) -> str | None:
    """Normalize a service reference; the sentinel values mean no service."""
    if value is None:
        return None
    stripped = value.strip()
    if stripped.lower() in ("", NO_SERVICE, "null", "~"):
        return None
    return stripped


def parse_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() in ("true", "yes", "1", "on")


@dataclass(frozen=True)
class ScriptRecord:
    """One discovered script."""

    name: str
    path: str  # Relative to the repository root
    category: str
    type: ScriptType = ScriptType.ADMIN
    status: Status = Status.ACTIVE
    deployment: Deployment = Deployment.MANUAL
    service: str | None = None
    requires_root: bool = False

    @property
    def tier(self) -> Tier:
        return self.type.tier

    @property
    def has_service(self) -> bool:
        return self.service is not None


@dataclass(frozen=True)
class CategoryInfo:
    """Entry of the category dictionary."""

    description: str
    path: str


@dataclass(frozen=True)
class RegistryMetadata:
    """Generation metadata stored in the snapshot header."""

    version: str
    generated: str
    generator: str
    total_scripts: int
    with_frontmatter: int


@dataclass(frozen=True)
class Registry(Mapping[str, ScriptRecord]):
    """Read-only mapping of script name to record.

    Iteration yields names in lexical order regardless of insertion order.
    """

    scripts: Mapping[str, ScriptRecord]
    categories: Mapping[str, CategoryInfo] = field(default_factory=dict)
    metadata: RegistryMetadata | None = None

    def __getitem__(self, name: str) -> ScriptRecord:
        return self.scripts[name]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.scripts))

    def __len__(self) -> int:
        return len(self.scripts)

    def __contains__(self, name: object) -> bool:
        return name in self.scripts

    def records(self) -> list[ScriptRecord]:
        """All records sorted lexically by name."""
        return [self.scripts[name] for name in sorted(self.scripts)]

    def services(self) -> list[str]:
        """Unique service names referenced by any record, sorted."""
        return sorted({r.service for r in self.scripts.values() if r.service is not None})
