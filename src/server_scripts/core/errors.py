"""Error taxonomy for ssc operations.

Every user-facing failure is an SscError carrying a message and a remediation
hint. The CLI error boundary renders them without stack traces and exits 1;
the fatal and recoverable groupings below describe where each kind arises.

Fatal kinds (abort the whole invocation):
- ConfigMissing: snapshot file absent
- ConfigInvalid: snapshot or repository config malformed
- ToolingMissing: required external tool not installed

Recoverable kinds (abort only the current subcommand):
- InvalidName, NotFound, FileMissing, DeprecatedBlocked (resolution)
- NoServiceAssociated (status/logs on a script without a service)
- DispatchFailed (the exec call itself failed)

Builder kinds:
- ScanRootMissing, NoScriptsFound

Configuration kinds:
- UnknownConfigKey
"""


class SscError(Exception):
    """Base class for all well-known ssc failures."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ConfigMissing(SscError):
    """Snapshot file does not exist."""

    def __init__(self, manifest_path: str) -> None:
        super().__init__(
            f"Manifest not found: {manifest_path}",
            hint="Generate with: ssc generate",
        )
        self.manifest_path = manifest_path


class ConfigInvalid(SscError):
    """Snapshot or configuration file exists but is not well-formed."""

    def __init__(self, path: str, detail: str, hint: str | None = None) -> None:
        super().__init__(
            f"Invalid file {path}: {detail}",
            hint=hint or "The file is corrupt - regenerate it with: ssc generate",
        )
        self.path = path
        self.detail = detail


class ToolingMissing(SscError):
    """A required external tool is not installed."""

    def __init__(self, tool: str, hint: str | None = None) -> None:
        super().__init__(
            f"{tool} is required but not installed",
            hint=hint or f"Install {tool} and make sure it is on PATH",
        )
        self.tool = tool


class ResolutionError(SscError):
    """Base class for failures while resolving a script name."""


class InvalidName(ResolutionError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Invalid script name: {name}",
            hint="Allowed characters: a-z A-Z 0-9 . _ -",
        )
        self.name = name


class NotFound(ResolutionError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Script not found: {name}",
            hint=f"Use 'ssc list --search {name}' to find similar scripts",
        )
        self.name = name


class FileMissing(ResolutionError):
    def __init__(self, name: str, full_path: str) -> None:
        super().__init__(
            f"Script file not found: {full_path}",
            hint="Manifest may be outdated - run: ssc generate",
        )
        self.name = name
        self.full_path = full_path


class DeprecatedBlocked(ResolutionError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Script '{name}' is marked as DEPRECATED",
            hint="Use --force to run anyway",
        )
        self.name = name


class NoServiceAssociated(SscError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Script '{name}' has no associated service",
            hint="Only scripts with a 'service:' field can show status or logs",
        )
        self.name = name


class DispatchFailed(SscError):
    def __init__(self, program: str, detail: str) -> None:
        super().__init__(
            f"Failed to execute {program}: {detail}",
            hint="Check that the file exists and has its executable bit set (chmod +x)",
        )
        self.program = program


class ScanRootMissing(SscError):
    def __init__(self, scan_roots: list[str]) -> None:
        super().__init__(
            "No script directories found",
            hint=f"Expected one of: {', '.join(f'{root}/' for root in scan_roots)}",
        )
        self.scan_roots = scan_roots


class NoScriptsFound(SscError):
    def __init__(self, scan_dir: str, extensions: list[str]) -> None:
        super().__init__(
            f"No scripts found in {scan_dir}",
            hint=f"Add some {' or '.join(extensions)} files to the scripts directory",
        )
        self.scan_dir = scan_dir


class UnknownConfigKey(SscError):
    def __init__(self, key: str) -> None:
        super().__init__(
            f"Unknown configuration key: {key}",
            hint="Run 'ssc config list' to see available keys",
        )
        self.key = key
