"""Repository configuration stored in `.ssc/config.toml`.

Example config:
  manifest = "manifest.yaml"
  scan_roots = ["scripts", "examples/demo-scripts"]
  elevation_command = "sudo"

  [categories.operations]
  description = "Maintenance, Validation & Backup"
  path = "scripts/operations/"

Every key is optional; missing keys take the defaults below. The file is read
with tomllib and edited with tomlkit so that `ssc config set` keeps comments
and formatting intact.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from server_scripts.core.builder import (
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_EXCLUDED_FILES,
    DEFAULT_EXTENSIONS,
    ScanPolicy,
)
from server_scripts.core.errors import ConfigInvalid, UnknownConfigKey
from server_scripts.core.models import CategoryInfo
from server_scripts.core.resolver import DEFAULT_ELEVATION_COMMAND

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".ssc"
CONFIG_FILE_NAME = "config.toml"

DEFAULT_MANIFEST = "manifest.yaml"
DEFAULT_SCAN_ROOTS = ("scripts", "examples/demo-scripts")
DEFAULT_CATEGORIES: dict[str, CategoryInfo] = {
    "operations": CategoryInfo(
        description="Maintenance, Validation & Backup", path="scripts/operations/"
    ),
    "monitoring": CategoryInfo(
        description="Health Check & Monitoring Scripts", path="scripts/monitoring/"
    ),
    "setup": CategoryInfo(description="Installation & Setup Scripts", path="scripts/setup/"),
}

STRING_KEYS = ("manifest", "elevation_command")
LIST_KEYS = ("scan_roots", "extensions", "excluded_dirs", "excluded_files")
CATEGORY_FIELDS = ("description", "path")

_CONFIG_HINT = "Fix the syntax or remove the file to use defaults"


@dataclass(frozen=True)
class SscConfig:
    """Effective configuration for one repository."""

    repo_root: Path
    manifest: str = DEFAULT_MANIFEST
    scan_roots: tuple[str, ...] = DEFAULT_SCAN_ROOTS
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    excluded_dirs: tuple[str, ...] = DEFAULT_EXCLUDED_DIRS
    excluded_files: tuple[str, ...] = DEFAULT_EXCLUDED_FILES
    elevation_command: str = DEFAULT_ELEVATION_COMMAND
    categories: dict[str, CategoryInfo] = field(default_factory=lambda: dict(DEFAULT_CATEGORIES))

    @property
    def manifest_path(self) -> Path:
        return self.repo_root / self.manifest

    @property
    def config_path(self) -> Path:
        return config_path(self.repo_root)

    @property
    def scan_policy(self) -> ScanPolicy:
        return ScanPolicy(
            extensions=frozenset(self.extensions),
            excluded_dirs=frozenset(self.excluded_dirs),
            excluded_files=frozenset(self.excluded_files),
        )


def config_path(repo_root: Path) -> Path:
    return repo_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _expect_str(data: dict[str, Any], key: str, default: str, path: Path) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigInvalid(str(path), f"'{key}' must be a non-empty string", hint=_CONFIG_HINT)
    return value


def _expect_str_list(
    data: dict[str, Any], key: str, default: tuple[str, ...], path: Path
) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigInvalid(str(path), f"'{key}' must be a list of strings", hint=_CONFIG_HINT)
    return tuple(value)


def _parse_categories(data: dict[str, Any], path: Path) -> dict[str, CategoryInfo]:
    raw = data.get("categories")
    if raw is None:
        return dict(DEFAULT_CATEGORIES)
    if not isinstance(raw, dict):
        raise ConfigInvalid(str(path), "'categories' must be a table", hint=_CONFIG_HINT)

    categories: dict[str, CategoryInfo] = {}
    for name, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigInvalid(
                str(path), f"'categories.{name}' must be a table", hint=_CONFIG_HINT
            )
        categories[name] = CategoryInfo(
            description=str(entry.get("description", "")),
            path=str(entry.get("path", "")),
        )
    return categories


def load_config(repo_root: Path) -> SscConfig:
    """Load `.ssc/config.toml` under repo_root if present; otherwise return defaults.

    Raises:
        ConfigInvalid: If the file is not valid TOML or a value has the wrong type
    """
    cfg_path = config_path(repo_root)
    if not cfg_path.exists():
        logger.debug("No config at %s, using defaults", cfg_path)
        return SscConfig(repo_root=repo_root)

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigInvalid(str(cfg_path), f"TOML syntax error: {e}", hint=_CONFIG_HINT) from e
    except UnicodeDecodeError as e:
        raise ConfigInvalid(str(cfg_path), f"not valid UTF-8: {e.reason}", hint=_CONFIG_HINT) from e
    except OSError as e:
        raise ConfigInvalid(
            str(cfg_path), f"cannot read file: {e.strerror or e}", hint=_CONFIG_HINT
        ) from e

    logger.debug("Loaded config from %s", cfg_path)
    return SscConfig(
        repo_root=repo_root,
        manifest=_expect_str(data, "manifest", DEFAULT_MANIFEST, cfg_path),
        scan_roots=_expect_str_list(data, "scan_roots", DEFAULT_SCAN_ROOTS, cfg_path),
        extensions=_expect_str_list(data, "extensions", DEFAULT_EXTENSIONS, cfg_path),
        excluded_dirs=_expect_str_list(data, "excluded_dirs", DEFAULT_EXCLUDED_DIRS, cfg_path),
        excluded_files=_expect_str_list(data, "excluded_files", DEFAULT_EXCLUDED_FILES, cfg_path),
        elevation_command=_expect_str(
            data, "elevation_command", DEFAULT_ELEVATION_COMMAND, cfg_path
        ),
        categories=_parse_categories(data, cfg_path),
    )


def config_items(config: SscConfig) -> list[tuple[str, str]]:
    """Flatten the configuration into (key, value) pairs for display.

    List values are rendered comma-separated, the same form `ssc config set`
    accepts.
    """
    items: list[tuple[str, str]] = [
        ("manifest", config.manifest),
        ("scan_roots", ",".join(config.scan_roots)),
        ("extensions", ",".join(config.extensions)),
        ("excluded_dirs", ",".join(config.excluded_dirs)),
        ("excluded_files", ",".join(config.excluded_files)),
        ("elevation_command", config.elevation_command),
    ]
    for name, info in config.categories.items():
        items.append((f"categories.{name}.description", info.description))
        items.append((f"categories.{name}.path", info.path))
    return items


def _split_category_key(key: str) -> tuple[str, str] | None:
    parts = key.split(".")
    if len(parts) != 3 or parts[0] != "categories" or parts[2] not in CATEGORY_FIELDS:
        return None
    if not parts[1]:
        return None
    return parts[1], parts[2]


def get_config_value(config: SscConfig, key: str) -> str:
    """Return the display value for key.

    Raises:
        UnknownConfigKey: If key names no setting
    """
    for item_key, value in config_items(config):
        if item_key == key:
            return value
    raise UnknownConfigKey(key)


def _parse_list_value(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def set_config_value(repo_root: Path, key: str, value: str) -> SscConfig:
    """Persist a single setting to `.ssc/config.toml` and return the reloaded config.

    Creates the config directory if it doesn't exist. Uses tomlkit to preserve
    TOML formatting and comments.

    Raises:
        UnknownConfigKey: If key names no setting
        ConfigInvalid: If the existing file or the new value is malformed
    """
    category_key = _split_category_key(key)
    if key not in STRING_KEYS and key not in LIST_KEYS and category_key is None:
        raise UnknownConfigKey(key)

    cfg_path = config_path(repo_root)
    if cfg_path.exists():
        try:
            doc = tomlkit.parse(cfg_path.read_text(encoding="utf-8"))
        except ParseError as e:
            raise ConfigInvalid(
                str(cfg_path), f"TOML syntax error: {e}", hint=_CONFIG_HINT
            ) from e
    else:
        doc = tomlkit.document()

    if key in STRING_KEYS:
        if not value:
            raise ConfigInvalid(str(cfg_path), f"'{key}' must be a non-empty string")
        doc[key] = value
    elif key in LIST_KEYS:
        doc[key] = _parse_list_value(value)
    else:
        assert category_key is not None
        name, field_name = category_key
        if "categories" not in doc:
            doc["categories"] = _default_categories_table()
        categories = doc["categories"]
        if name not in categories:  # type: ignore[operator]
            categories[name] = tomlkit.table()  # type: ignore[index]
        categories[name][field_name] = value  # type: ignore[index]

    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    logger.debug("Set %s in %s", key, cfg_path)

    return load_config(repo_root)


def _default_categories_table() -> Any:
    # Writing one category must not drop the built-in ones
    table = tomlkit.table(is_super_table=True)
    for name, info in DEFAULT_CATEGORIES.items():
        entry = tomlkit.table()
        entry["description"] = info.description
        entry["path"] = info.path
        table[name] = entry
    return table
