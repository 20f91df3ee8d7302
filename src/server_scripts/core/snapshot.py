"""Snapshot I/O: serialize a Registry to manifest.yaml and load it back.

The snapshot is plain YAML with three top-level sections (metadata, categories,
scripts). Regeneration always rewrites the whole file through a temporary file
that is atomically renamed into place.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from server_scripts.core.errors import ConfigInvalid, ConfigMissing
from server_scripts.core.models import (
    NO_SERVICE,
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

SNAPSHOT_HEADER = """\
# Server Scripts Manifest - Auto-generated from script declarations
# DO NOT EDIT MANUALLY - Regenerate with: ssc generate

"""


def registry_to_dict(registry: Registry) -> dict[str, Any]:
    """Convert a Registry into the plain-data snapshot layout."""
    data: dict[str, Any] = {}

    if registry.metadata is not None:
        meta = registry.metadata
        data["metadata"] = {
            "version": meta.version,
            "generated": meta.generated,
            "generator": meta.generator,
            "total_scripts": meta.total_scripts,
            "with_frontmatter": meta.with_frontmatter,
        }

    data["categories"] = {
        name: {"description": info.description, "path": info.path}
        for name, info in registry.categories.items()
    }

    data["scripts"] = {
        record.name: {
            "path": record.path,
            "category": record.category,
            "deployment": record.deployment.value,
            "service": record.service if record.service is not None else NO_SERVICE,
            "status": record.status.value,
            "type": record.type.value,
            "requires_root": record.requires_root,
        }
        for record in registry.records()
    }
    return data


def dump_registry(registry: Registry) -> str:
    """Serialize a Registry to snapshot text."""
    body = yaml.safe_dump(
        registry_to_dict(registry),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    return SNAPSHOT_HEADER + body


def _require_mapping(value: Any, where: str, path: Path) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigInvalid(str(path), f"'{where}' must be a mapping")
    return value


def _as_str(value: Any) -> str:
    # YAML turns bare words like yes/no/on into booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_record(name: str, entry: Any, path: Path) -> ScriptRecord:
    fields = _require_mapping(entry, f"scripts.{name}", path)

    script_path = fields.get("path")
    if not script_path:
        raise ConfigInvalid(str(path), f"script '{name}' has no path")

    service_value = fields.get("service")
    return ScriptRecord(
        name=str(name),
        path=str(script_path),
        category=_as_str(fields.get("category") or ""),
        type=ScriptType.parse(_as_str(fields.get("type") or ScriptType.OTHER.value)),
        status=Status.parse(_as_str(fields.get("status") or Status.UNKNOWN.value)),
        deployment=Deployment.parse(_as_str(fields.get("deployment") or Deployment.OTHER.value)),
        service=parse_service(None if service_value is None else _as_str(service_value)),
        requires_root=parse_bool(_as_str(fields.get("requires_root", False))),
    )


def _parse_metadata(value: Any, path: Path) -> RegistryMetadata | None:
    if value is None:
        return None
    meta = _require_mapping(value, "metadata", path)
    try:
        return RegistryMetadata(
            version=str(meta.get("version", "")),
            generated=str(meta.get("generated", "")),
            generator=str(meta.get("generator", "")),
            total_scripts=int(meta.get("total_scripts", 0)),
            with_frontmatter=int(meta.get("with_frontmatter", 0)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigInvalid(str(path), f"invalid metadata: {e}") from e


def _parse_categories(value: Any, path: Path) -> dict[str, CategoryInfo]:
    if value is None:
        return {}
    raw = _require_mapping(value, "categories", path)
    categories: dict[str, CategoryInfo] = {}
    for name, entry in raw.items():
        info = _require_mapping(entry, f"categories.{name}", path)
        categories[str(name)] = CategoryInfo(
            description=str(info.get("description", "")),
            path=str(info.get("path", "")),
        )
    return categories


def parse_registry(text: str, path: Path) -> Registry:
    """Parse snapshot text into a Registry.

    Raises:
        ConfigInvalid: If the text is not a well-formed snapshot
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigInvalid(str(path), f"YAML syntax error: {e}") from e

    if data is None:
        raise ConfigInvalid(str(path), "file is empty")
    root = _require_mapping(data, "<root>", path)
    scripts_value = root.get("scripts")
    scripts_raw = {} if scripts_value is None else _require_mapping(scripts_value, "scripts", path)

    scripts = {
        str(name): _parse_record(str(name), entry, path) for name, entry in scripts_raw.items()
    }
    return Registry(
        scripts=scripts,
        categories=_parse_categories(root.get("categories"), path),
        metadata=_parse_metadata(root.get("metadata"), path),
    )


def load_registry(manifest_path: Path) -> Registry:
    """Load the Registry from a snapshot file.

    Raises:
        ConfigMissing: If the snapshot does not exist
        ConfigInvalid: If the snapshot is unreadable or not well-formed
    """
    if not manifest_path.is_file():
        raise ConfigMissing(str(manifest_path))

    logger.debug("Loading registry from %s", manifest_path)
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigInvalid(str(manifest_path), f"not valid UTF-8: {e.reason}") from e
    except OSError as e:
        raise ConfigInvalid(
            str(manifest_path),
            f"cannot read file: {e.strerror or e}",
            hint="Check the file permissions, or regenerate it with: ssc generate",
        ) from e
    registry = parse_registry(text, manifest_path)
    logger.debug("Loaded %d scripts", len(registry))
    return registry


def write_snapshot(manifest_path: Path, registry: Registry) -> None:
    """Write the snapshot atomically.

    The content goes to a temporary file next to the target, which is renamed
    over the target once fully written. The temporary file is removed if
    anything fails before the rename.
    """
    content = dump_registry(registry)
    manifest_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{manifest_path.name}.", suffix=".tmp", dir=str(manifest_path.parent)
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(manifest_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote snapshot with %d scripts to %s", len(registry), manifest_path)
