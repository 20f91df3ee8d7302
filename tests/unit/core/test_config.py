"""Tests for repository configuration loading and editing."""

from pathlib import Path

import pytest

from server_scripts.core.config import (
    DEFAULT_CATEGORIES,
    DEFAULT_SCAN_ROOTS,
    config_items,
    config_path,
    get_config_value,
    load_config,
    set_config_value,
)
from server_scripts.core.errors import ConfigInvalid, UnknownConfigKey
from server_scripts.core.models import CategoryInfo


def _write_config(repo_root: Path, text: str) -> Path:
    path = config_path(repo_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.repo_root == tmp_path
    assert config.manifest_path == tmp_path / "manifest.yaml"
    assert config.scan_roots == DEFAULT_SCAN_ROOTS
    assert config.elevation_command == "sudo"
    assert config.categories == DEFAULT_CATEGORIES
    assert ".sh" in config.scan_policy.extensions
    assert ".git" in config.scan_policy.excluded_dirs


def test_loads_values_from_toml(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        'manifest = "registry/manifest.yaml"\n'
        'scan_roots = ["ops"]\n'
        'extensions = [".sh"]\n'
        'elevation_command = "doas"\n'
        "\n"
        "[categories.ops]\n"
        'description = "Operations"\n'
        'path = "ops/"\n',
    )

    config = load_config(tmp_path)

    assert config.manifest_path == tmp_path / "registry" / "manifest.yaml"
    assert config.scan_roots == ("ops",)
    assert config.scan_policy.extensions == frozenset({".sh"})
    assert config.elevation_command == "doas"
    assert config.categories == {"ops": CategoryInfo(description="Operations", path="ops/")}


def test_default_category_descriptions() -> None:
    assert DEFAULT_CATEGORIES["operations"].description == "Maintenance, Validation & Backup"
    assert DEFAULT_CATEGORIES["monitoring"].description == "Health Check & Monitoring Scripts"
    assert DEFAULT_CATEGORIES["setup"].description == "Installation & Setup Scripts"


def test_invalid_toml_raises_config_invalid(tmp_path: Path) -> None:
    _write_config(tmp_path, "manifest = \n")

    with pytest.raises(ConfigInvalid):
        load_config(tmp_path)


def test_non_utf8_config_raises_config_invalid(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "")
    path.write_bytes(b'manifest = "\xff\xfe.yaml"\n')

    with pytest.raises(ConfigInvalid, match="not valid UTF-8"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "text",
    [
        "manifest = 42\n",
        'scan_roots = "scripts"\n',
        "extensions = [1, 2]\n",
        'categories = "nope"\n',
        "[categories]\nops = 3\n",
    ],
)
def test_wrong_types_raise_config_invalid(tmp_path: Path, text: str) -> None:
    _write_config(tmp_path, text)

    with pytest.raises(ConfigInvalid):
        load_config(tmp_path)


def test_config_items_and_get(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    items = dict(config_items(config))

    assert items["scan_roots"] == "scripts,examples/demo-scripts"
    assert items["categories.operations.path"] == "scripts/operations/"
    assert get_config_value(config, "manifest") == "manifest.yaml"


def test_get_unknown_key(tmp_path: Path) -> None:
    with pytest.raises(UnknownConfigKey):
        get_config_value(load_config(tmp_path), "nonsense")


def test_set_creates_config_file(tmp_path: Path) -> None:
    updated = set_config_value(tmp_path, "elevation_command", "doas")

    assert updated.elevation_command == "doas"
    assert config_path(tmp_path).exists()
    assert load_config(tmp_path).elevation_command == "doas"


def test_set_list_value_splits_on_commas(tmp_path: Path) -> None:
    updated = set_config_value(tmp_path, "scan_roots", "ops, tools ,")

    assert updated.scan_roots == ("ops", "tools")


def test_set_preserves_comments(tmp_path: Path) -> None:
    path = _write_config(tmp_path, '# keep me\nmanifest = "manifest.yaml"\n')

    set_config_value(tmp_path, "manifest", "other.yaml")

    text = path.read_text(encoding="utf-8")
    assert "# keep me" in text
    assert 'manifest = "other.yaml"' in text


def test_set_category_field_keeps_default_categories(tmp_path: Path) -> None:
    updated = set_config_value(tmp_path, "categories.backup.description", "Backups")

    assert updated.categories["backup"].description == "Backups"
    assert set(DEFAULT_CATEGORIES) <= set(updated.categories)


def test_set_unknown_key(tmp_path: Path) -> None:
    with pytest.raises(UnknownConfigKey):
        set_config_value(tmp_path, "categories.ops.colour", "red")

    assert not config_path(tmp_path).exists()
