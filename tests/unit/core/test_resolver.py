"""Tests for name resolution and execution policy."""

from pathlib import Path
from unittest.mock import patch

import pytest

from server_scripts.core.errors import (
    DeprecatedBlocked,
    FileMissing,
    InvalidName,
    NoServiceAssociated,
    NotFound,
)
from server_scripts.core.models import Status
from server_scripts.core.resolver import (
    is_valid_script_name,
    lookup,
    resolve,
    service_for,
)
from tests.test_utils.repo_builders import make_record, make_registry, write_script


@pytest.mark.parametrize(
    "name",
    ["backup-example", "health_check", "v1.2", "A-Z.0_9"],
)
def test_valid_names(name: str) -> None:
    assert is_valid_script_name(name)


@pytest.mark.parametrize(
    "name",
    ["", "rm -rf", "a;b", "$(whoami)", "../etc/passwd", "a/b", "name\n", "ünïcode"],
)
def test_invalid_names(name: str) -> None:
    assert not is_valid_script_name(name)


def test_invalid_name_rejected_before_file_access(tmp_path: Path) -> None:
    registry = make_registry(make_record("ok"))

    with patch("pathlib.Path.is_file") as mock_is_file:
        with pytest.raises(InvalidName):
            resolve(registry, "bad name;", repo_root=tmp_path)

    mock_is_file.assert_not_called()


def test_lookup_unknown_name_raises_not_found() -> None:
    with pytest.raises(NotFound) as exc_info:
        lookup(make_registry(make_record("a")), "missing")

    assert "ssc list --search missing" in (exc_info.value.hint or "")


def test_resolve_direct_plan_passes_args_verbatim(tmp_path: Path) -> None:
    record = make_record("tool")
    write_script(tmp_path, record.path)

    plan = resolve(
        make_registry(record), "tool", repo_root=tmp_path, args=["--flag", "two words", "-x"]
    )

    assert not plan.elevate
    assert plan.program == str((tmp_path / record.path).absolute())
    assert plan.args == ("--flag", "two words", "-x")
    assert plan.argv == [plan.program, "--flag", "two words", "-x"]
    assert not plan.deprecated_override


def test_resolve_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileMissing) as exc_info:
        resolve(make_registry(make_record("ghost")), "ghost", repo_root=tmp_path)

    assert exc_info.value.hint == "Manifest may be outdated - run: ssc generate"


def test_resolve_directory_is_not_a_script(tmp_path: Path) -> None:
    record = make_record("dir")
    (tmp_path / record.path).mkdir(parents=True)

    with pytest.raises(FileMissing):
        resolve(make_registry(record), "dir", repo_root=tmp_path)


def test_deprecated_blocked_without_force(tmp_path: Path) -> None:
    record = make_record("old", status=Status.DEPRECATED)
    write_script(tmp_path, record.path)

    with pytest.raises(DeprecatedBlocked):
        resolve(make_registry(record), "old", repo_root=tmp_path)


def test_deprecated_allowed_with_force(tmp_path: Path) -> None:
    record = make_record("old", status=Status.DEPRECATED)
    write_script(tmp_path, record.path)

    plan = resolve(make_registry(record), "old", repo_root=tmp_path, force=True)

    assert plan.deprecated_override


def test_root_script_elevated_when_unprivileged(tmp_path: Path) -> None:
    record = make_record("backup-example", requires_root=True)
    write_script(tmp_path, record.path)

    plan = resolve(make_registry(record), "backup-example", repo_root=tmp_path, args=["x"])

    assert plan.elevate
    assert plan.argv == ["sudo", plan.program, "x"]


def test_root_script_direct_when_privileged(tmp_path: Path) -> None:
    record = make_record("backup-example", requires_root=True)
    write_script(tmp_path, record.path)

    plan = resolve(make_registry(record), "backup-example", repo_root=tmp_path, privileged=True)

    assert not plan.elevate
    assert plan.argv == [plan.program]


def test_custom_elevation_command(tmp_path: Path) -> None:
    record = make_record("backup-example", requires_root=True)
    write_script(tmp_path, record.path)

    plan = resolve(
        make_registry(record), "backup-example", repo_root=tmp_path, elevation_command="doas"
    )

    assert plan.argv[0] == "doas"


def test_service_for() -> None:
    assert service_for(make_record("a", service="a.service")) == "a.service"
    with pytest.raises(NoServiceAssociated):
        service_for(make_record("b"))
