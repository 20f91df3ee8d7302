"""Tests for `ssc validate`."""

from pathlib import Path

from click.testing import CliRunner

from server_scripts.cli.cli import cli
from server_scripts.core.context import SscContext
from server_scripts.core.models import Status
from tests.test_utils.repo_builders import make_record, write_manifest, write_script


def test_validate_all_paths_present(tmp_path: Path) -> None:
    write_manifest(tmp_path, make_record("a"), make_record("b"))
    runner = CliRunner()

    result = runner.invoke(cli, ["validate"], obj=SscContext.for_test(repo_root=tmp_path))

    assert result.exit_code == 0, result.output
    assert "YAML syntax valid" in result.output
    assert "All 2 script paths valid" in result.output


def test_validate_exit_code_counts_missing_files(tmp_path: Path) -> None:
    records = [make_record("a"), make_record("b"), make_record("c")]
    write_manifest(tmp_path, *records, create_files=False)
    write_script(tmp_path, records[0].path)
    runner = CliRunner()

    result = runner.invoke(cli, ["validate"], obj=SscContext.for_test(repo_root=tmp_path))

    assert result.exit_code == 2
    assert "Missing: scripts/operations/b.sh (b)" in result.output
    assert "Missing: scripts/operations/c.sh (c)" in result.output
    assert "2 missing files found" in result.output


def test_validate_warns_about_unknown_status(tmp_path: Path) -> None:
    write_manifest(tmp_path, make_record("a", status=Status.UNKNOWN), make_record("b"))
    runner = CliRunner()

    result = runner.invoke(cli, ["validate"], obj=SscContext.for_test(repo_root=tmp_path))

    assert result.exit_code == 0, result.output
    assert "1 scripts have unknown status (missing declaration)" in result.output


def test_validate_malformed_manifest(tmp_path: Path) -> None:
    (tmp_path / "manifest.yaml").write_text("scripts: [unclosed\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["validate"], obj=SscContext.for_test(repo_root=tmp_path))

    assert result.exit_code == 1
    assert "Error: Invalid file" in result.output
    assert "YAML syntax valid" not in result.output


def test_validate_missing_manifest(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["validate"], obj=SscContext.for_test(repo_root=tmp_path))

    assert result.exit_code == 1
    assert "Manifest not found" in result.output
