"""Tests for SscContext construction."""

from pathlib import Path
from unittest.mock import patch

import pytest

from server_scripts.core.clock import RealClock
from server_scripts.core.context import SscContext, create_context
from server_scripts.core.errors import ConfigInvalid, ConfigMissing
from server_scripts.core.executor import RealExecutor
from server_scripts.core.service_ops import RealServiceOps
from tests.fakes.executor import FakeExecutor
from tests.test_utils.paths import sentinel_path
from tests.test_utils.repo_builders import make_record, write_manifest


def test_for_test_uses_fakes_and_sentinel_root() -> None:
    ctx = SscContext.for_test()

    assert ctx.repo_root == sentinel_path()
    assert ctx.cwd == sentinel_path()
    assert isinstance(ctx.executor, FakeExecutor)
    assert not ctx.privileged


def test_load_registry_reads_configured_manifest(tmp_path: Path) -> None:
    write_manifest(tmp_path, make_record("a"), make_record("b"))

    ctx = SscContext.for_test(repo_root=tmp_path)

    assert list(ctx.load_registry()) == ["a", "b"]


def test_load_registry_missing_manifest(tmp_path: Path) -> None:
    ctx = SscContext.for_test(repo_root=tmp_path)

    with pytest.raises(ConfigMissing):
        ctx.load_registry()


def test_create_context_wires_real_implementations(tmp_path: Path) -> None:
    with (
        patch("server_scripts.core.context.Path.cwd", return_value=tmp_path),
        patch("server_scripts.core.context.discover_repo_root", return_value=tmp_path),
        patch("server_scripts.core.context.os.geteuid", return_value=0),
    ):
        ctx = create_context(debug=True)

    assert ctx.repo_root == tmp_path
    assert ctx.cwd == tmp_path
    assert isinstance(ctx.executor, RealExecutor)
    assert isinstance(ctx.service_ops, RealServiceOps)
    assert isinstance(ctx.clock, RealClock)
    assert ctx.privileged
    assert ctx.debug


def test_create_context_rejects_malformed_config(tmp_path: Path) -> None:
    (tmp_path / ".ssc").mkdir()
    (tmp_path / ".ssc" / "config.toml").write_text("not = = toml\n", encoding="utf-8")

    with (
        patch("server_scripts.core.context.Path.cwd", return_value=tmp_path),
        patch("server_scripts.core.context.discover_repo_root", return_value=tmp_path),
    ):
        with pytest.raises(ConfigInvalid):
            create_context()
