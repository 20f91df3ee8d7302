"""Tests for the registry data model."""

import pytest

from server_scripts.core.models import (
    Deployment,
    ScriptType,
    Status,
    Tier,
    parse_bool,
    parse_service,
)
from tests.test_utils.repo_builders import make_record, make_registry


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("active", Status.ACTIVE),
        ("DEPRECATED", Status.DEPRECATED),
        (" production ", Status.PRODUCTION),
        ("retired", Status.UNKNOWN),
        ("", Status.UNKNOWN),
    ],
)
def test_status_parse(raw: str, expected: Status) -> None:
    assert Status.parse(raw) is expected


def test_unrecognised_type_and_deployment_fall_back_to_other() -> None:
    assert ScriptType.parse("frobnicator") is ScriptType.OTHER
    assert Deployment.parse("cron") is Deployment.OTHER
    assert Deployment.parse("systemd-timer") is Deployment.SYSTEMD_TIMER


@pytest.mark.parametrize(
    ("script_type", "tier"),
    [
        (ScriptType.ADMIN, Tier.INTERACTIVE),
        (ScriptType.SETUP, Tier.ONE_TIME),
        (ScriptType.DAEMON, Tier.BACKGROUND),
        (ScriptType.LIBRARY, Tier.INTERNAL),
        (ScriptType.HELPER, Tier.INTERNAL),
    ],
)
def test_type_tiers(script_type: ScriptType, tier: Tier) -> None:
    assert script_type.tier is tier


def test_every_type_has_a_tier() -> None:
    for script_type in ScriptType:
        assert isinstance(script_type.tier, Tier)


def test_parse_service_sentinels() -> None:
    assert parse_service(None) is None
    assert parse_service("none") is None
    assert parse_service("None") is None
    assert parse_service("") is None
    assert parse_service("health-check.service") == "health-check.service"


def test_parse_bool() -> None:
    assert parse_bool("true")
    assert parse_bool("Yes")
    assert parse_bool(True)
    assert not parse_bool("false")
    assert not parse_bool("maybe")


def test_record_defaults() -> None:
    record = make_record("plain")

    assert record.type is ScriptType.ADMIN
    assert record.status is Status.ACTIVE
    assert record.deployment is Deployment.MANUAL
    assert record.service is None
    assert not record.requires_root
    assert not record.has_service


def test_registry_iterates_in_lexical_order() -> None:
    registry = make_registry(make_record("zeta"), make_record("Alpha"), make_record("beta"))

    # Case-sensitive ordering: uppercase sorts before lowercase
    assert list(registry) == ["Alpha", "beta", "zeta"]
    assert [r.name for r in registry.records()] == ["Alpha", "beta", "zeta"]


def test_registry_services_are_unique_and_sorted() -> None:
    registry = make_registry(
        make_record("a", service="web.service"),
        make_record("b", service="db.service"),
        make_record("c", service="web.service"),
        make_record("d"),
    )

    assert registry.services() == ["db.service", "web.service"]
