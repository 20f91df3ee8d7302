"""Tests for declaration block parsing."""

from server_scripts.core.declaration import (
    MAX_SCAN_LINES,
    FieldState,
    parse_declaration,
)


def test_parses_fields_between_sentinels() -> None:
    content = (
        "#!/bin/bash\n"
        "# ---\n"
        "# deployment: scheduled\n"
        "# service: none\n"
        "# status: active\n"
        "# type: backup\n"
        "# requires_root: true\n"
        "# ---\n"
        "echo hi\n"
    )

    declaration = parse_declaration(content)

    assert declaration is not None
    assert declaration.closed
    assert declaration.fields == {
        "deployment": "scheduled",
        "service": "none",
        "status": "active",
        "type": "backup",
        "requires_root": "true",
    }


def test_no_sentinel_returns_none() -> None:
    assert parse_declaration("#!/bin/bash\n# just a comment\necho hi\n") is None


def test_sentinel_beyond_scan_window_is_ignored() -> None:
    padding = "# filler\n" * MAX_SCAN_LINES
    content = padding + "# ---\n# type: backup\n# ---\n"

    assert parse_declaration(content) is None


def test_unclosed_block_keeps_collected_fields() -> None:
    content = "# ---\n# type: check\n# status: experimental\necho no closing line\n"

    declaration = parse_declaration(content)

    assert declaration is not None
    assert not declaration.closed
    assert declaration.fields == {"type": "check", "status": "experimental"}


def test_lines_after_closing_sentinel_are_ignored() -> None:
    content = "# ---\n# type: check\n# ---\n# status: deprecated\n"

    declaration = parse_declaration(content)

    assert declaration is not None
    assert "status" not in declaration.fields


def test_repeated_key_last_value_wins() -> None:
    content = "# ---\n# status: active\n# status: deprecated\n# ---\n"

    declaration = parse_declaration(content)

    assert declaration is not None
    assert declaration.fields["status"] == "deprecated"


def test_splits_on_first_colon_only() -> None:
    content = "# ---\n# service: backup@daily:01.service\n# ---\n"

    declaration = parse_declaration(content)

    assert declaration is not None
    assert declaration.fields["service"] == "backup@daily:01.service"


def test_blank_and_colonless_lines_are_skipped() -> None:
    content = "# ---\n#\n# just some words\n\n#type: helper\n# ---\n"

    declaration = parse_declaration(content)

    assert declaration is not None
    assert declaration.fields == {"type": "helper"}


def test_lookup_distinguishes_absent_empty_and_value() -> None:
    content = "# ---\n# service:\n# type: admin\n# ---\n"

    declaration = parse_declaration(content)

    assert declaration is not None
    assert declaration.lookup("status").state is FieldState.ABSENT
    assert declaration.lookup("service").state is FieldState.EMPTY
    found = declaration.lookup("type")
    assert found.state is FieldState.VALUE
    assert found.value == "admin"


def test_value_or_applies_default_for_absent_and_empty() -> None:
    content = "# ---\n# service:\n# ---\n"

    declaration = parse_declaration(content)

    assert declaration is not None
    assert declaration.value_or("service", "none") == "none"
    assert declaration.value_or("status", "active") == "active"
