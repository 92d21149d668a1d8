from __future__ import annotations

"""
Unit tests for the packager error taxonomy.
"""

import pytest

from assetpack.domain.errors import (
    ErrorKind,
    PackagerError,
    cannot_write_error,
    missing_file_error,
    parsing_error,
    recursion_error,
)


def test_missing_file_error_for_dependency():
    err = missing_file_error(
        "/app/lib/x.js",
        raw_path="lib/x.js",
        referenced_by="/app/main.js",
        line=4,
    )

    assert err.kind is ErrorKind.MISSING_FILE
    assert err.file_path == "/app/lib/x.js"
    assert "'lib/x.js' required by '/app/main.js' on line 4" in str(err)
    assert "/app/lib/x.js" in str(err)


def test_missing_file_error_for_root():
    err = missing_file_error("/app/main.js")

    assert str(err) == "File '/app/main.js' could not be found."
    assert err.details.referenced_by is None


def test_parsing_error_names_file_and_line():
    err = parsing_error("/app/main.js", 12, "Directive '@require' is missing its path argument.")

    assert err.kind is ErrorKind.PARSING
    assert err.details.line == 12
    assert str(err).startswith("Parsing error in '/app/main.js' on line 12:")


def test_recursion_error_lists_cycle():
    err = recursion_error(["/a.js", "/b.js", "/a.js"])

    assert err.kind is ErrorKind.RECURSION
    assert err.details.cycle == ("/a.js", "/b.js", "/a.js")
    assert err.file_path == "/a.js"
    assert str(err) == "Circular dependency detected: /a.js -> /b.js -> /a.js"


def test_cannot_write_error_keeps_cause():
    err = cannot_write_error("/out/main.compiled.js", PermissionError("denied"))

    assert err.kind is ErrorKind.CANNOT_WRITE
    assert err.details.cause == "denied"
    assert str(err) == "Cannot write '/out/main.compiled.js': denied"
    assert str(cannot_write_error("/out/x")) == "Cannot write '/out/x'."


def test_packager_error_is_a_single_catchable_type():
    with pytest.raises(PackagerError) as exc:
        raise parsing_error("/x.js", 1, "bad")

    assert "parsing" in repr(exc.value)
    assert ErrorKind("cannot_write") is ErrorKind.CANNOT_WRITE
