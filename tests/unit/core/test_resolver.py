from __future__ import annotations

"""
Unit tests for the Dependency Path Resolver.

Verifies local and remote-rooted anchoring, path normalization and
MissingFile diagnostics.
"""

from pathlib import Path

import pytest

from assetpack.core.resolver import candidate_path, resolve_reference
from assetpack.domain.config import PackagerConfig
from assetpack.domain.errors import ErrorKind, PackagerError
from assetpack.domain.models import DependencyKind, DependencyReference


def test_local_script_resolves_relative_to_referencing_file(project: Path, write_files, config):
    files = write_files({"app/main.js": "", "lib/util.js": ""})
    ref = DependencyReference(DependencyKind.SCRIPT, "../lib/util.js", line=1)

    resolved = resolve_reference(ref, str(files["app/main.js"]), config)

    assert resolved == str(files["lib/util.js"])
    assert ref.resolved_path == resolved


def test_stylesheet_resolves_relative_to_referencing_file(write_files, config):
    files = write_files({"app/main.js": "", "app/css/site.css": ""})
    ref = DependencyReference(DependencyKind.STYLESHEET, "./css/../css/site.css")

    assert resolve_reference(ref, str(files["app/main.js"]), config) == str(files["app/css/site.css"])


def test_remote_script_resolves_against_remote_base(project: Path, write_files, config):
    files = write_files({"app/deep/main.js": "", "shared/vendor/jquery.js": ""})

    plain = DependencyReference(DependencyKind.REMOTE_SCRIPT, "vendor/jquery.js")
    tokenized = DependencyReference(DependencyKind.REMOTE_SCRIPT, "@remote/vendor/jquery.js")

    expected = str(files["shared/vendor/jquery.js"])
    assert resolve_reference(plain, str(files["app/deep/main.js"]), config) == expected
    assert resolve_reference(tokenized, str(files["app/deep/main.js"]), config) == expected


def test_remote_base_change_only_affects_remote_references(project: Path):
    referencing = str(project / "app" / "main.js")
    local = DependencyReference(DependencyKind.SCRIPT, "util.js")
    style = DependencyReference(DependencyKind.STYLESHEET, "site.css")
    remote = DependencyReference(DependencyKind.REMOTE_SCRIPT, "@remote/lib.js")

    cfg_a = PackagerConfig(remote_base_path="/srv/a")
    cfg_b = PackagerConfig(remote_base_path="/srv/b")

    assert candidate_path(local, referencing, cfg_a) == candidate_path(local, referencing, cfg_b)
    assert candidate_path(style, referencing, cfg_a) == candidate_path(style, referencing, cfg_b)
    assert candidate_path(remote, referencing, cfg_a) == str(Path("/srv/a/lib.js"))
    assert candidate_path(remote, referencing, cfg_b) == str(Path("/srv/b/lib.js"))


def test_missing_target_raises_missing_file(write_files, config):
    files = write_files({"app/main.js": ""})
    ref = DependencyReference(DependencyKind.SCRIPT, "nope.js", line=7)

    with pytest.raises(PackagerError) as exc:
        resolve_reference(ref, str(files["app/main.js"]), config)

    err = exc.value
    assert err.kind is ErrorKind.MISSING_FILE
    assert err.details.raw_path == "nope.js"
    assert err.details.referenced_by == str(files["app/main.js"])
    assert err.details.line == 7
    assert "nope.js" in err.message
    assert "main.js" in err.message


def test_directory_target_is_not_a_file(project: Path, write_files, config):
    files = write_files({"app/main.js": "", "app/lib/keep.txt": ""})
    ref = DependencyReference(DependencyKind.SCRIPT, "lib")

    with pytest.raises(PackagerError) as exc:
        resolve_reference(ref, str(files["app/main.js"]), config)

    assert exc.value.kind is ErrorKind.MISSING_FILE
