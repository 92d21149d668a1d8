from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr), and file system side effects (bundles and
manifests).
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "assetpack" / "main.py"


def run_cli(args: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH to ensure the package
    is resolvable without being installed in site-packages.

    Args:
        args: List of command line arguments (excluding 'python' and script path).
        cwd: Optional working directory for the subprocess.

    Returns:
        subprocess.CompletedProcess: The result object containing returncode, stdout, and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8"
    )


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create a dummy project structure for E2E testing.

    Structure:
    /site
      /js
        app.js        (@root, requires widgets.js, jquery, app.css)
        widgets.js
      /css
        app.css
      /shared
        jquery.js
    """
    site = (tmp_path / "site").resolve()
    (site / "js").mkdir(parents=True)
    (site / "css").mkdir()
    (site / "shared").mkdir()

    (site / "js" / "app.js").write_text(
        "/**\n"
        " * @root\n"
        " * @requireRemote jquery.js\n"
        " * @require widgets.js\n"
        " * @requireStyle ../css/app.css\n"
        " */\n"
        "app();\n",
        encoding="utf-8",
    )
    (site / "js" / "widgets.js").write_text("widgets();\n", encoding="utf-8")
    (site / "css" / "app.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (site / "shared" / "jquery.js").write_text("jquery();\n", encoding="utf-8")

    return site


def test_cli_compile_folder_then_clear(sample_project: Path) -> None:
    """
    TC-01: Compile a folder, check artifacts, then clear them (Exit Code 0).
    """
    js_dir = sample_project / "js"

    result = run_cli(["compile-folders", str(sample_project), "-r", str(sample_project / "shared")])

    assert result.returncode == 0, f"CLI failed with stderr: {result.stderr}"
    assert "Successfully Compiled" in result.stdout

    bundle = (js_dir / "app.compiled.js").read_text(encoding="utf-8")
    assert bundle == "jquery();\nwidgets();\n" + (js_dir / "app.js").read_text(encoding="utf-8")

    manifest = (js_dir / "app.compiled.js.manifest").read_text(encoding="utf-8").splitlines()
    assert manifest == ["../shared/jquery.js", "widgets.js", "app.js"]
    assert (js_dir / "app.compiled.css.manifest").read_text(encoding="utf-8") == "../css/app.css\n"

    result = run_cli(["clear-folders", str(sample_project)])

    assert result.returncode == 0
    assert not (js_dir / "app.compiled.js").exists()
    assert not (js_dir / "app.compiled.css.manifest").exists()
    assert (js_dir / "app.js").exists()


def test_cli_resolve_files_json(sample_project: Path) -> None:
    """
    TC-02: Verify resolve-files prints a JSON array without writing anything.
    """
    root = sample_project / "js" / "app.js"

    result = run_cli(["resolve-files", "--json", str(root), "-r", str(sample_project / "shared")])

    assert result.returncode == 0, result.stderr
    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError:
        pytest.fail(f"Failed to decode JSON output: {result.stdout}")

    assert data == [
        str(sample_project / "css" / "app.css"),
        str(sample_project / "shared" / "jquery.js"),
        str(sample_project / "js" / "widgets.js"),
        str(root),
    ]
    assert not (sample_project / "js" / "app.compiled.js").exists()


def test_cli_reports_cycle(sample_project: Path) -> None:
    """
    TC-03: A circular dependency fails the root with exit code 1.
    """
    (sample_project / "js" / "widgets.js").write_text("// @require app.js\n", encoding="utf-8")

    result = run_cli(["compile-files", str(sample_project / "js" / "app.js"), "-r", str(sample_project / "shared")])

    assert result.returncode == 1
    assert "Circular dependency detected" in result.stderr
    assert not (sample_project / "js" / "app.compiled.js").exists()


def test_cli_handles_missing_input(tmp_path: Path) -> None:
    """
    TC-04: Verify CLI returns 1 when an input path does not exist.
    """
    result = run_cli(["compile-files", str(tmp_path / "ghost.js")])

    assert result.returncode == 1
    assert "resolved to nowhere" in result.stderr


def test_cli_usage_error(tmp_path: Path) -> None:
    """
    TC-05: Missing subcommand is a usage error.
    """
    result = run_cli([], cwd=tmp_path)

    assert result.returncode == 2
    assert "usage" in result.stderr.lower()


def test_cli_version() -> None:
    result = run_cli(["--version"])

    assert result.returncode == 0
    assert result.stdout.startswith("assetpack ")
