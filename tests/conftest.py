from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A small project builder writing annotated sources to a temp folder.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from assetpack.domain.config import PackagerConfig  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Canonical root folder for a test project (symlinks resolved)."""
    root = (tmp_path / "project")
    root.mkdir()
    return root.resolve()


@pytest.fixture
def write_files(project: Path) -> Callable[[Dict[str, str]], Dict[str, Path]]:
    """
    Return a helper writing {relative path: content} into the project.

    Returns:
        Callable: The helper; it returns {relative path: absolute Path}.
    """
    def _write(files: Dict[str, str]) -> Dict[str, Path]:
        written: Dict[str, Path] = {}
        for rel_path, content in files.items():
            target = project / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            written[rel_path] = target
        return written

    return _write


@pytest.fixture
def config(project: Path) -> PackagerConfig:
    """Configuration whose remote base is <project>/shared."""
    return PackagerConfig(remote_base_path=str(project / "shared"))
