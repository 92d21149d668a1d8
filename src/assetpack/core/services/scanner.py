from __future__ import annotations

"""
Entry Point Discovery Service.

Walks a folder looking for the scripts that should be compiled as roots:
files tagged with ``@root`` in a comment. Compiled artifacts, hidden
directories and vendored dependencies are never considered.
"""

import logging
import os
import re
from typing import Iterable, List

from assetpack.core.writer import is_compiled_artifact
from assetpack.domain.constants import ROOT_TAG, SCRIPT_EXTENSION, SKIPPED_DIRECTORIES

logger = logging.getLogger(__name__)

_ROOT_TAG_RX = re.compile(r"^\s*(?://+|/\*+|\*+)\s*" + re.escape(ROOT_TAG) + r"\b", re.MULTILINE)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def yield_root_files(folder_path: str) -> Iterable[str]:
    """
    Traverse a folder and yield its compilation roots in a stable order.

    Args:
        folder_path: Absolute folder to scan.

    Yields:
        str: Absolute path of each root script.
    """
    for root, dirs, files in os.walk(folder_path):
        # In-place pruning keeps os.walk out of ignored trees
        dirs[:] = sorted(d for d in dirs if not _is_ignored_dir(d))

        for file_name in sorted(files):
            if not _is_candidate(file_name):
                continue
            file_path = os.path.join(root, file_name)
            if has_root_tag(file_path):
                yield file_path


def find_root_files(folder_path: str) -> List[str]:
    roots = list(yield_root_files(folder_path))
    logger.debug(f"Found {len(roots)} root file(s) in {folder_path}")
    return roots


def has_root_tag(file_path: str) -> bool:
    """True when the file carries an ``@root`` tag inside a comment."""
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            content = f.read()
    except OSError as e:
        logger.warning(f"Skipping unreadable file {file_path}: {e}")
        return False
    return bool(_ROOT_TAG_RX.search(content))


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _is_ignored_dir(name: str) -> bool:
    return name.startswith(".") or name in SKIPPED_DIRECTORIES


def _is_candidate(file_name: str) -> bool:
    if file_name.startswith(".") or is_compiled_artifact(file_name):
        return False
    return file_name.endswith(SCRIPT_EXTENSION)
