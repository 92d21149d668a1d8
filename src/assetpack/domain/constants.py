from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the directive vocabulary recognized inside source comments,
the extension-based asset classification, and the fixed naming convention
of compiled bundles and manifests. These values are a contract with
downstream consumers and with the clearing routine: they must stay stable.
"""

from typing import Dict, FrozenSet, Tuple

APP_NAME = "assetpack"
APP_VERSION = "0.1.0"

# -----------------------------------------------------------------------------
# DIRECTIVE VOCABULARY
# -----------------------------------------------------------------------------

# Every keyword starting with this prefix is treated as a directive
DIRECTIVE_PREFIX = "@require"

DIRECTIVE_SCRIPT = "@require"
DIRECTIVE_REMOTE_SCRIPT = "@requireRemote"
DIRECTIVE_STYLESHEET = "@requireStyle"

# Marks a script as a compilation entry point for folder scans
ROOT_TAG = "@root"

DEFAULT_REMOTE_TOKEN = "@remote"
DEFAULT_REMOTE_FOLDER = "shared"

# -----------------------------------------------------------------------------
# ASSET CLASSIFICATION
# -----------------------------------------------------------------------------

STYLESHEET_EXTENSIONS: FrozenSet[str] = frozenset({".css"})
SCRIPT_EXTENSION = ".js"
STYLESHEET_EXTENSION = ".css"

# -----------------------------------------------------------------------------
# OUTPUT NAMING CONVENTION
# -----------------------------------------------------------------------------

COMPILED_MARKER = ".compiled"
MANIFEST_SUFFIX = ".manifest"

# <stem>.compiled.js / <stem>.compiled.js.manifest / ...
BUNDLE_SUFFIXES: Dict[str, str] = {
    "script": f"{COMPILED_MARKER}{SCRIPT_EXTENSION}",
    "stylesheet": f"{COMPILED_MARKER}{STYLESHEET_EXTENSION}",
}

ARTIFACT_SUFFIXES: Tuple[str, ...] = (
    f"{COMPILED_MARKER}{SCRIPT_EXTENSION}",
    f"{COMPILED_MARKER}{SCRIPT_EXTENSION}{MANIFEST_SUFFIX}",
    f"{COMPILED_MARKER}{STYLESHEET_EXTENSION}",
    f"{COMPILED_MARKER}{STYLESHEET_EXTENSION}{MANIFEST_SUFFIX}",
)

# Directories never descended into by folder scans
SKIPPED_DIRECTORIES: FrozenSet[str] = frozenset({"node_modules", "__pycache__"})

PROJECT_CONFIG_FILE = "assetpack.json"
