from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (one subcommand per operation plus the
options shared by all of them) and translates the parsed namespace into
configuration overrides.
"""

import argparse
from typing import Any, Dict

from assetpack.domain.constants import APP_NAME, APP_VERSION

# -----------------------------------------------------------------------------
# COMMAND NAMES
# -----------------------------------------------------------------------------

CMD_COMPILE_FILES = "compile-files"
CMD_COMPILE_FOLDERS = "compile-folders"
CMD_CLEAR_FOLDERS = "clear-folders"
CMD_RESOLVE_FILES = "resolve-files"

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the assetpack CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    common = _build_common_parser()

    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Resolve @require dependency chains and compile script/stylesheet bundles.",
    )
    p.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- Compilation ---
    compile_files = sub.add_parser(
        CMD_COMPILE_FILES,
        parents=[common],
        help="Compile the given file(s) with their dependencies.",
    )
    compile_files.add_argument("files", nargs="+", metavar="FILE", help="Path to a file to compile.")

    compile_folders = sub.add_parser(
        CMD_COMPILE_FOLDERS,
        parents=[common],
        help="Compile every @root file found in the given folder(s).",
    )
    compile_folders.add_argument("folders", nargs="+", metavar="FOLDER", help="Folder to compile the files in.")
    compile_folders.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        help="Number of root files compiled in parallel (default: 1).",
    )

    # --- Clearing ---
    clear_folders = sub.add_parser(
        CMD_CLEAR_FOLDERS,
        parents=[common],
        help="Remove compiled files and manifests in the given folder(s).",
    )
    clear_folders.add_argument("folders", nargs="+", metavar="FOLDER", help="Folder to clear.")

    # --- Resolution ---
    resolve_files = sub.add_parser(
        CMD_RESOLVE_FILES,
        parents=[common],
        help="Print the ordered dependencies of the given file(s) without compiling.",
    )
    resolve_files.add_argument("files", nargs="+", metavar="FILE", help="Path to a file to resolve.")
    resolve_files.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print each result as a JSON array.",
    )
    resolve_files.add_argument(
        "--exclude-stylesheets",
        action="store_true",
        help="Leave stylesheets out of the results.",
    )
    resolve_files.add_argument(
        "--exclude-scripts",
        action="store_true",
        help="Leave scripts out of the results.",
    )

    return p


def _build_common_parser() -> argparse.ArgumentParser:
    """Options accepted by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)

    # --- Path Management ---
    common.add_argument(
        "-r", "--remote-path",
        dest="remote_path",
        default=None,
        help="Base folder for @requireRemote and @remote/ paths (default: ./shared).",
    )
    common.add_argument(
        "--remote-token",
        dest="remote_token",
        default=None,
        help="Placeholder marking remote-rooted paths (default: @remote).",
    )
    common.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        default=None,
        help="Write every bundle and manifest into this folder instead of next to its root.",
    )
    common.add_argument(
        "-c", "--config",
        dest="config_file",
        default=None,
        help="JSON project configuration file (default: ./assetpack.json if present).",
    )

    # --- Diagnostics ---
    common.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    common.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )
    return common

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset (None means unset).
    """
    return {
        "remote_path": args.remote_path,
        "remote_token": args.remote_token,
        "output_dir": args.output_dir,
    }
