from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging
(defaults, project file, command-line overrides), dispatch to the core
operations, per-root failure isolation and result rendering. Every root
or folder is processed independently: one failure is reported and the
remaining work carries on.
"""

import json
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from assetpack.core.compiler import Compiler
from assetpack.core.services.scanner import find_root_files
from assetpack.core.validator import validate_config
from assetpack.core.writer import output_collisions
from assetpack.domain.config import PackagerConfig, load_config
from assetpack.domain.errors import ErrorKind, PackagerError
from assetpack.infra.logging import LoggingConfig, configure_logging, get_logger
from assetpack.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 when everything succeeded).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig(debug=args.debug, log_file=args.log_file))

    if args.config_file and not os.path.isfile(args.config_file):
        logger.error(f"Configuration file '{args.config_file}' does not exist.")
        return EXIT_USAGE

    config = resolve_config(args)
    compiler = Compiler(config)

    handlers = {
        cli_args.CMD_COMPILE_FILES: lambda: compile_files(compiler, args.files),
        cli_args.CMD_COMPILE_FOLDERS: lambda: compile_folders(compiler, args.folders, jobs=args.jobs),
        cli_args.CMD_CLEAR_FOLDERS: lambda: clear_folders(compiler, args.folders),
        cli_args.CMD_RESOLVE_FILES: lambda: resolve_files(
            compiler,
            args.files,
            as_json=args.json_output,
            exclude_scripts=args.exclude_scripts,
            exclude_stylesheets=args.exclude_stylesheets,
        ),
    }

    try:
        success = handlers[args.command]()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return EXIT_INTERRUPTED

    return EXIT_OK if success else EXIT_FAILURE


def resolve_config(args: Any) -> PackagerConfig:
    """Merge defaults, the project file and CLI overrides into a PackagerConfig."""
    raw_conf = _merge_config(load_config(args.config_file), cli_args.args_to_overrides(args))
    config, warnings = validate_config(raw_conf, strict=False)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    logger.info(f"Remote base path: '{config.remote_base_path}'.")
    if config.output_dir:
        logger.info(f"Shared output folder: '{config.output_dir}'.")
    return config

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def compile_files(compiler: Compiler, files: Sequence[str]) -> bool:
    """Compile each file; report a summary table."""
    started = time.perf_counter()
    rows: List[Tuple[str, bool]] = []

    real_paths = [_confirm_path(input_file) for input_file in files]
    rejected = _colliding_roots(compiler, [p for p in real_paths if p is not None])

    for input_file, real_path in zip(files, real_paths):
        if real_path is None or real_path in rejected:
            rows.append((input_file, False))
            continue
        logger.info(f"Compiling file '{input_file}'.")
        rows.append((input_file, compile_root(compiler, real_path)))

    elapsed = time.perf_counter() - started
    logger.info(f"Finished file compilation. (Total time: {elapsed:.3f} seconds).")
    _print_table(("File", "Successfully Compiled"), rows)
    return all(ok for _, ok in rows)


def compile_folders(compiler: Compiler, folders: Sequence[str], jobs: int = 1) -> bool:
    """Discover the roots of each folder and compile them."""
    started = time.perf_counter()
    rows: List[Tuple[str, bool]] = []

    for input_folder in folders:
        logger.info(f"Compiling folder '{input_folder}'.")
        rows.append((input_folder, compile_folder(compiler, input_folder, jobs=jobs)))

    elapsed = time.perf_counter() - started
    logger.info(f"Finished folder compilation. (Total time: {elapsed:.3f} seconds).")
    _print_table(("Folder", "Successfully Compiled"), rows)
    return all(ok for _, ok in rows)


def compile_folder(compiler: Compiler, folder: str, jobs: int = 1) -> bool:
    """
    Compile every root file of one folder.

    Roots are independent invocations, so they may run on a thread pool;
    each root's failure is isolated and reported on its own.
    """
    folder_path = _confirm_path(folder)
    if folder_path is None:
        return False
    if not os.path.isdir(folder_path):
        logger.error(f"Path '{folder}' is not a folder.")
        return False

    roots = find_root_files(folder_path)
    logger.info(f"Found {len(roots)} file(s) to compile in '{folder_path}'.")
    for root in roots:
        logger.debug(f"\t{root}")

    rejected = _colliding_roots(compiler, roots)
    accepted = [root for root in roots if root not in rejected]

    workers = max(1, int(jobs or 1))
    if workers == 1 or len(accepted) < 2:
        results = [compile_root(compiler, root) for root in accepted]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="CompileWorker") as executor:
            results = list(executor.map(lambda root: compile_root(compiler, root), accepted))

    compiled = sum(1 for ok in results if ok)
    logger.info(f"Successfully compiled {compiled} out of {len(roots)} file(s) in '{folder_path}'.")
    return compiled == len(roots)


def compile_root(compiler: Compiler, file_path: str) -> bool:
    """Compile one root, converting failures into a logged False."""
    real_path = _confirm_path(file_path)
    if real_path is None:
        return False

    try:
        packages = compiler.compile_and_write_files_and_manifests(real_path)
    except PackagerError as e:
        _report_error("Compiling", e)
        return False

    logger.info(f"It resulted in {len(packages)} compiled package(s):")
    for package in packages:
        logger.info(f"\t{package.source_path}")
        logger.info(f"\t\t{package.compiled_path}")
        logger.info(f"\t\t{package.manifest_path}")
    return True


def clear_folders(compiler: Compiler, folders: Sequence[str]) -> bool:
    """Clear compiled artifacts in each folder."""
    rows: List[Tuple[str, bool]] = []

    for input_folder in folders:
        folder_path = _confirm_path(input_folder)
        if folder_path is None:
            rows.append((input_folder, False))
            continue

        logger.info(f"Clearing all packages (compiled files and manifests) in {folder_path}...")
        success = compiler.clear_packages(folder_path)
        if not success:
            logger.error(f"An error occurred while clearing packages in {folder_path}.")
        rows.append((folder_path, success))

    logger.info("Finished clearing packages.")
    _print_table(("Folder", "Successfully Cleared"), rows)
    return all(ok for _, ok in rows)


def resolve_files(
        compiler: Compiler,
        files: Sequence[str],
        *,
        as_json: bool = False,
        exclude_scripts: bool = False,
        exclude_stylesheets: bool = False,
) -> bool:
    """Print the ordered dependencies of each file: stylesheets, then scripts."""
    success = True

    for input_file in files:
        real_path = _confirm_path(input_file)
        if real_path is None:
            success = False
            continue

        logger.info(f"Resolving \"{real_path}\" for dependencies...")
        try:
            flattened = compiler.resolve_dependencies(real_path)
        except PackagerError as e:
            _report_error("ResolveFiles", e)
            success = False
            continue

        paths: List[str] = []
        if not exclude_stylesheets:
            paths.extend(flattened.stylesheets)
        if not exclude_scripts:
            paths.extend(flattened.scripts)

        if as_json:
            print(json.dumps(paths))
        else:
            for path in paths:
                print(path)

    return success

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of the overrides that were actually provided.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject; None means "not given".

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _confirm_path(path: str) -> Optional[str]:
    logger.debug(f"Confirming path to '{path}'.")
    if not os.path.exists(path):
        logger.error(f"Path '{path}' resolved to nowhere.")
        return None
    return os.path.realpath(path)


def _colliding_roots(compiler: Compiler, roots: Sequence[str]) -> Set[str]:
    """Roots that would overwrite each other's packages; none of them is compiled."""
    rejected: Set[str] = set()
    for stem_path, claimants in output_collisions(roots, compiler.config.output_dir).items():
        logger.error(
            f"[Compiling] [ERROR] {len(claimants)} files would write the same packages "
            f"'{stem_path}.compiled.*': {', '.join(claimants)}"
        )
        rejected.update(claimants)
    return rejected


def _report_error(context: str, error: PackagerError) -> None:
    if error.kind is ErrorKind.CANNOT_WRITE:
        logger.error(f"[{context}] [ERROR] Failed to compile \"{error.file_path}\" - {error.message}")
    else:
        logger.error(f"[{context}] [ERROR] {error.message}")


def _print_table(headers: Tuple[str, str], rows: Sequence[Tuple[str, bool]]) -> None:
    """Render a two-column result table on stdout."""
    cells = [(name, "Yes" if ok else "No") for name, ok in rows]
    width_a = max([len(headers[0])] + [len(a) for a, _ in cells])
    width_b = max([len(headers[1])] + [len(b) for _, b in cells])
    border = f"+-{'-' * width_a}-+-{'-' * width_b}-+"

    print(border)
    print(f"| {headers[0]:<{width_a}} | {headers[1]:<{width_b}} |")
    print(border)
    for a, b in cells:
        print(f"| {a:<{width_a}} | {b:<{width_b}} |")
    print(border)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
