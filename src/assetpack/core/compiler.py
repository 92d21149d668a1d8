from __future__ import annotations

"""
Core Compilation Orchestrator.

Coordinates a single compilation:
1. Builds the dependency tree of the root file.
2. Flattens it into script and stylesheet load orders.
3. Writes one bundle and one manifest per non-empty asset kind.

Also exposes the dependency-only resolution used by reporting tools and
the clearing routine that removes every previously written artifact
under a folder. Each call is self-contained: nothing is cached between
invocations and no state is shared, so independent roots can be compiled
from several threads at once.
"""

import logging
import os
import time
from typing import List

from assetpack.core.flattener import flatten_dependency_tree
from assetpack.core.graph import build_dependency_tree
from assetpack.core.writer import is_compiled_artifact, output_paths, write_package
from assetpack.domain.config import PackagerConfig
from assetpack.domain.constants import SKIPPED_DIRECTORIES
from assetpack.domain.errors import PackagerError
from assetpack.domain.models import (
    AssetKind,
    CompileStage,
    CompiledPackage,
    FlattenedDependencies,
)
from assetpack.infra.fs import canonical_path, safe_remove

logger = logging.getLogger(__name__)


class Compiler:
    """
    Entry point of the core engine.

    Args:
        config: Immutable settings shared by every call on this instance.
    """

    def __init__(self, config: PackagerConfig) -> None:
        self.config = config

    # ==========================================================================
    # PUBLIC API
    # ==========================================================================

    def resolve_dependencies(self, root_path: str) -> FlattenedDependencies:
        """
        Build and flatten the tree of a root without writing anything.

        Raises:
            PackagerError: MISSING_FILE, PARSING or RECURSION.
        """
        tree = build_dependency_tree(root_path, self.config)
        return flatten_dependency_tree(tree)

    def compile_and_write_files_and_manifests(self, root_path: str) -> List[CompiledPackage]:
        """
        Compile a root file into bundles and manifests.

        Scripts are written before stylesheets. Kinds without any file in
        the root's closure produce nothing.

        Args:
            root_path: Entry-point file.

        Returns:
            List[CompiledPackage]: One entry per bundle written.

        Raises:
            PackagerError: MISSING_FILE, PARSING, RECURSION or CANNOT_WRITE.
        """
        source_path = canonical_path(root_path)
        stage = CompileStage.IDLE
        started = time.perf_counter()

        try:
            stage = self._transition(source_path, stage, CompileStage.BUILDING)
            tree = build_dependency_tree(source_path, self.config)

            stage = self._transition(source_path, stage, CompileStage.FLATTENING)
            flattened = flatten_dependency_tree(tree)

            stage = self._transition(source_path, stage, CompileStage.WRITING)
            packages: List[CompiledPackage] = []
            for kind in (AssetKind.SCRIPT, AssetKind.STYLESHEET):
                sources = flattened.for_kind(kind)
                if not sources:
                    continue
                packages.append(self._write_kind(source_path, kind, sources))

            self._transition(source_path, stage, CompileStage.DONE)

        except PackagerError as e:
            self._transition(source_path, stage, CompileStage.FAILED)
            logger.debug(f"Compilation of {source_path} failed during {stage.value}: {e.kind.value}")
            raise

        elapsed = time.perf_counter() - started
        logger.info(f"Compiled {source_path} into {len(packages)} package(s) in {elapsed:.3f}s.")
        return packages

    def clear_packages(self, folder_path: str) -> bool:
        """
        Delete every bundle and manifest found below a folder.

        Deletion failures are logged and do not stop the sweep.

        Args:
            folder_path: Folder to sweep recursively.

        Returns:
            bool: True if every matching file was removed.
        """
        if not os.path.isdir(folder_path):
            logger.error(f"Cannot clear packages: '{folder_path}' is not a folder.")
            return False

        success = True
        removed = 0

        for root, dirs, files in os.walk(folder_path):
            dirs[:] = sorted(d for d in dirs if d not in SKIPPED_DIRECTORIES)
            for file_name in sorted(files):
                if not is_compiled_artifact(file_name):
                    continue
                file_path = os.path.join(root, file_name)
                ok, err = safe_remove(file_path)
                if ok:
                    removed += 1
                    logger.debug(f"Removed {file_path}")
                else:
                    success = False
                    logger.error(f"Failed to remove {file_path}: {err}")

        logger.info(f"Cleared {removed} compiled file(s) and manifest(s) in {folder_path}.")
        return success

    # ==========================================================================
    # PRIVATE HELPERS
    # ==========================================================================

    def _write_kind(self, source_path: str, kind: AssetKind, sources: List[str]) -> CompiledPackage:
        compiled_path, manifest_path = output_paths(source_path, kind, self.config.output_dir)
        write_package(compiled_path, manifest_path, sources)
        logger.debug(f"{kind.value} package of {source_path}: {len(sources)} file(s) -> {compiled_path}")
        return CompiledPackage(
            source_path=source_path,
            kind=kind,
            compiled_path=compiled_path,
            manifest_path=manifest_path,
            sources=list(sources),
        )

    @staticmethod
    def _transition(source_path: str, current: CompileStage, target: CompileStage) -> CompileStage:
        logger.debug(f"[{os.path.basename(source_path)}] {current.value} -> {target.value}")
        return target
