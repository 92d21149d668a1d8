from __future__ import annotations

"""
Dependency Graph Builder.

Builds the dependency graph reachable from a root file with a depth-first
traversal. Nodes live in an arena keyed by canonical path; visitation
states are kept in a separate map that only exists for the duration of
the build. The traversal uses an explicit frame stack, which doubles as
the in-progress ancestor chain when a cycle has to be reported.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterator, List

from assetpack.core.parser import parse_annotations
from assetpack.core.resolver import resolve_reference
from assetpack.domain.config import PackagerConfig
from assetpack.domain.errors import missing_file_error, parsing_error, recursion_error
from assetpack.domain.models import (
    AssetKind,
    DependencyNode,
    DependencyReference,
    DependencyTree,
    SourceFile,
    VisitState,
)
from assetpack.infra.fs import canonical_path, read_bytes

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """A node whose directives are still being walked."""
    node: DependencyNode
    pending: Iterator[DependencyReference]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def build_dependency_tree(root_path: str, config: PackagerConfig) -> DependencyTree:
    """
    Parse and resolve every dependency reachable from a root file.

    Args:
        root_path: Path of the entry-point file.
        config: Run configuration (remote base directory and token).

    Returns:
        DependencyTree: The root plus the arena of reachable nodes.

    Raises:
        PackagerError: MISSING_FILE, PARSING or RECURSION.
    """
    root = canonical_path(root_path)
    if not os.path.isfile(root):
        raise missing_file_error(root)

    nodes: Dict[str, DependencyNode] = {}
    states: Dict[str, VisitState] = {}
    stack: List[_Frame] = []

    logger.debug(f"Building dependency tree for {root}")
    stack.append(_enter(root, nodes, states, config))

    while stack:
        frame = stack[-1]
        reference = next(frame.pending, None)

        if reference is None:
            states[frame.node.path] = VisitState.DONE
            stack.pop()
            continue

        parent = frame.node
        child_path = resolve_reference(reference, parent.path, config)
        _check_target_kind(reference, child_path, parent.path)

        state = states.get(child_path, VisitState.UNVISITED)

        if state is VisitState.IN_PROGRESS:
            raise recursion_error(_cycle_chain(stack, child_path))

        if child_path not in parent.children:
            parent.children.append(child_path)

        if state is VisitState.DONE:
            continue

        stack.append(_enter(child_path, nodes, states, config, parent.path))

    logger.debug(f"Dependency tree for {root} holds {len(nodes)} file(s)")
    return DependencyTree(root=root, nodes=nodes)


def load_source_file(path: str, referenced_by: str = "") -> SourceFile:
    """
    Read a source file from disk.

    Raises:
        PackagerError: MISSING_FILE if the file cannot be read.
    """
    try:
        content = read_bytes(path)
    except OSError as e:
        raise missing_file_error(path, referenced_by=referenced_by or None, cause=str(e)) from e
    return SourceFile(path=path, kind=AssetKind.from_path(path), raw_content=content)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _enter(
        path: str,
        nodes: Dict[str, DependencyNode],
        states: Dict[str, VisitState],
        config: PackagerConfig,
        referenced_by: str = "",
) -> _Frame:
    """Read and parse a file, register its node and mark it in progress."""
    source = load_source_file(path, referenced_by)
    references = parse_annotations(source.text, source_path=path, remote_token=config.remote_token)

    node = DependencyNode(path=path, kind=source.kind)
    nodes[path] = node
    states[path] = VisitState.IN_PROGRESS

    if references:
        logger.debug(f"{path}: {len(references)} directive(s)")
    return _Frame(node=node, pending=iter(references))


def _check_target_kind(reference: DependencyReference, target: str, referencing_path: str) -> None:
    """Reject directives whose kind disagrees with the target's extension."""
    actual = AssetKind.from_path(target)
    expected = reference.kind.expected_asset
    if actual is not expected:
        raise parsing_error(
            referencing_path,
            reference.line,
            f"Directive for '{reference.raw_path}' expects a {expected.value} "
            f"but the file is a {actual.value}.",
            raw_path=reference.raw_path,
        )


def _cycle_chain(stack: List[_Frame], repeated: str) -> List[str]:
    """Paths from where the repeated ancestor was entered, back to itself."""
    paths = [frame.node.path for frame in stack]
    start = paths.index(repeated)
    return paths[start:] + [repeated]
