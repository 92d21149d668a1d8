from __future__ import annotations

"""
Dependency Tree Flattener.

Linearizes a dependency tree into the load order of its scripts and of
its stylesheets: a post-order walk where every dependency precedes the
files that require it and each file appears once, at its first
occurrence.
"""

import logging
from typing import Iterator, List, Set, Tuple

from assetpack.domain.models import AssetKind, DependencyTree, FlattenedDependencies

logger = logging.getLogger(__name__)


def flatten_dependency_tree(tree: DependencyTree) -> FlattenedDependencies:
    """
    Produce the per-kind load order of a tree.

    Classification uses each file's own extension, not the directive that
    pulled it in. The root comes last among the files of its kind.

    Args:
        tree: An acyclic tree produced by the graph builder.

    Returns:
        FlattenedDependencies: Ordered script and stylesheet paths.
    """
    scripts: List[str] = []
    stylesheets: List[str] = []

    for path in post_order(tree):
        if tree.node(path).kind is AssetKind.STYLESHEET:
            stylesheets.append(path)
        else:
            scripts.append(path)

    logger.debug(
        f"Flattened {tree.root}: {len(scripts)} script(s), {len(stylesheets)} stylesheet(s)"
    )
    return FlattenedDependencies(scripts=scripts, stylesheets=stylesheets)


def post_order(tree: DependencyTree) -> List[str]:
    """Every reachable path once, dependencies before dependents."""
    order: List[str] = []
    seen: Set[str] = {tree.root}
    stack: List[Tuple[str, Iterator[str]]] = [(tree.root, iter(tree.node(tree.root).children))]

    while stack:
        path, children = stack[-1]
        child = next(children, None)

        if child is None:
            stack.pop()
            order.append(path)
            continue

        if child in seen:
            continue

        seen.add(child)
        stack.append((child, iter(tree.node(child).children)))

    return order
