from __future__ import annotations

"""
Dependency Domain Data Models.

Defines the data structures shared by the parser, the resolver, the graph
builder, the flattener and the compiler. The dependency graph is stored as
an arena: nodes live in a dictionary keyed by canonical path and refer to
their children by key, never by object reference.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from assetpack.domain.constants import STYLESHEET_EXTENSIONS

# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class AssetKind(str, Enum):
    """Kind of a file on disk, decided by its extension."""
    SCRIPT = "script"
    STYLESHEET = "stylesheet"

    @classmethod
    def from_path(cls, path: str) -> "AssetKind":
        _, ext = os.path.splitext(path)
        if ext.lower() in STYLESHEET_EXTENSIONS:
            return cls.STYLESHEET
        return cls.SCRIPT


class DependencyKind(str, Enum):
    """Kind of a directive found inside a source file."""
    SCRIPT = "script"
    REMOTE_SCRIPT = "remote_script"
    STYLESHEET = "stylesheet"

    @property
    def expected_asset(self) -> AssetKind:
        if self is DependencyKind.STYLESHEET:
            return AssetKind.STYLESHEET
        return AssetKind.SCRIPT


class VisitState(Enum):
    UNVISITED = 0
    IN_PROGRESS = 1
    DONE = 2


class CompileStage(str, Enum):
    """Lifecycle of a single compile invocation."""
    IDLE = "idle"
    BUILDING = "building"
    FLATTENING = "flattening"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"

# -----------------------------------------------------------------------------
# SOURCE MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SourceFile:
    """
    A file on disk as read at one point in time.

    Attributes:
        path: Canonical absolute path.
        kind: Asset kind derived from the extension.
        raw_content: Bytes read once from disk.
    """
    path: str
    kind: AssetKind
    raw_content: bytes

    @property
    def text(self) -> str:
        return self.raw_content.decode("utf-8-sig", errors="replace")


@dataclass
class DependencyReference:
    """
    One directive found inside a source file.

    Attributes:
        kind: Directive kind.
        raw_path: Path argument exactly as written.
        line: 1-based line number of the directive.
        resolved_path: Canonical target, filled in by the resolver.
    """
    kind: DependencyKind
    raw_path: str
    line: int = 0
    resolved_path: Optional[str] = None

# -----------------------------------------------------------------------------
# GRAPH MODELS
# -----------------------------------------------------------------------------

@dataclass
class DependencyNode:
    """A graph vertex. Children are canonical paths in declaration order."""
    path: str
    kind: AssetKind
    children: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class DependencyTree:
    """
    The dependency graph reachable from one root file.

    Attributes:
        root: Canonical path of the root file.
        nodes: Arena of every reachable node, keyed by canonical path.
    """
    root: str
    nodes: Dict[str, DependencyNode]

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, path: str) -> DependencyNode:
        return self.nodes[path]


@dataclass(frozen=True)
class FlattenedDependencies:
    """Load order of a tree, split per asset kind."""
    scripts: List[str] = field(default_factory=list)
    stylesheets: List[str] = field(default_factory=list)

    def for_kind(self, kind: AssetKind) -> List[str]:
        if kind is AssetKind.STYLESHEET:
            return self.stylesheets
        return self.scripts

# -----------------------------------------------------------------------------
# COMPILATION RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CompiledPackage:
    """
    Output of compiling one asset kind of one root.

    Attributes:
        source_path: Root file the compilation started from.
        kind: Asset kind of the bundle.
        compiled_path: Written bundle.
        manifest_path: Written manifest describing the bundle.
        sources: Contributing source paths in bundle order.
    """
    source_path: str
    kind: AssetKind
    compiled_path: str
    manifest_path: str
    sources: List[str] = field(default_factory=list)
