from __future__ import annotations

"""
Bundle and Manifest Output.

Owns the naming convention of compiled artifacts and their physical
persistence. A bundle is the exact byte concatenation of its sources; the
manifest lists those sources, one per line, relative to the manifest's own
directory. Both files are replaced atomically, bundle first.
"""

import logging
import os
from typing import Dict, Iterable, List, Optional, Tuple

from assetpack.domain.constants import ARTIFACT_SUFFIXES, BUNDLE_SUFFIXES, MANIFEST_SUFFIX
from assetpack.domain.errors import cannot_write_error, missing_file_error
from assetpack.domain.models import AssetKind
from assetpack.infra.fs import atomic_write_bytes, read_bytes, safe_remove, to_posix

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# NAMING CONVENTION
# -----------------------------------------------------------------------------

def output_paths(
        source_path: str,
        kind: AssetKind,
        output_dir: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Derive the bundle and manifest paths of a root for one asset kind.

    ``app/main.js`` compiles to ``app/main.compiled.js`` with the manifest
    ``app/main.compiled.js.manifest``; its stylesheets to
    ``app/main.compiled.css`` and ``app/main.compiled.css.manifest``.

    Args:
        source_path: Root file path.
        kind: Asset kind of the bundle.
        output_dir: Shared output directory overriding the root's folder.

    Returns:
        Tuple[str, str]: (bundle path, manifest path).
    """
    directory = output_dir or os.path.dirname(source_path)
    stem, _ = os.path.splitext(os.path.basename(source_path))
    compiled_path = os.path.join(directory, f"{stem}{BUNDLE_SUFFIXES[kind.value]}")
    return compiled_path, f"{compiled_path}{MANIFEST_SUFFIX}"


def output_collisions(root_paths: Iterable[str], output_dir: Optional[str] = None) -> Dict[str, List[str]]:
    """
    Group distinct roots whose artifacts would land on the same files.

    Both asset kinds share the root's directory and stem, so two roots
    collide when they agree on both: ``a/main.js`` and ``b/main.js`` under
    a shared output folder, or ``main.js`` and ``main.css`` side by side.

    Returns:
        Dict[str, List[str]]: Shared artifact stem path -> colliding roots,
                              only for stems claimed more than once.
    """
    claims: Dict[str, List[str]] = {}
    for root in root_paths:
        compiled_path, _ = output_paths(root, AssetKind.SCRIPT, output_dir)
        stem_path = compiled_path[: -len(BUNDLE_SUFFIXES[AssetKind.SCRIPT.value])]
        key = os.path.normcase(stem_path)
        if root not in claims.setdefault(key, []):
            claims[key].append(root)
    return {key: roots for key, roots in claims.items() if len(roots) > 1}


def is_compiled_artifact(file_name: str) -> bool:
    """True for any file produced by the compiler."""
    return file_name.endswith(ARTIFACT_SUFFIXES)

# -----------------------------------------------------------------------------
# FILE OUTPUT MANAGEMENT
# -----------------------------------------------------------------------------

def write_bundle(compiled_path: str, sources: Iterable[str]) -> int:
    """
    Concatenate the sources into the bundle file.

    Sources are re-read at write time; nothing is cached between calls.

    Returns:
        int: Number of bytes written.

    Raises:
        PackagerError: MISSING_FILE if a source vanished, CANNOT_WRITE if
                       the bundle cannot be persisted.
    """
    chunks: List[bytes] = []
    for source in sources:
        try:
            chunks.append(read_bytes(source))
        except OSError as e:
            raise missing_file_error(source, cause=str(e)) from e

    payload = b"".join(chunks)
    try:
        atomic_write_bytes(compiled_path, payload)
    except OSError as e:
        raise cannot_write_error(compiled_path, e) from e

    logger.debug(f"Bundle written: {compiled_path} ({len(payload)} bytes)")
    return len(payload)


def write_manifest(manifest_path: str, sources: Iterable[str]) -> None:
    """
    Persist the ordered source list next to its bundle.

    Raises:
        PackagerError: CANNOT_WRITE if the manifest cannot be persisted.
    """
    base_dir = os.path.dirname(os.path.abspath(manifest_path))
    lines = [to_posix(os.path.relpath(source, base_dir)) for source in sources]
    payload = "".join(f"{line}\n" for line in lines).encode("utf-8")

    try:
        atomic_write_bytes(manifest_path, payload)
    except OSError as e:
        raise cannot_write_error(manifest_path, e) from e

    logger.debug(f"Manifest written: {manifest_path} ({len(lines)} entries)")


def write_package(compiled_path: str, manifest_path: str, sources: List[str]) -> None:
    """
    Write a bundle and then its manifest.

    A manifest that cannot be written takes the new bundle down with it,
    together with any manifest left by a previous compilation, so neither
    file survives without its counterpart.
    """
    write_bundle(compiled_path, sources)
    try:
        write_manifest(manifest_path, sources)
    except Exception:
        for orphan in (compiled_path, manifest_path):
            removed, err = safe_remove(orphan)
            if not removed:
                logger.error(f"Failed to remove orphaned artifact {orphan}: {err}")
        raise


def read_manifest(manifest_path: str) -> List[str]:
    """
    Read a manifest back into absolute source paths, in bundle order.

    Raises:
        OSError: If the manifest cannot be read.
    """
    base_dir = os.path.dirname(os.path.abspath(manifest_path))
    with open(manifest_path, "r", encoding="utf-8") as f:
        entries = [line.rstrip("\r\n") for line in f]
    return [
        os.path.normpath(os.path.join(base_dir, entry.replace("/", os.sep)))
        for entry in entries
        if entry
    ]
