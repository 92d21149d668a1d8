from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, canonicalization and atomic file replacement
utilities shared by the resolver, the compiler and the command line layer.
"""

import os
import stat
import uuid
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def canonical_path(path: str) -> str:
    """Absolute, normalized, symlink-free form of a path."""
    return os.path.realpath(os.path.abspath(path))


def to_posix(path: str) -> str:
    return path.replace(os.sep, "/")

# -----------------------------------------------------------------------------
# FILE I/O API
# -----------------------------------------------------------------------------

def read_bytes(path: str) -> bytes:
    """
    Read a whole file as bytes.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(path, "rb") as f:
        return f.read()


def atomic_write_bytes(path: str, data: bytes) -> None:
    """
    Replace a file's content in a single rename.

    The payload is written to a temporary file in the destination directory
    and then moved over the target, so readers never observe a partial file.
    A new file gets the usual umask-derived mode; an existing target keeps
    its own permission bits.

    Raises:
        OSError: If the directory is missing or not writable.
    """
    directory = os.path.dirname(os.path.abspath(path)) or "."
    tmp_path = os.path.join(directory, f".assetpack-{uuid.uuid4().hex}.tmp")
    # 0o666 is filtered by the process umask like a plain open()
    fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0), 0o666)
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
        _copy_existing_mode(path, tmp_path)
        os.replace(tmp_path, path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def safe_remove(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to delete a single file.

    Args:
        path: Target file path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.remove(path)
        return True, None
    except FileNotFoundError:
        return True, None
    except OSError as e:
        return False, str(e)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _copy_existing_mode(target: str, tmp_path: str) -> None:
    try:
        mode = stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        return
    os.chmod(tmp_path, mode)
