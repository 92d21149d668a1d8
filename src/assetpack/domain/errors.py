from __future__ import annotations

"""
Packager Error Taxonomy.

A single exception type tagged with an ErrorKind. Kind-specific context
(offending path, referencing file, line number, cycle chain, I/O cause)
travels in an immutable ErrorDetails payload. Callers branch on
``error.kind`` rather than on exception subclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

# -----------------------------------------------------------------------------
# ERROR MODELS
# -----------------------------------------------------------------------------

class ErrorKind(str, Enum):
    MISSING_FILE = "missing_file"
    PARSING = "parsing"
    RECURSION = "recursion"
    CANNOT_WRITE = "cannot_write"


@dataclass(frozen=True)
class ErrorDetails:
    """
    Context attached to a PackagerError.

    Attributes:
        path: File the error is about (missing target, malformed source,
              unwritable artifact).
        raw_path: Path as written in the directive, when relevant.
        referenced_by: File holding the offending directive.
        line: 1-based line of the offending directive.
        cycle: Ordered file chain closing a dependency cycle.
        cause: Text of the underlying OS error.
    """
    path: str = ""
    raw_path: Optional[str] = None
    referenced_by: Optional[str] = None
    line: Optional[int] = None
    cycle: Tuple[str, ...] = ()
    cause: Optional[str] = None


class PackagerError(Exception):
    """Unrecoverable failure of a compile, resolve or clear invocation."""

    def __init__(self, kind: ErrorKind, message: str, details: Optional[ErrorDetails] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or ErrorDetails()

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"PackagerError(kind={self.kind.value!r}, message={self.message!r})"

    @property
    def file_path(self) -> str:
        return self.details.path

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def missing_file_error(
        path: str,
        raw_path: Optional[str] = None,
        referenced_by: Optional[str] = None,
        line: Optional[int] = None,
        cause: Optional[str] = None,
) -> PackagerError:
    """
    Build a MISSING_FILE error.

    Args:
        path: The candidate path that does not exist.
        raw_path: Directive argument the path was derived from.
        referenced_by: File declaring the dependency (None for a root).
        line: Line of the directive in the referencing file.
        cause: Optional OS error text when the file exists but is unreadable.
    """
    if referenced_by:
        message = (
            f"File '{raw_path or path}' required by '{referenced_by}'"
            f"{_line_suffix(line)} could not be found (resolved to '{path}')."
        )
    else:
        message = f"File '{path}' could not be found."
    if cause:
        message = f"{message} {cause}"

    return PackagerError(
        ErrorKind.MISSING_FILE,
        message,
        ErrorDetails(path=path, raw_path=raw_path, referenced_by=referenced_by, line=line, cause=cause),
    )


def parsing_error(path: str, line: int, reason: str, raw_path: Optional[str] = None) -> PackagerError:
    """Build a PARSING error pointing at a file and line."""
    location = path or "<source>"
    message = f"Parsing error in '{location}' on line {line}: {reason}"
    return PackagerError(
        ErrorKind.PARSING,
        message,
        ErrorDetails(path=path, raw_path=raw_path, line=line),
    )


def recursion_error(cycle: Sequence[str]) -> PackagerError:
    """Build a RECURSION error enumerating the whole cycle."""
    chain = tuple(cycle)
    message = "Circular dependency detected: " + " -> ".join(chain)
    return PackagerError(
        ErrorKind.RECURSION,
        message,
        ErrorDetails(path=chain[0] if chain else "", cycle=chain),
    )


def cannot_write_error(path: str, cause: Optional[BaseException] = None) -> PackagerError:
    """Build a CANNOT_WRITE error for a bundle or manifest target."""
    cause_text = str(cause) if cause else None
    message = f"Cannot write '{path}'"
    message = f"{message}: {cause_text}" if cause_text else f"{message}."
    return PackagerError(
        ErrorKind.CANNOT_WRITE,
        message,
        ErrorDetails(path=path, cause=cause_text),
    )


def _line_suffix(line: Optional[int]) -> str:
    return f" on line {line}" if line else ""
