from __future__ import annotations

"""
Dependency Annotation Parser.

Extracts dependency directives from the comments of a script or
stylesheet. Works on already-decoded text only: no filesystem access and
no side effects, so it can be exercised on plain strings.

Recognized directives, one per comment line::

    // @require lib/util.js
    /* @requireStyle ../css/base.css */
     * @requireRemote @remote/vendor/jquery.js
"""

import re
from typing import Dict, List, Optional

from assetpack.domain.constants import (
    DEFAULT_REMOTE_TOKEN,
    DIRECTIVE_PREFIX,
    DIRECTIVE_REMOTE_SCRIPT,
    DIRECTIVE_SCRIPT,
    DIRECTIVE_STYLESHEET,
)
from assetpack.domain.errors import parsing_error
from assetpack.domain.models import DependencyKind, DependencyReference

# -----------------------------------------------------------------------------
# REGEX AND KEYWORD CONSTANTS
# -----------------------------------------------------------------------------

_KEYWORDS: Dict[str, DependencyKind] = {
    DIRECTIVE_SCRIPT: DependencyKind.SCRIPT,
    DIRECTIVE_REMOTE_SCRIPT: DependencyKind.REMOTE_SCRIPT,
    DIRECTIVE_STYLESHEET: DependencyKind.STYLESHEET,
}

# Comment leader (//, /*, /**, *) then a keyword carrying the directive prefix
_DIRECTIVE_RX = re.compile(
    r"^\s*(?://+|/\*+|\*+)\s*(?P<keyword>" + re.escape(DIRECTIVE_PREFIX) + r"[A-Za-z_]*)(?P<rest>.*)$"
)

_COMMENT_CLOSE_RX = re.compile(r"\*+/\s*$")

_BOM = "\ufeff"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_annotations(
        text: str,
        source_path: Optional[str] = None,
        remote_token: str = DEFAULT_REMOTE_TOKEN,
) -> List[DependencyReference]:
    """
    Scan source text for dependency directives.

    Args:
        text: Decoded content of a source file.
        source_path: File the text came from, used only in error messages.
        remote_token: Placeholder that marks a raw path as remote-rooted.

    Returns:
        List[DependencyReference]: Directives in the order they appear.

    Raises:
        PackagerError: PARSING for a directive with a missing or extra
                       argument, or an unknown keyword sharing the prefix.
    """
    references: List[DependencyReference] = []
    # A byte order mark would hide a directive on the first line
    text = text[1:] if text.startswith(_BOM) else text

    for line_no, line in enumerate(text.splitlines(), start=1):
        reference = parse_line(line, line_no, source_path, remote_token)
        if reference is not None:
            references.append(reference)

    return references


def parse_line(
        line: str,
        line_no: int,
        source_path: Optional[str] = None,
        remote_token: str = DEFAULT_REMOTE_TOKEN,
) -> Optional[DependencyReference]:
    """
    Parse a single line. Returns None when the line holds no directive.
    """
    match = _DIRECTIVE_RX.match(line)
    if not match:
        return None

    keyword = match.group("keyword")
    kind = _KEYWORDS.get(keyword)
    if kind is None:
        raise parsing_error(source_path or "", line_no, f"Unrecognized directive '{keyword}'.")

    rest = _COMMENT_CLOSE_RX.sub("", match.group("rest"))
    # '@require' directly followed by a non-space character is a different word
    if rest and not rest[0].isspace():
        raise parsing_error(source_path or "", line_no, f"Unrecognized directive '{keyword}{rest.split()[0]}'.")

    arguments = rest.split()
    if not arguments:
        raise parsing_error(source_path or "", line_no, f"Directive '{keyword}' is missing its path argument.")
    if len(arguments) > 1:
        raise parsing_error(
            source_path or "",
            line_no,
            f"Directive '{keyword}' takes exactly one path argument, got {len(arguments)}.",
        )

    raw_path = arguments[0]
    if remote_token and is_remote_rooted(raw_path, remote_token):
        if kind is DependencyKind.STYLESHEET:
            raise parsing_error(
                source_path or "",
                line_no,
                f"Remote-rooted stylesheets are not supported ('{raw_path}').",
                raw_path=raw_path,
            )
        kind = DependencyKind.REMOTE_SCRIPT

    return DependencyReference(kind=kind, raw_path=raw_path, line=line_no)


def is_remote_rooted(raw_path: str, remote_token: str) -> bool:
    """True when the path starts with the remote placeholder segment."""
    if not raw_path.startswith(remote_token):
        return False
    remainder = raw_path[len(remote_token):]
    return remainder == "" or remainder[0] in "/\\"
