from __future__ import annotations

"""
Dependency Path Resolver.

Turns the raw path of a directive into the canonical absolute path of an
existing file. Local references are anchored on the referencing file's
directory; remote-rooted references are anchored on the configured remote
base directory.
"""

import logging
import os

from assetpack.core.parser import is_remote_rooted
from assetpack.domain.config import PackagerConfig
from assetpack.domain.errors import missing_file_error
from assetpack.domain.models import DependencyKind, DependencyReference
from assetpack.infra.fs import canonical_path

logger = logging.getLogger(__name__)


def resolve_reference(
        reference: DependencyReference,
        referencing_path: str,
        config: PackagerConfig,
) -> str:
    """
    Resolve a directive to a canonical file path.

    The reference's ``resolved_path`` is filled in on success.

    Args:
        reference: Directive to resolve.
        referencing_path: Canonical path of the file holding the directive.
        config: Run configuration providing the remote base directory.

    Returns:
        str: Canonical absolute path of the target file.

    Raises:
        PackagerError: MISSING_FILE when no regular file exists there.
    """
    candidate = candidate_path(reference, referencing_path, config)

    if not os.path.isfile(candidate):
        raise missing_file_error(
            candidate,
            raw_path=reference.raw_path,
            referenced_by=referencing_path,
            line=reference.line or None,
        )

    resolved = canonical_path(candidate)
    reference.resolved_path = resolved
    logger.debug(f"Resolved '{reference.raw_path}' from {referencing_path} to {resolved}")
    return resolved


def candidate_path(
        reference: DependencyReference,
        referencing_path: str,
        config: PackagerConfig,
) -> str:
    """
    Pure path algebra part of the resolution, without existence checks.
    """
    raw_path = reference.raw_path

    if reference.kind is DependencyKind.REMOTE_SCRIPT:
        if config.remote_token and is_remote_rooted(raw_path, config.remote_token):
            raw_path = raw_path[len(config.remote_token):].lstrip("/\\")
        base_dir = config.remote_base_path
    else:
        base_dir = os.path.dirname(referencing_path)

    return os.path.normpath(os.path.join(base_dir, raw_path))
