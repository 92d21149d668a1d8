from __future__ import annotations

"""
Configuration Validation Service.

Turns the loosely typed configuration dictionary assembled by the command
line layer (defaults, project file, flags) into the immutable
PackagerConfig consumed by the core. Handles type coercion, path
normalization and default injection.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from assetpack.domain.config import PackagerConfig, get_default_config
from assetpack.infra.fs import normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[PackagerConfig, List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[PackagerConfig, List[str]]: The normalized configuration and
                                          a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        config = {}

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if v is not None})

    unknown = sorted(set(config) - set(defaults))
    for key in unknown:
        warnings.append(f"Unknown configuration key '{key}' ignored.")

    remote_path = _as_str(merged.get("remote_path"), defaults["remote_path"], "remote_path", warnings, strict)
    remote_token = _as_str(merged.get("remote_token"), defaults["remote_token"], "remote_token", warnings, strict)
    output_dir = _as_optional_str(merged.get("output_dir"), "output_dir", warnings, strict)

    cwd = os.getcwd()
    return PackagerConfig(
        remote_base_path=normalize_path(remote_path, cwd),
        remote_token=remote_token,
        output_dir=normalize_path(output_dir, cwd) if output_dir else None,
    ), warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_optional_str(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Ignored.")
    return None
