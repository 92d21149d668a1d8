from __future__ import annotations

from assetpack.core.compiler import Compiler
from assetpack.domain.config import PackagerConfig
from assetpack.domain.constants import APP_VERSION as __version__
from assetpack.domain.errors import ErrorKind, PackagerError

__all__ = [
    "Compiler",
    "ErrorKind",
    "PackagerConfig",
    "PackagerError",
    "__version__",
]
