"""Config module - session settings schema and loading."""

from .schema import DEFAULT_BRANCH_PREFIX, DEFAULT_REVIEW_SIGNATURE, FileConfig, SessionContext
from .loader import (
    apply_overrides,
    build_session_context,
    default_config_path,
    load_file_config,
    load_session_context,
)

__all__ = [
    "DEFAULT_BRANCH_PREFIX",
    "DEFAULT_REVIEW_SIGNATURE",
    "FileConfig",
    "SessionContext",
    "apply_overrides",
    "build_session_context",
    "default_config_path",
    "load_file_config",
    "load_session_context",
]
