"""
typesynth utilities package: cross-cutting helpers.

Logging setup is kept here so that the synthesis modules only ever depend on
the standard ``logging.getLogger(__name__)`` convention while the CLI decides
where records end up.
"""

from .logging import (
    setup_logging,
    get_logger,
    get_current_log_file,
    get_session_id,
    log_build_start,
    log_build_complete,
    log_schema_entry,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_current_log_file",
    "get_session_id",
    "log_build_start",
    "log_build_complete",
    "log_schema_entry",
]
