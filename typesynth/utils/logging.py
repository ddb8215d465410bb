"""
typesynth logging utilities: session-based debug and audit logging.

Overview:
---------
Centralised logging configuration for schema builds.  Provides session-based
file logging with unique identifiers, configurable verbosity, and structured
output for tracing type registration, fallbacks taken during synthesis, and
example values that could not be converted.

Log Location:
-------------
- Default: ~/.typesynth/logs/
- Each CLI run creates a timestamped log file with session ID
- A symlink 'typesynth.log' always points to the latest session
- Can be overridden via TYPESYNTH_LOG_DIR environment variable

Log File Format:
----------------
- typesynth_YYYYMMDD_HHMMSS_<session_id>.log  (per-session files)
- typesynth.log (symlink to latest)

Log Levels:
-----------
- DEBUG: every registration, cycle short-circuits, rendered schema entries
- INFO: build start and summary
- WARNING: unknown types, inferred variants, contained synthesis errors
- ERROR: catalog loading failures

Usage:
------
    from typesynth.utils.logging import get_logger, setup_logging, get_session_id

    # Call once at startup (CLI entry point)
    log_file = setup_logging(level="DEBUG")

    # Get logger in any module
    logger = get_logger(__name__)
    logger.info("Starting build...")
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

# ============================================================================
# Constants
# ============================================================================

DEFAULT_LOG_DIR = Path.home() / ".typesynth" / "logs"
DEFAULT_LOG_LEVEL = "INFO"
SYMLINK_NAME = "typesynth.log"
ROOT_LOGGER_NAME = "typesynth"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Detailed format for file logging (includes line numbers)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s:%(lineno)d | %(message)s"

_log_file_path: Optional[Path] = None
_session_id: Optional[str] = None


# ============================================================================
# Session ID Filter - Adds session_id to all log records
# ============================================================================

class SessionIdFilter(logging.Filter):
    """Add session_id to all log records."""

    def __init__(self, session_id: str):
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id  # type: ignore[attr-defined]
        return True


class SessionFormatter(logging.Formatter):
    """Formatter that adds session_id, defaulting to 'N/A' if not present."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id or "N/A"  # type: ignore[attr-defined]
        return super().format(record)


# ============================================================================
# Setup Functions
# ============================================================================

def generate_session_id() -> str:
    """Generate a short unique session ID (6 characters)."""
    return uuid.uuid4().hex[:6]


def get_log_directory() -> Path:
    """Get the log directory, respecting TYPESYNTH_LOG_DIR environment variable."""
    env_log_dir = os.getenv("TYPESYNTH_LOG_DIR")
    if env_log_dir:
        return Path(env_log_dir)
    return DEFAULT_LOG_DIR


def generate_log_filename(session_id: str) -> str:
    """Generate a timestamped log filename with session ID."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"typesynth_{timestamp}_{session_id}.log"


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console_output: bool = False,
    quiet: bool = False,
) -> Path:
    """
    Initialise typesynth logging with session-based file and optional console output.

    Each call creates a new timestamped log file with a unique session ID.
    A symlink 'typesynth.log' is updated to point to the latest log file.

    Parameters
    ----------
    level : str, optional
        Log level: DEBUG, INFO, WARNING, ERROR. Defaults to INFO.
        Can also be set via TYPESYNTH_LOG_LEVEL environment variable.
    log_dir : Path, optional
        Directory for log files. Defaults to ~/.typesynth/logs/
    console_output : bool
        If True, also log to stderr. Default False.
    quiet : bool
        If True, suppress console output entirely. Default False.

    Returns
    -------
    Path
        Path to the log file being written to.
    """
    global _log_file_path, _session_id

    _session_id = generate_session_id()

    if level is None:
        level = os.getenv("TYPESYNTH_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_dir is None:
        log_dir = get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / generate_log_filename(_session_id)
    _log_file_path = log_file

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Clear any existing handlers and filters
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for f in root_logger.filters[:]:
        root_logger.removeFilter(f)

    root_logger.setLevel(log_level)
    root_logger.addFilter(SessionIdFilter(_session_id))

    # File handler (no rotation - each session gets its own file)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(SessionFormatter(FILE_LOG_FORMAT, LOG_DATE_FORMAT))
    root_logger.addHandler(file_handler)

    if console_output and not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(SessionFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        root_logger.addHandler(console_handler)

    # Avoid duplicate records on the root logger
    root_logger.propagate = False

    symlink_path = log_dir / SYMLINK_NAME
    try:
        if symlink_path.is_symlink() or symlink_path.exists():
            symlink_path.unlink()
        symlink_path.symlink_to(log_file.name)
    except OSError:
        # Symlink creation may fail on some systems (e.g., Windows without admin)
        pass

    root_logger.info("=" * 80)
    root_logger.info("typesynth logging session started")
    root_logger.info(f"  Session ID: {_session_id}")
    root_logger.info(f"  Log file: {log_file}")
    root_logger.info(f"  Log level: {level.upper()}")
    root_logger.info("=" * 80)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the ``typesynth`` namespace."""
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def get_current_log_file() -> Optional[Path]:
    """Return the path to the current log file, if logging is initialised."""
    return _log_file_path


def get_session_id() -> Optional[str]:
    """Return the current session ID, if logging is initialised."""
    return _session_id


# ============================================================================
# Logging Helper Functions - Structured Logging
# ============================================================================

def log_build_start(
    logger: logging.Logger,
    source: str,
    type_names: list[str],
) -> None:
    """Log the start of a document build."""
    logger.info("-" * 60)
    logger.info("BUILD START")
    logger.info(f"  Source: {source}")
    logger.info(f"  Types: {', '.join(type_names) if type_names else '(all)'}")
    logger.info("-" * 60)


def log_build_complete(
    logger: logging.Logger,
    schema_count: int,
    diagnostics: list[str],
) -> None:
    """Log a build summary including any contained failures."""
    logger.info("-" * 60)
    logger.info("BUILD COMPLETE")
    logger.info(f"  Schemas: {schema_count}")
    logger.info(f"  Diagnostics: {len(diagnostics)}")
    for line in diagnostics:
        logger.warning(f"  {line}")
    logger.info("-" * 60)


def log_schema_entry(
    logger: logging.Logger,
    name: str,
    rendered: str,
    truncate_at: int = 1500,
) -> None:
    """Log a finalized schema entry."""
    if len(rendered) > truncate_at:
        rendered = rendered[:truncate_at] + f"... [TRUNCATED, {len(rendered)} chars total]"
    logger.debug(f"SCHEMA ({name}):\n{rendered}")
