# tests/conftest.py
"""Shared fixtures: keep config and session logs inside tmp_path."""

import logging

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    from typesynth.config import get_config

    home = tmp_path / "typesynth-home"
    monkeypatch.setenv("TYPESYNTH_HOME_DIR", str(home))
    monkeypatch.delenv("TYPESYNTH_LOG_DIR", raising=False)
    monkeypatch.delenv("TYPESYNTH_LOG_LEVEL", raising=False)
    get_config.cache_clear()
    yield home
    get_config.cache_clear()

    # setup_logging() detaches the package logger from the root logger;
    # undo that so caplog keeps working in later tests.
    package_logger = logging.getLogger("typesynth")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    for f in package_logger.filters[:]:
        package_logger.removeFilter(f)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
