"""
Pytest configuration file for the hpcreport test suite.

Provides:
- Loguru-to-caplog bridge so tests can assert on log output
- ``hpc_project`` fixture building tix/mix/source trees under ``tmp_path``
- ``memory_fs`` fixture with an in-memory filesystem provider
"""

import contextlib
import logging
import sys
from pathlib import Path

# Add the src directory to the Python path
src_path = str(Path(__file__).parent.parent / "src")
sys.path.insert(0, src_path)

import pytest
from loguru import logger

from tests.utils import HpcProject, MemoryFilesystemProvider


# ============================================================================
# LOGURU INTEGRATION FIXTURES
# ============================================================================

@pytest.fixture(autouse=True, scope="function")
def capture_loguru_logs_globally(caplog):
    """Forward Loguru records into pytest's caplog for the duration of a test."""

    class PropagateHandler(logging.Handler):
        def emit(self, record):
            logging.getLogger(record.name or "hpcreport").handle(record)

    caplog.set_level(logging.DEBUG)

    handler_id = logger.add(
        PropagateHandler(),
        format="{message}",
        level="DEBUG",
        catch=True,
        enqueue=False,
    )

    yield

    with contextlib.suppress(ValueError):
        logger.remove(handler_id)


# ============================================================================
# FILESYSTEM FIXTURES
# ============================================================================

@pytest.fixture
def hpc_project(tmp_path, monkeypatch) -> HpcProject:
    """Empty project rooted at ``tmp_path``; the working directory is changed to it."""
    monkeypatch.chdir(tmp_path)
    return HpcProject(root=tmp_path)


@pytest.fixture
def memory_fs() -> MemoryFilesystemProvider:
    return MemoryFilesystemProvider()
