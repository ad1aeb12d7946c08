"""Test configuration for pytest."""

import logging
import os

import pytest

from tensormeta.metadata import to_metadata


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep tensormeta loggers at WARNING or above during tests."""
    os.environ["TENSORMETA_LOG_LEVEL"] = "WARNING"

    for logger_name in ["tensormeta.bench.loop_iteration", "tensormeta.metadata.array", "tensormeta.config"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


@pytest.fixture
def shape():
    """Rank-3 shape used across container tests."""
    return to_metadata(2, 3, 4)
