"""Global test configuration and lightweight fixtures.

Seeds RNGs for more deterministic behavior, resets the leak counter between
tests, and marks everything under tests/property with the 'property' marker.
"""

import os
import random
from pathlib import Path

import numpy as np
import pytest

from layertape import DebugConfig


def pytest_sessionstart(session: pytest.Session) -> None:
    """Seed common RNGs to improve test determinism."""
    seed = int(os.environ.get("LAYERTAPE_TEST_SEED", "12345"))
    random.seed(seed)
    np.random.seed(seed)


@pytest.fixture(autouse=True)
def reset_debug_config():
    """Run every test with finalizer checks on and no recorded leaks."""
    DebugConfig.reset()
    DebugConfig.set_finalizer_checks(True)
    yield
    DebugConfig.reset()


def pytest_collection_modifyitems(session: pytest.Session, config: pytest.Config, items: list) -> None:
    """Auto-mark tests under tests/property with the 'property' marker.

    CI selects property tests via `-m property`.
    """
    for item in items:
        p = Path(str(item.fspath))
        if "property" in p.parts and "tests" in p.parts:
            item.add_marker(pytest.mark.property)
