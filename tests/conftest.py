"""
Pytest fixtures for the pity roll test suite.

Provides temporary data directories, store instances, sample configurations
and CLI instances wired to deterministic random sources.
"""

import pytest

from src.data_models import Configuration, RollState
from src.main import RollCLI
from src.storage import ConfigStore, StateStore, STATE_DB_NAME
from tests.helpers import HighRandom, LowRandom


# =============================================================================
# STORAGE FIXTURES
# =============================================================================


@pytest.fixture
def data_dir(tmp_path):
    """An empty per-test data directory."""
    path = tmp_path / "roll"
    path.mkdir()
    return path


@pytest.fixture
def config_store(data_dir):
    return ConfigStore(data_dir)


@pytest.fixture
def state_store(data_dir):
    return StateStore(data_dir / STATE_DB_NAME)


# =============================================================================
# MODEL FIXTURES
# =============================================================================


@pytest.fixture
def pity_config():
    """10% base, +5% per failure, pity capped at 3, no variance."""
    return Configuration(name="test", chance=10, grace=5, pity=3, variance=0)


@pytest.fixture
def fresh_state():
    return RollState()


# =============================================================================
# CLI FIXTURES
# =============================================================================


@pytest.fixture
def make_cli(config_store, state_store):
    """Factory building a RollCLI over the temporary stores with a given RNG."""
    def _make(rng=None):
        return RollCLI(config_store=config_store, state_store=state_store, rng=rng or HighRandom())
    return _make


@pytest.fixture
def failing_cli(make_cli):
    """CLI whose every draw is the maximum, so decision rolls below 100% fail."""
    return make_cli(HighRandom())


@pytest.fixture
def succeeding_cli(make_cli):
    """CLI whose every draw is the minimum, so decision rolls above 0% succeed."""
    return make_cli(LowRandom())
