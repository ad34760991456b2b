"""
Pytest configuration for catmind tests.
"""

import random
import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


# =============================================================================
# VALIDATION ON TEST RUN
# =============================================================================

def pytest_configure(config):
    """
    Validate the packaged behavior configuration before running tests.

    A configuration that references unknown inputs or unimplemented actions
    surfaces as a collection failure instead of silent zero contributions.
    """
    from catmind.core.behavior_config import BehaviorConfigError, load_behavior_config
    from catmind.mind.actions import validate_action_coverage

    try:
        validate_action_coverage(load_behavior_config())
    except BehaviorConfigError as e:
        pytest.fail(f"Behavior configuration validation failed:\n{e}", pytrace=False)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    from catmind.core.time_manager import ManualClock
    return ManualClock()


@pytest.fixture
def time_manager(clock):
    from catmind.core.time_manager import GameTimeManager
    return GameTimeManager(clock)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def calculator(rng):
    from catmind.mind.probability import ActionProbabilityCalculator
    return ActionProbabilityCalculator(rng=rng)
