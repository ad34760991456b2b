"""
Test helpers for deterministic cat simulation tests.

Provides utilities to:
1. Build behavior configurations with fixed action scores
2. Build cats with a seeded random source
3. Drive a cat frame by frame against a manual clock
"""

import random
from typing import Dict, Optional, Tuple

from catmind.core.behavior_config import BehaviorConfig, parse_behavior_config
from catmind.core.schemas import ActionResult, ExternalState, InternalState
from catmind.core.time_manager import GameTimeManager, ManualClock
from catmind.mind.cat_core import Cat
from catmind.mind.probability import ActionProbabilityCalculator
from catmind.mind.schemas import Personality, Preferences

NO_TOY = ExternalState(toy_presence=False, user_presence=True)


# =============================================================================
# CONFIGURATION HELPERS
# =============================================================================

def flat_config(
    scores: Dict[str, float],
    temperature: float = 1.0,
    minimum_probability: float = 0.0,
    duration: int = 1000
) -> BehaviorConfig:
    """
    Configuration whose actions score exactly the given bias values.

    No external influence is configured, so internal state only changes
    through decay and the running action.
    """
    return parse_behavior_config({
        "emotion_calculation": {
            "valence": {"inputs": ["bonding", "playfulness", "fear"], "weights": [0.5, 0.3, -0.6, 0.0]},
        },
        "actions": {
            name: {"inputs": [], "weights": [score], "duration": duration}
            for name, score in scores.items()
        },
        "probability_calculation": {
            "temperature": temperature,
            "minimum_probability": minimum_probability,
        },
    })


# =============================================================================
# CAT HELPERS
# =============================================================================

def make_cat(
    time_manager: GameTimeManager,
    config: Optional[BehaviorConfig] = None,
    state: Optional[InternalState] = None,
    seed: int = 0
) -> Cat:
    """Create a cat with a seeded random source."""
    rng = random.Random(seed)
    return Cat(
        id="cat-test",
        name="Mike",
        internal_state=state or InternalState.create_default(),
        external_state=ExternalState.create_default(),
        personality=Personality(),
        preferences=Preferences(),
        time_manager=time_manager,
        calculator=ActionProbabilityCalculator(config, rng=rng),
        rng=rng
    )


def run_frame(
    cat: Cat,
    clock: ManualClock,
    milliseconds: float = 16.0,
    external: ExternalState = NO_TOY,
    position: Tuple[float, float] = (400.0, 300.0),
    toy: Optional[Tuple[float, float]] = None
) -> Optional[ActionResult]:
    """
    Run one frame the way a host does: update the cat, then the clock.
    """
    clock.advance(milliseconds)
    toy_x, toy_y = toy if toy is not None else (None, None)
    result = cat.update(external, position[0], position[1], toy_x, toy_y)
    cat.time_manager.update()
    return result
