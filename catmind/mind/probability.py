"""Action probability calculation.

Turns a snapshot of the cat's state into emotions, raw action scores, a
softmax distribution over actions, and finally a sampled action name. All
methods are pure apart from drawing from the calculator's random source.
"""

from typing import Dict, Optional
import logging
import random

import numpy as np

from catmind.core.behavior_config import (
    ActionDefinition,
    BehaviorConfig,
    get_default_behavior_config,
    validate_behavior_config,
)
from catmind.core.schemas import ExternalState, InternalState

logger = logging.getLogger(__name__)

PLAY_WITH_TOY = "play_with_toy"
# Highest raw score play_with_toy may have while there is no toy
NO_TOY_PLAY_SCORE_CAP = 0.1
# Effective floor when none is configured; softmax underflow must not yield 0
SMALLEST_PROBABILITY = float(np.finfo(float).tiny)


class ActionProbabilityCalculator:
    """Evaluates the behavior configuration against the cat's state."""

    def __init__(self, config: Optional[BehaviorConfig] = None, rng: Optional[random.Random] = None):
        """Initialize the calculator.

        Args:
            config: Behavior configuration; the packaged default when None
            rng: Random source used by select_action
        """
        self.config = config or get_default_behavior_config()
        self.rng = rng or random.Random()

    def calculate_emotions(self, internal_state: InternalState) -> Dict[str, float]:
        """Combine the three internal axes into the configured emotions."""
        state = internal_state.as_dict()
        return {
            emotion: section.evaluate(state)
            for emotion, section in self.config.emotion_calculation.items()
        }

    def calculate_action_scores(self, internal_state: InternalState,
                                external_state: ExternalState) -> Dict[str, float]:
        """Raw action scores before softmax."""
        emotions = self.calculate_emotions(internal_state)
        scores = {
            name: action.evaluate(emotions)
            for name, action in self.config.actions.items()
        }

        # A cat can't want to play with a toy that isn't there
        if not external_state.toy_presence and PLAY_WITH_TOY in scores:
            scores[PLAY_WITH_TOY] = min(scores[PLAY_WITH_TOY], NO_TOY_PLAY_SCORE_CAP)

        return scores

    def calculate_action_probabilities(self, internal_state: InternalState,
                                       external_state: ExternalState) -> Dict[str, float]:
        """Probability of choosing each action.

        Returns:
            Mapping in configuration order; sums to 1 and every entry is at
            least the configured minimum probability
        """
        scores = self.calculate_action_scores(internal_state, external_state)
        return self._apply_softmax(scores)

    def _apply_softmax(self, scores: Dict[str, float]) -> Dict[str, float]:
        params = self.config.probability_calculation
        names = list(scores)
        values = np.array([scores[name] for name in names], dtype=float) / params.temperature

        # Shift by the maximum so exp never overflows
        exp_values = np.exp(values - values.max())
        probabilities = exp_values / exp_values.sum()

        floor = max(params.minimum_probability, SMALLEST_PROBABILITY)
        probabilities = self._apply_floor(probabilities, floor)
        return {name: float(p) for name, p in zip(names, probabilities)}

    @staticmethod
    def _apply_floor(probabilities: np.ndarray, floor: float) -> np.ndarray:
        """Raise entries below `floor` to it and renormalize to sum 1.

        Only the entries above the floor are rescaled, so renormalizing never
        pushes a floored entry back under the floor. Repeats until no other
        entry falls below it.
        """
        floored = probabilities < floor
        result = probabilities
        while floored.any():
            if floored.all():
                return np.full_like(probabilities, 1.0 / len(probabilities))

            free_mass = 1.0 - floor * floored.sum()
            rest = np.where(floored, 0.0, probabilities)
            result = np.where(floored, floor, rest / rest.sum() * free_mass)

            newly_floored = (result < floor) & ~floored
            if not newly_floored.any():
                break
            floored |= newly_floored

        return result / result.sum()

    def select_action(self, probabilities: Dict[str, float]) -> str:
        """Sample an action name from a probability distribution.

        Args:
            probabilities: Action probabilities in the order to scan them

        Returns:
            The sampled action; the first action if rounding leaves the draw
            unconsumed
        """
        draw = self.rng.random()
        cumulative = 0.0

        for name, probability in probabilities.items():
            cumulative += probability
            if draw < cumulative:
                return name

        return next(iter(probabilities))

    def get_action_config(self, action_name: str) -> Optional[ActionDefinition]:
        return self.config.actions.get(action_name)

    def update_config(self, config: BehaviorConfig) -> None:
        """Swap in a new configuration (debug hook)."""
        self.config = validate_behavior_config(config)
        logger.info(f"Behavior config replaced ({len(config.actions)} actions)")
