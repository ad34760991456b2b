"""Core Cat class that drives the behavior simulation.

This module implements the cat entity: it owns the internal and external
state, runs the action state machine, integrates time-based state change,
and produces one command per frame for the rendering layer.
"""

from typing import Dict, Optional, Union
from pathlib import Path
import logging
import math
import random
import uuid

from catmind.config import get_config
from catmind.core.cat_action import ActionContext
from catmind.core.schemas import ActionResult, ExternalState, InternalState
from catmind.core.time_manager import GameTimeManager
from catmind.mind.actions import get_action
from catmind.mind.probability import ActionProbabilityCalculator
from catmind.mind.schemas import (
    ActionRecord,
    CatSnapshot,
    CatStatus,
    Personality,
    Preferences,
)

logger = logging.getLogger(__name__)

DEFAULT_CAT_NAME = "Tanuki"


class Cat:
    """A cat whose behavior comes from its emotional state.

    The cat is either idle or performing an action. Each call to update()
    either continues the action in flight, re-aiming its movement, or picks
    a new action from the probability distribution of the current state.
    """

    def __init__(
        self,
        id: str,
        name: str,
        internal_state: InternalState,
        external_state: ExternalState,
        personality: Personality,
        preferences: Preferences,
        time_manager: GameTimeManager,
        calculator: Optional[ActionProbabilityCalculator] = None,
        rng: Optional[random.Random] = None
    ):
        """Initialize the cat.

        Args:
            id: Unique identifier
            name: Display name
            internal_state: Starting internal state
            external_state: Starting external state
            personality: Personality traits, persisted with the cat
            preferences: Preferences, persisted with the cat
            time_manager: Clock shared with the rest of the scene
            calculator: Probability calculator; built from the default config when None
            rng: Random source for petting reactions and action sampling
        """
        self.id = id
        self.name = name
        self.internal_state = internal_state
        self.external_state = external_state
        self.personality = personality
        self.preferences = preferences
        self.time_manager = time_manager
        self.rng = rng or random.Random()
        self.calculator = calculator or ActionProbabilityCalculator(rng=self.rng)
        self.current_action: Optional[ActionRecord] = None

        logger.info(f"Cat '{self.name}' created with bonding level {self.get_bonding_level()}")

    @classmethod
    def create_default(cls, time_manager: GameTimeManager, name: str = DEFAULT_CAT_NAME,
                       **kwargs) -> "Cat":
        """Create a wary, freshly met cat with default traits."""
        return cls(
            id=f"cat-{uuid.uuid4().hex[:12]}",
            name=name,
            internal_state=InternalState.create_default(),
            external_state=ExternalState.create_default(),
            personality=Personality(),
            preferences=Preferences(),
            time_manager=time_manager,
            **kwargs
        )

    @classmethod
    def from_snapshot(cls, snapshot: CatSnapshot, name: str, time_manager: GameTimeManager,
                      **kwargs) -> "Cat":
        """Rehydrate a cat from its persisted state.

        Raises:
            pydantic.ValidationError: If the stored values are out of range
        """
        return cls(
            id=f"cat-{uuid.uuid4().hex[:12]}",
            name=name,
            internal_state=snapshot.to_internal_state(),
            external_state=ExternalState.create_default(),
            personality=snapshot.personality,
            preferences=snapshot.preferences,
            time_manager=time_manager,
            **kwargs
        )

    def to_snapshot(self) -> CatSnapshot:
        return CatSnapshot(
            bonding=self.internal_state.bonding,
            playfulness=self.internal_state.playfulness,
            fear=self.internal_state.fear,
            personality=self.personality,
            preferences=self.preferences
        )

    def get_current_emotions(self) -> Dict[str, float]:
        return self.calculator.calculate_emotions(self.internal_state)

    def get_internal_state(self) -> InternalState:
        return self.internal_state

    def get_external_state(self) -> ExternalState:
        return self.external_state

    def get_current_action(self) -> Optional[ActionRecord]:
        return self.current_action

    def get_bonding_level(self) -> int:
        """Bonding on a 0-10 scale for the heart meter."""
        scaled = (self.internal_state.bonding + 1) * 5
        return math.floor(max(0.0, min(10.0, scaled)))

    def update(
        self,
        new_external_state: ExternalState,
        current_x: float,
        current_y: float,
        toy_x: Optional[float] = None,
        toy_y: Optional[float] = None
    ) -> Optional[ActionResult]:
        """Advance the cat by one frame.

        Args:
            new_external_state: Facts observed by the host this frame
            current_x: Cat position
            current_y: Cat position
            toy_x: Toy position, if there is a toy
            toy_y: Toy position, if there is a toy

        Returns:
            Movement for a continuing action, the full result of a newly
            selected action, or None if the selected action has no behavior
        """
        delta_time = self.time_manager.get_delta_time()
        current_time = self.time_manager.get_total_time()

        self.external_state = new_external_state
        self._update_internal_state_by_time(delta_time)

        context = ActionContext(current_x, current_y, toy_x, toy_y)

        if self.current_action is not None:
            elapsed = current_time - self.current_action.start_time
            if self.current_action.duration and elapsed < self.current_action.duration:
                return self._continue_current_action(context, delta_time)

            logger.debug(f"Action '{self.current_action.name}' finished after {elapsed:.0f}ms")
            self.current_action = None

        probabilities = self.calculator.calculate_action_probabilities(
            self.internal_state,
            self.external_state
        )
        selected_action = self.calculator.select_action(probabilities)

        return self._start_action(selected_action, context, current_time)

    def pet_by_user(self, intensity: float = 1.0) -> None:
        """React to being petted.

        A frightened cat mostly dislikes contact; a content cat bonds; an
        unhappy but unafraid cat only occasionally warms up a little.
        """
        valence = self.get_current_emotions().get("valence", 0.0)
        fear = self.internal_state.fear

        if fear > 0.5:
            if self.rng.random() < 0.7:
                self.internal_state = self.internal_state.update_bonding(-0.02 * intensity)
        elif valence >= -0.1:
            self.internal_state = self.internal_state.update_bonding(min(0.08 * intensity, 0.1))
        else:
            if self.rng.random() < 0.5:
                self.internal_state = self.internal_state.update_bonding(0.01 * intensity)

        logger.debug(f"Petted with intensity {intensity}: bonding now {self.internal_state.bonding:.3f}")

    def get_status(self) -> CatStatus:
        """Snapshot of everything a debug overlay displays."""
        elapsed = None
        if self.current_action is not None:
            elapsed = self.time_manager.get_total_time() - self.current_action.start_time

        return CatStatus(
            name=self.name,
            internal=self.internal_state,
            external=self.external_state,
            emotions=self.get_current_emotions(),
            bonding_level=self.get_bonding_level(),
            current_action=self.current_action,
            action_elapsed=elapsed
        )

    def save_state(self, path: Union[str, Path]) -> None:
        """Save the persistable state of the cat as JSON.

        Args:
            path: File to write
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_snapshot().model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Cat state saved to {path}")

    @classmethod
    def load_state(cls, path: Union[str, Path], name: str, time_manager: GameTimeManager,
                   **kwargs) -> Optional["Cat"]:
        """Load a cat saved with save_state().

        Returns:
            The restored cat, or None if there is no save file

        Raises:
            pydantic.ValidationError: If the file holds malformed or out-of-range state
        """
        path = Path(path)
        if not path.exists():
            logger.warning(f"Save file not found: {path}")
            return None

        snapshot = CatSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
        logger.info(f"Cat state loaded from {path}")
        return cls.from_snapshot(snapshot, name, time_manager, **kwargs)

    def _update_internal_state_by_time(self, delta_time: float) -> None:
        """Apply natural decay and the influence of the surroundings."""
        seconds = delta_time / 1000
        decay = get_config().simulation.playfulness_decay_per_second * seconds

        self.internal_state = self.internal_state.decrease_playfulness(decay)
        self.internal_state = self.internal_state.apply_external_influence(
            self.external_state,
            self.calculator.config.external_state_influence,
            seconds
        )

    def _continue_current_action(self, context: ActionContext, delta_time: float) -> Optional[ActionResult]:
        """Re-aim the action in flight and apply its per-second effects."""
        action = get_action(self.current_action.name)
        if action is None:
            return None

        changes = action.get_internal_state_change()
        if changes:
            self.internal_state = self.internal_state.apply_changes(changes, delta_time / 1000)

        return ActionResult(movement=action.execute(context))

    def _start_action(self, action_name: str, context: ActionContext,
                      current_time: float) -> Optional[ActionResult]:
        action = get_action(action_name)
        action_config = self.calculator.get_action_config(action_name)

        if action is None or action_config is None:
            logger.warning(f"No behavior available for action: {action_name}")
            return None

        self.current_action = ActionRecord(
            name=action_name,
            start_time=current_time,
            duration=action_config.duration or 0
        )
        logger.debug(f"Cat '{self.name}' started action '{action_name}' at {current_time:.0f}ms")

        # Effects are applied per frame while the action continues, not here
        return action.create_action_result(context)
