"""Base action class for the cat behavior simulation.

This module provides the foundation for all cat actions: the context an
action is executed in and the contract every action implements.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple
import math

from catmind.core.schemas import ActionResult, Movement


class ActionContext:
    """Positions an action needs to decide how the cat moves this frame."""

    def __init__(self, current_x: float, current_y: float,
                 toy_x: Optional[float] = None, toy_y: Optional[float] = None):
        self.current_x = current_x
        self.current_y = current_y
        self.toy_x = toy_x
        self.toy_y = toy_y

    @classmethod
    def without_toy(cls, current_x: float, current_y: float) -> "ActionContext":
        return cls(current_x, current_y)

    @classmethod
    def with_toy(cls, current_x: float, current_y: float, toy_x: float, toy_y: float) -> "ActionContext":
        return cls(current_x, current_y, toy_x, toy_y)

    def has_toy(self) -> bool:
        return self.toy_x is not None and self.toy_y is not None

    def get_toy_distance(self) -> float:
        """Euclidean distance to the toy, or infinity when there is none."""
        if not self.has_toy():
            return math.inf
        return math.hypot(self.toy_x - self.current_x, self.toy_y - self.current_y)

    def get_toy_movement_delta(self) -> Optional[Tuple[float, float]]:
        if not self.has_toy():
            return None
        return self.get_movement_delta_to(self.toy_x, self.toy_y)

    def get_movement_delta_to(self, target_x: float, target_y: float) -> Tuple[float, float]:
        return target_x - self.current_x, target_y - self.current_y


class CatAction(ABC):
    """Base class for all cat actions.

    Actions are stateless: the same instance is reused for every frame and
    every cat. Subclasses set `name` to the key used in the behavior
    configuration.
    """

    name: str = ""

    @abstractmethod
    def execute(self, context: ActionContext) -> Movement:
        """Compute this frame's movement.

        Args:
            context: Current positions of the cat and toy

        Returns:
            Movement command for the renderer
        """
        pass

    def get_internal_state_change(self) -> Optional[Dict[str, float]]:
        """Per-second internal state deltas while the action runs."""
        return None

    def get_external_state_change(self) -> Optional[Dict[str, bool]]:
        """External facts the action declares about itself."""
        return None

    def create_action_result(self, context: ActionContext) -> ActionResult:
        return ActionResult(
            internal_state_change=self.get_internal_state_change(),
            external_state_change=self.get_external_state_change(),
            movement=self.execute(context)
        )

    def should_flip_x(self, delta_x: float) -> bool:
        # Sprites are drawn facing left, so mirror when heading right
        return delta_x > 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
