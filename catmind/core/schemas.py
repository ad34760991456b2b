"""Core schemas for the catmind project."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from catmind.core.behavior_config import WeightedLinear

INTERNAL_AXES = ("bonding", "playfulness", "fear")
EXTERNAL_FACTS = ("user_presence", "toy_presence", "is_playing", "toy_near")

# Toy counts as "near" below this distance
TOY_NEAR_DISTANCE = 100.0


def clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class InternalState(BaseModel):
    """Physiological and emotional state of the cat.

    Every axis lives in [-1, 1]. Instances are immutable; all update
    methods return a new state with the result clamped into range.
    """
    model_config = ConfigDict(frozen=True)

    bonding: float = Field(ge=-1.0, le=1.0)
    playfulness: float = Field(ge=-1.0, le=1.0)
    fear: float = Field(ge=-1.0, le=1.0)

    @classmethod
    def create_default(cls) -> "InternalState":
        """A wary stranger: no bond, neutral play drive, maximum fear."""
        return cls(bonding=-1.0, playfulness=0.0, fear=1.0)

    def update_bonding(self, amount: float) -> "InternalState":
        return self.model_copy(update={"bonding": clamp(self.bonding + amount)})

    def update_playfulness(self, amount: float) -> "InternalState":
        return self.model_copy(update={"playfulness": clamp(self.playfulness + amount)})

    def update_fear(self, amount: float) -> "InternalState":
        return self.model_copy(update={"fear": clamp(self.fear + amount)})

    def decrease_playfulness(self, amount: float = 0.0001) -> "InternalState":
        return self.update_playfulness(-amount)

    def apply_changes(self, changes: Mapping[str, float], time_factor: float = 1.0) -> "InternalState":
        """Add scaled per-axis changes to the state.

        Args:
            changes: Per-second deltas keyed by axis name. Unknown keys are ignored.
            time_factor: Multiplier applied to every delta (elapsed seconds)

        Returns:
            New clamped internal state
        """
        values = self.as_dict()
        for axis in INTERNAL_AXES:
            if axis in changes:
                values[axis] = clamp(values[axis] + changes[axis] * time_factor)
        return InternalState(**values)

    def apply_external_influence(
        self,
        external_state: "ExternalState",
        influence_config: Mapping[str, "WeightedLinear"],
        time_factor: float
    ) -> "InternalState":
        """Apply the influence of the surroundings over an elapsed interval.

        Args:
            external_state: Current situational facts
            influence_config: Weighted-linear section keyed by internal axis,
                producing a per-second delta from 0/1-encoded external facts
            time_factor: Elapsed time in seconds

        Returns:
            New clamped internal state
        """
        inputs = external_state.as_inputs()
        changes = {
            axis: section.evaluate(inputs)
            for axis, section in influence_config.items()
        }
        return self.apply_changes(changes, time_factor)

    def as_dict(self) -> Dict[str, float]:
        return {axis: getattr(self, axis) for axis in INTERNAL_AXES}


class ExternalState(BaseModel):
    """Situational snapshot of the cat's surroundings, rebuilt every frame."""
    model_config = ConfigDict(frozen=True)

    toy_presence: bool = False
    toy_distance: float = Field(default=0.0, ge=0.0)  # only meaningful with a toy
    toy_type: Optional[str] = None
    user_presence: bool = True
    is_playing: bool = False

    @classmethod
    def create_default(cls) -> "ExternalState":
        return cls()

    def with_toy(self, presence: bool, distance: float = 0.0, toy_type: Optional[str] = None) -> "ExternalState":
        return self.model_copy(update={
            "toy_presence": presence,
            "toy_distance": distance,
            "toy_type": toy_type
        })

    def with_user(self, presence: bool) -> "ExternalState":
        return self.model_copy(update={"user_presence": presence})

    def with_playing(self, is_playing: bool) -> "ExternalState":
        return self.model_copy(update={"is_playing": is_playing})

    def as_inputs(self) -> Dict[str, float]:
        """Encode the facts as 0/1 inputs for the weighted-linear sections."""
        toy_near = self.toy_presence and self.toy_distance < TOY_NEAR_DISTANCE
        return {
            "user_presence": 1.0 if self.user_presence else 0.0,
            "toy_presence": 1.0 if self.toy_presence else 0.0,
            "is_playing": 1.0 if self.is_playing else 0.0,
            "toy_near": 1.0 if toy_near else 0.0
        }


class AnimationCommand(BaseModel):
    """Request for the renderer to play an animation.

    repeat: -1 loops forever, 0 plays once, n plays n+1 times.
    """
    model_config = ConfigDict(frozen=True)

    animation_key: str
    repeat: int = Field(default=-1, ge=-1)


class Movement(BaseModel):
    """Movement command produced by an action for one frame."""
    model_config = ConfigDict(frozen=True)

    delta_x: Optional[float] = None
    delta_y: Optional[float] = None
    speed: Optional[float] = None
    flip_x: Optional[bool] = None
    animation_commands: List[AnimationCommand] = Field(default_factory=list)

    @property
    def is_stationary(self) -> bool:
        return not self.delta_x and not self.delta_y


class ActionResult(BaseModel):
    """What the cat hands back to its host for a single frame."""
    model_config = ConfigDict(frozen=True)

    internal_state_change: Optional[Dict[str, float]] = None
    external_state_change: Optional[Dict[str, bool]] = None
    movement: Optional[Movement] = None
