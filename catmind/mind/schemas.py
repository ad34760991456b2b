"""Schemas for the cat entity."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

from catmind.core.schemas import ExternalState, InternalState


class Personality(BaseModel):
    """Personality traits of a cat, each in [0, 1]."""
    model_config = ConfigDict(frozen=True)

    social: float = Field(default=0.7, ge=0.0, le=1.0)
    active: float = Field(default=0.8, ge=0.0, le=1.0)
    bold: float = Field(default=0.6, ge=0.0, le=1.0)
    dependent: float = Field(default=0.5, ge=0.0, le=1.0)
    friendly: float = Field(default=0.8, ge=0.0, le=1.0)


class Preferences(BaseModel):
    """What a cat likes to play with and how it likes to move."""
    model_config = ConfigDict(frozen=True)

    toy_types: List[str] = Field(default_factory=lambda: ["ball", "feather", "mouse"])
    movement_speed: float = Field(default=0.7, ge=0.0, le=1.0)
    movement_directions: List[str] = Field(default_factory=lambda: ["horizontal", "vertical"])
    randomness: float = Field(default=0.6, ge=0.0, le=1.0)


class ActionRecord(BaseModel):
    """The action currently in flight."""
    model_config = ConfigDict(frozen=True)

    name: str
    start_time: float  # simulation milliseconds
    duration: int = 0  # 0 means the action is reconsidered on the next frame


class CatSnapshot(BaseModel):
    """Persistable state of a cat."""
    bonding: float = Field(ge=-1.0, le=1.0)
    playfulness: float = Field(ge=-1.0, le=1.0)
    fear: float = Field(ge=-1.0, le=1.0)
    personality: Personality = Field(default_factory=Personality)
    preferences: Preferences = Field(default_factory=Preferences)

    def to_internal_state(self) -> InternalState:
        return InternalState(bonding=self.bonding, playfulness=self.playfulness, fear=self.fear)


class CatStatus(BaseModel):
    """Everything a debug overlay shows about a cat."""
    name: str
    internal: InternalState
    external: ExternalState
    emotions: Dict[str, float] = Field(default_factory=dict)
    bonding_level: int = Field(ge=0, le=10)
    current_action: Optional[ActionRecord] = None
    action_elapsed: Optional[float] = None
