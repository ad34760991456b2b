"""Toy entity placed in the play area."""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ToyType(str, Enum):
    BALL = "ball"
    FEATHER = "feather"
    MOUSE = "mouse"
    LASER = "laser"


TOY_CHARACTERISTICS: Dict[ToyType, Dict[str, Any]] = {
    ToyType.BALL: {"movement_type": "bounce", "preferred_speed": 0.5, "attractiveness": 0.7},
    ToyType.FEATHER: {"movement_type": "flutter", "preferred_speed": 0.3, "attractiveness": 0.9},
    ToyType.MOUSE: {"movement_type": "scurry", "preferred_speed": 0.8, "attractiveness": 1.0},
    ToyType.LASER: {"movement_type": "dart", "preferred_speed": 1.0, "attractiveness": 1.2},
}


class Toy(BaseModel):
    """A toy at a position. Moving it returns a new toy."""
    model_config = ConfigDict(frozen=True)

    toy_type: ToyType = ToyType.BALL
    x: float
    y: float
    attractiveness: float = Field(default=1.0, ge=0.0)
    is_moving: bool = False

    def move_to(self, x: float, y: float) -> "Toy":
        return self.model_copy(update={"x": x, "y": y, "is_moving": True})

    def settle(self) -> "Toy":
        return self.model_copy(update={"is_moving": False})

    def get_characteristics(self) -> Dict[str, Any]:
        return dict(TOY_CHARACTERISTICS[self.toy_type])
