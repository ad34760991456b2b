"""Headless play scene that drives a cat frame by frame.

The scene stands in for the rendered game: it observes the surroundings,
hands them to the cat, and moves the cat according to the returned
movement command. Only the cat's public interface is used.
"""

from typing import List, Optional
import logging
import math

from catmind.config import ArenaConfig
from catmind.core.schemas import ActionResult, AnimationCommand, ExternalState, Movement
from catmind.core.time_manager import GameTimeManager
from catmind.game.toy import Toy, ToyType
from catmind.mind.actions import validate_action_coverage
from catmind.mind.cat_core import Cat

logger = logging.getLogger(__name__)

# Pixels per second used when a moving command carries no speed
DEFAULT_SPEED = 100.0


class PlayScene:
    """A cat, an optional toy and a shared clock."""

    def __init__(self, cat: Cat, time_manager: GameTimeManager,
                 arena: Optional[ArenaConfig] = None, toy: Optional[Toy] = None,
                 user_present: bool = True):
        """Initialize the scene.

        Args:
            cat: The cat to drive
            time_manager: Clock shared with the cat
            arena: Play area; defaults to 800x600 with the cat in the middle
            toy: Toy already placed in the scene
            user_present: Whether the user is watching
        """
        validate_action_coverage(cat.calculator.config)

        self.cat = cat
        self.time_manager = time_manager
        self.arena = arena or ArenaConfig()
        self.toy = toy
        self.user_present = user_present

        self.cat_x = self.arena.start_x
        self.cat_y = self.arena.start_y
        self.flip_x = False
        self.current_animation: Optional[AnimationCommand] = AnimationCommand(animation_key="idle", repeat=-1)
        self.frame_count = 0

        self.time_manager.reset()

    def place_toy(self, x: float, y: float, toy_type: ToyType = ToyType.BALL) -> Toy:
        self.toy = Toy(toy_type=toy_type, x=x, y=y)
        return self.toy

    def move_toy(self, x: float, y: float) -> Optional[Toy]:
        if self.toy is not None:
            self.toy = self.toy.move_to(x, y)
        return self.toy

    def remove_toy(self) -> None:
        self.toy = None

    def pet(self, intensity: float = 1.0) -> None:
        self.cat.pet_by_user(intensity)

    def observe(self) -> ExternalState:
        """Build this frame's external facts."""
        if self.toy is None:
            return ExternalState(toy_presence=False, user_presence=self.user_present)

        return ExternalState(
            toy_presence=True,
            toy_distance=math.hypot(self.toy.x - self.cat_x, self.toy.y - self.cat_y),
            toy_type=self.toy.toy_type.value,
            user_presence=self.user_present,
            is_playing=self.toy.is_moving
        )

    def step(self) -> Optional[ActionResult]:
        """Run one frame."""
        delta_time = self.time_manager.get_delta_time()
        external_state = self.observe()

        toy_x = self.toy.x if self.toy is not None else None
        toy_y = self.toy.y if self.toy is not None else None
        result = self.cat.update(external_state, self.cat_x, self.cat_y, toy_x, toy_y)

        if result is not None and result.movement is not None:
            self._apply_movement(result.movement, delta_time)

        if self.toy is not None and self.toy.is_moving:
            self.toy = self.toy.settle()

        self.time_manager.update()
        self.frame_count += 1
        return result

    def _apply_movement(self, movement: Movement, delta_time: float) -> None:
        if movement.delta_x is not None and movement.delta_y is not None and not movement.is_stationary:
            speed = movement.speed or DEFAULT_SPEED
            distance = math.hypot(movement.delta_x, movement.delta_y)
            # Never overshoot the target
            travel = min(distance, speed * delta_time / 1000)
            self.cat_x += movement.delta_x / distance * travel
            self.cat_y += movement.delta_y / distance * travel
            self.cat_x = max(0.0, min(self.arena.width, self.cat_x))
            self.cat_y = max(0.0, min(self.arena.height, self.cat_y))

        if movement.flip_x is not None:
            self.flip_x = movement.flip_x

        commands: List[AnimationCommand] = movement.animation_commands
        if commands:
            self.current_animation = commands[0]
