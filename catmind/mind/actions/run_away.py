# catmind/mind/actions/run_away.py
"""Run-away action: flee to the safest corner of the play area."""

from typing import Dict, List, Tuple
import math

from catmind.core.cat_action import ActionContext, CatAction
from catmind.core.schemas import AnimationCommand, Movement


class RunAwayAction(CatAction):
    """
    Runs to the corner farthest from the toy, or from the cat itself when
    there is no toy, and cowers there once it arrives.
    """

    name = "run_away"

    game_width = 800.0
    game_height = 600.0
    corner_margin = 50.0
    arrival_distance = 30.0
    escape_speed = 150.0

    def corners(self) -> List[Tuple[float, float]]:
        """Corners in scan order: top-left, top-right, bottom-left, bottom-right."""
        margin = self.corner_margin
        return [
            (margin, margin),
            (self.game_width - margin, margin),
            (margin, self.game_height - margin),
            (self.game_width - margin, self.game_height - margin)
        ]

    def select_corner(self, context: ActionContext) -> Tuple[float, float]:
        if context.has_toy():
            origin_x, origin_y = context.toy_x, context.toy_y
        else:
            origin_x, origin_y = context.current_x, context.current_y

        corners = self.corners()
        target = corners[0]
        max_distance = -1.0
        # Strict comparison: the first corner reaching the maximum wins ties
        for corner in corners:
            distance = math.hypot(corner[0] - origin_x, corner[1] - origin_y)
            if distance > max_distance:
                max_distance = distance
                target = corner
        return target

    def execute(self, context: ActionContext) -> Movement:
        target_x, target_y = self.select_corner(context)
        delta_x, delta_y = context.get_movement_delta_to(target_x, target_y)

        if math.hypot(delta_x, delta_y) <= self.arrival_distance:
            return Movement(
                delta_x=0.0,
                delta_y=0.0,
                speed=0.0,
                flip_x=self.should_flip_x(0.0),
                animation_commands=[AnimationCommand(animation_key="scared", repeat=-1)]
            )

        return Movement(
            delta_x=delta_x,
            delta_y=delta_y,
            speed=self.escape_speed,
            flip_x=self.should_flip_x(delta_x),
            animation_commands=[AnimationCommand(animation_key="escape", repeat=-1)]
        )

    def get_internal_state_change(self) -> Dict[str, float]:
        return {}
