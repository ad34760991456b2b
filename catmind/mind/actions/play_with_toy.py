# catmind/mind/actions/play_with_toy.py
"""Play-with-toy action: chase the toy, then paw at it."""

from typing import Dict

from catmind.core.cat_action import ActionContext, CatAction
from catmind.core.schemas import AnimationCommand, Movement


class PlayWithToyAction(CatAction):
    """
    Chases the toy until it is within catching distance, then stops and
    plays with it while facing it.

    Without a toy the cat just idles in place.
    """

    name = "play_with_toy"

    catch_distance = 60.0
    chase_speed = 200.0

    def execute(self, context: ActionContext) -> Movement:
        if not context.has_toy():
            return Movement(
                delta_x=0.0,
                delta_y=0.0,
                animation_commands=[AnimationCommand(animation_key="idle", repeat=-1)]
            )

        delta_x, delta_y = context.get_toy_movement_delta()

        if context.get_toy_distance() <= self.catch_distance:
            # Close enough: stay put and face the toy
            return Movement(
                delta_x=0.0,
                delta_y=0.0,
                speed=0.0,
                flip_x=self.should_flip_x(delta_x),
                animation_commands=[AnimationCommand(animation_key="play", repeat=-1)]
            )

        return Movement(
            delta_x=delta_x,
            delta_y=delta_y,
            speed=self.chase_speed,
            flip_x=self.should_flip_x(delta_x),
            animation_commands=[AnimationCommand(animation_key="chase", repeat=-1)]
        )

    def get_internal_state_change(self) -> Dict[str, float]:
        return {
            "playfulness": -0.033,
            "bonding": 0.033,
            "fear": -0.033
        }

    def get_external_state_change(self) -> Dict[str, bool]:
        return {"is_playing": True}
