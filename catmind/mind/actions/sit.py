# catmind/mind/actions/sit.py
"""Sit action."""

from typing import Dict

from catmind.core.cat_action import ActionContext, CatAction
from catmind.core.schemas import AnimationCommand, Movement


class SitAction(CatAction):
    name = "sit"

    def execute(self, context: ActionContext) -> Movement:
        return Movement(
            delta_x=0.0,
            delta_y=0.0,
            animation_commands=[AnimationCommand(animation_key="sit", repeat=-1)]
        )

    def get_internal_state_change(self) -> Dict[str, float]:
        return {
            "playfulness": 0.033,
            "fear": -0.033
        }
