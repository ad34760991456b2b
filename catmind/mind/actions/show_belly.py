# catmind/mind/actions/show_belly.py
"""Show-belly action: the cat rolls over in front of someone it trusts."""

from typing import Dict

from catmind.core.cat_action import ActionContext, CatAction
from catmind.core.schemas import AnimationCommand, Movement


class ShowBellyAction(CatAction):
    """Stationary display of trust."""

    name = "show_belly"

    def execute(self, context: ActionContext) -> Movement:
        return Movement(
            delta_x=0.0,
            delta_y=0.0,
            animation_commands=[AnimationCommand(animation_key="show_belly", repeat=0)]
        )

    def get_internal_state_change(self) -> Dict[str, float]:
        return {
            "playfulness": 0.033,
            "bonding": 0.067,
            "fear": -0.067
        }
