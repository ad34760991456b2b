"""The closed set of cat actions, keyed by their configuration name."""

from typing import Dict, Optional, Type

from catmind.core.behavior_config import BehaviorConfig, UnknownActionError
from catmind.core.cat_action import CatAction
from catmind.mind.actions.play_with_toy import PlayWithToyAction
from catmind.mind.actions.run_away import RunAwayAction
from catmind.mind.actions.show_belly import ShowBellyAction
from catmind.mind.actions.sit import SitAction

ACTION_CLASSES: Dict[str, Type[CatAction]] = {
    cls.name: cls
    for cls in (ShowBellyAction, PlayWithToyAction, SitAction, RunAwayAction)
}

ACTION_REGISTRY: Dict[str, CatAction] = {
    name: cls() for name, cls in ACTION_CLASSES.items()
}


def get_action(name: str) -> Optional[CatAction]:
    """Look up the behavior for an action name, or None if there is none."""
    return ACTION_REGISTRY.get(name)


def validate_action_coverage(config: BehaviorConfig) -> None:
    """Make sure every configured action has a behavior implementation.

    Raises:
        UnknownActionError: If the configuration names an unimplemented action
    """
    missing = [name for name in config.actions if name not in ACTION_REGISTRY]
    if missing:
        raise UnknownActionError(
            f"No behavior implemented for configured actions: {', '.join(missing)}"
        )


__all__ = [
    "ACTION_CLASSES",
    "ACTION_REGISTRY",
    "CatAction",
    "PlayWithToyAction",
    "RunAwayAction",
    "ShowBellyAction",
    "SitAction",
    "get_action",
    "validate_action_coverage",
]
