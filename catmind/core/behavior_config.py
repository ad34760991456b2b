"""Behavior configuration: weighted-linear sections that drive the cat.

The document has three weighted-linear sections and one scalar block:

- external_state_influence: external facts -> per-second internal state deltas
- emotion_calculation: internal state axes -> named emotions
- actions: emotions -> raw action scores, plus action durations
- probability_calculation: softmax temperature and probability floor

Each weighted-linear entry lists its inputs and a matching list of weights.
A weight with no corresponding input is the bias and is always added.
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal, Mapping, Optional, Union
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError

from catmind.core.schemas import EXTERNAL_FACTS, INTERNAL_AXES

logger = logging.getLogger(__name__)

DEFAULT_BEHAVIOR_PATH = Path(__file__).parent / "behavior.yaml"


class BehaviorConfigError(ValueError):
    """Raised when a behavior configuration is malformed."""
    pass


class UnknownInputError(BehaviorConfigError):
    """Raised when a section references an input that does not exist."""
    pass


class UnknownActionError(BehaviorConfigError):
    """Raised when a configured action has no behavior implementation."""
    pass


class WeightedLinear(BaseModel):
    """A weighted sum of named inputs plus a bias."""
    inputs: List[str] = Field(default_factory=list)
    weights: List[float] = Field(default_factory=list)

    @property
    def bias(self) -> float:
        if len(self.weights) > len(self.inputs):
            return self.weights[len(self.inputs)]
        return 0.0

    def evaluate(self, values: Mapping[str, float]) -> float:
        """Evaluate against the given input values.

        Inputs missing from `values` and inputs without a weight contribute 0.
        """
        result = 0.0
        for i, input_name in enumerate(self.inputs):
            weight = self.weights[i] if i < len(self.weights) else 0.0
            result += values.get(input_name, 0.0) * weight
        return result + self.bias


class ActionDefinition(WeightedLinear):
    """Scoring and timing of one action."""
    name: str = ""
    description: str = ""
    duration: Optional[int] = Field(default=None, ge=0)  # milliseconds


class ProbabilityConfig(BaseModel):
    """Softmax parameters."""
    method: Literal["softmax"] = "softmax"
    temperature: float = Field(default=1.0, gt=0.0)
    minimum_probability: float = Field(default=0.0, ge=0.0, lt=1.0)


class BehaviorConfig(BaseModel):
    """Complete behavior configuration."""
    external_state_influence: Dict[str, WeightedLinear] = Field(default_factory=dict)
    emotion_calculation: Dict[str, WeightedLinear] = Field(default_factory=dict)
    actions: Dict[str, ActionDefinition]
    probability_calculation: ProbabilityConfig = Field(default_factory=ProbabilityConfig)


def _check_section(section_name: str, entries: Mapping[str, WeightedLinear], allowed: set) -> None:
    for output, entry in entries.items():
        unknown = [name for name in entry.inputs if name not in allowed]
        if unknown:
            raise UnknownInputError(
                f"{section_name}.{output} references unknown inputs: {', '.join(unknown)}"
            )
        if len(entry.weights) > len(entry.inputs) + 1:
            raise BehaviorConfigError(
                f"{section_name}.{output} has {len(entry.weights)} weights for "
                f"{len(entry.inputs)} inputs (at most one bias allowed)"
            )


def validate_behavior_config(config: BehaviorConfig) -> BehaviorConfig:
    """Check that every section only references inputs that exist.

    Raises:
        BehaviorConfigError: If the configuration is inconsistent
    """
    unknown_axes = [
        name for name in config.external_state_influence if name not in INTERNAL_AXES
    ]
    if unknown_axes:
        raise BehaviorConfigError(
            f"external_state_influence targets unknown internal states: {', '.join(unknown_axes)}"
        )

    _check_section("external_state_influence", config.external_state_influence, set(EXTERNAL_FACTS))
    _check_section("emotion_calculation", config.emotion_calculation, set(INTERNAL_AXES))
    _check_section("actions", config.actions, set(config.emotion_calculation))

    if not config.actions:
        raise BehaviorConfigError("At least one action must be configured")

    minimum = config.probability_calculation.minimum_probability
    if minimum * len(config.actions) > 1.0:
        raise BehaviorConfigError(
            f"minimum_probability {minimum} is unreachable for {len(config.actions)} actions"
        )

    return config


def parse_behavior_config(data: dict) -> BehaviorConfig:
    """Build and validate a configuration from already-parsed data."""
    try:
        config = BehaviorConfig.model_validate(data)
    except ValidationError as e:
        raise BehaviorConfigError(f"Invalid behavior configuration: {e}") from e
    return validate_behavior_config(config)


def load_behavior_config(path: Optional[Union[str, Path]] = None) -> BehaviorConfig:
    """Load a behavior configuration from a YAML file.

    Args:
        path: YAML file to read; the packaged default when None

    Returns:
        Validated behavior configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML cannot be parsed or its root is not a mapping
        BehaviorConfigError: If the document does not describe a valid configuration
    """
    config_path = Path(path) if path is not None else DEFAULT_BEHAVIOR_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"YAML root must be a dictionary: {config_path}")

    config = parse_behavior_config(data)
    logger.info(
        f"Loaded behavior config from {config_path} "
        f"({len(config.emotion_calculation)} emotions, {len(config.actions)} actions)"
    )
    return config


@lru_cache(maxsize=1)
def get_default_behavior_config() -> BehaviorConfig:
    """The packaged behavior configuration, loaded once."""
    return load_behavior_config()
