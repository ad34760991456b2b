"""Configuration management using Pydantic models."""

from pydantic import BaseModel, Field
from typing import Optional
import yaml
import os

class SimulationConfig(BaseModel):
    """Configuration for the behavior simulation."""
    playfulness_decay_per_second: float = Field(default=0.0001, ge=0.0)
    step_interval: float = Field(default=1 / 60, gt=0.0)  # seconds
    time_scale: float = Field(default=1.0, ge=0.0)
    seed: Optional[int] = None

class ArenaConfig(BaseModel):
    """Configuration for the play area."""
    width: float = Field(default=800.0, gt=0.0)
    height: float = Field(default=600.0, gt=0.0)
    start_x: float = 400.0
    start_y: float = 300.0

class BehaviorFileConfig(BaseModel):
    """Where the behavior weights come from."""
    path: Optional[str] = None  # None uses the packaged behavior.yaml

class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

class Config(BaseModel):
    """Main configuration for the catmind project."""
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    arena: ArenaConfig = Field(default_factory=ArenaConfig)
    behavior: BehaviorFileConfig = Field(default_factory=BehaviorFileConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from a YAML file."""
        if not os.path.exists(path):
            return cls()

        with open(path, "r") as f:
            config_dict = yaml.safe_load(f)

        return cls.model_validate(config_dict or {})

    def to_yaml(self, path: str) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f)

# Global configuration instance
config = Config()

def get_config() -> Config:
    """Get the active configuration."""
    return config

def load_config(path: str = "config.yaml") -> Config:
    """Load configuration from a YAML file."""
    global config
    config = Config.from_yaml(path)
    return config
