"""
Configuration schema for the almost-over handler.

Options can come from a dict (host map options) or a YAML file. Both the
snake_case names and the host option names (almostOver, almostDistance,
almostSamplingPeriod, almostOnMouseMove) are accepted.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml


# host option name -> field name
_HOST_OPTION_NAMES = {
    "almostOver": "enabled",
    "almostDistance": "tolerance_distance",
    "almostSamplingPeriod": "sampling_period_ms",
    "almostOnMouseMove": "track_pointer_move",
}


@dataclass(frozen=True)
class AlmostOverConfig:
    """
    Proximity tracking options.

    Immutable after construction (frozen dataclass).

    Attributes:
        enabled: Enable tracking as soon as the handler is installed
        tolerance_distance: Pixel tolerance to consider a shape "almost over"
        sampling_period_ms: Throttle period for pointer-move events
        track_pointer_move: Track pointer moves (False = clicks only)
    """

    enabled: bool = True
    tolerance_distance: float = 25
    sampling_period_ms: float = 50
    track_pointer_move: bool = True

    def __post_init__(self):
        """Validate configuration."""
        if not self.tolerance_distance > 0:
            raise ValueError(
                f"tolerance_distance must be > 0, got {self.tolerance_distance}"
            )

        if not self.sampling_period_ms > 0:
            raise ValueError(
                f"sampling_period_ms must be > 0, got {self.sampling_period_ms}"
            )

    @property
    def sampling_period(self) -> float:
        """Sampling period in seconds."""
        return self.sampling_period_ms / 1000.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlmostOverConfig":
        """
        Build configuration from a mapping.

        Unknown keys are ignored (host option dicts carry many other options).

        Raises:
            ValueError: If a value fails validation
        """
        options: Dict[str, Any] = {}
        for key, value in data.items():
            name = _HOST_OPTION_NAMES.get(key, key)
            if name in cls.__dataclass_fields__:
                options[name] = value
        return cls(**options)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "AlmostOverConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            almost_over:
              enabled: true
              tolerance_distance: 25
              sampling_period_ms: 50
              track_pointer_move: true

        The top-level 'almost_over' section is optional.
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration in {yaml_path}: expected a mapping")

        section = data.get("almost_over", data)
        return cls.from_dict(section)
