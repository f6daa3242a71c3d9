"""Configuration management utilities."""

import json
import numbers
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

TIE_BREAKS = ("timestamp", "input_order")


@dataclass(frozen=True)
class PipelineConfig:
    """
    Settings for a single pipeline run.

    ``offset_seconds`` encodes one timezone and daylight-saving convention
    and is only valid for the data it was chosen for, so it has no default.

    Attributes:
        offset_seconds: Signed shift applied to every timestamp before
            calendar features are extracted
        dedup_tie_break: Which duplicate (user_id, item_id) row survives:
            "timestamp" keeps the earliest, "input_order" keeps the first seen
    """

    offset_seconds: int
    dedup_tie_break: str = "timestamp"

    def __post_init__(self):
        if isinstance(self.offset_seconds, bool) or not isinstance(self.offset_seconds, numbers.Integral):
            raise TypeError(
                f"offset_seconds must be an integer, got {type(self.offset_seconds).__name__}"
            )
        if self.dedup_tie_break not in TIE_BREAKS:
            raise ValueError(
                f"Unsupported dedup_tie_break: {self.dedup_tie_break}. "
                f"Use one of: {', '.join(TIE_BREAKS)}"
            )
        object.__setattr__(self, "offset_seconds", int(self.offset_seconds))

    @classmethod
    def from_dict(
        cls,
        config: Dict[str, Any],
        offset_seconds: Optional[int] = None,
        dedup_tie_break: Optional[str] = None,
    ) -> "PipelineConfig":
        """
        Build a pipeline config from the ``pipeline`` section of a config dict.

        Explicit keyword arguments (typically CLI flags) override file values.

        Args:
            config: Full configuration dictionary (may be empty)
            offset_seconds: Override for ``pipeline.offset_seconds``
            dedup_tie_break: Override for ``pipeline.dedup_tie_break``

        Returns:
            Validated PipelineConfig

        Raises:
            ValueError: If no offset is given in either place
        """
        section = (config or {}).get("pipeline") or {}

        if offset_seconds is None:
            offset_seconds = section.get("offset_seconds")
        if offset_seconds is None:
            raise ValueError(
                "offset_seconds is required: set pipeline.offset_seconds in the "
                "config file or pass --offset-seconds"
            )

        if dedup_tie_break is None:
            dedup_tie_break = section.get("dedup_tie_break", "timestamp")

        return cls(offset_seconds=offset_seconds, dedup_tie_break=dedup_tie_break)

    def to_dict(self) -> Dict[str, Any]:
        """Return the config as a ``{"pipeline": {...}}`` dictionary."""
        return {"pipeline": asdict(self)}


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary (empty if the file is empty)

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If config file doesn't exist
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        if config_path.suffix in [".yaml", ".yml"]:
            return yaml.safe_load(f) or {}
        elif config_path.suffix == ".json":
            return json.load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_path.suffix}. "
                "Use .yaml, .yml, or .json"
            )


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> None:
    """
    Save configuration to YAML or JSON file.

    Args:
        config: Configuration dictionary
        config_path: Path to save configuration file

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)

    if config_path.suffix not in [".yaml", ".yml", ".json"]:
        raise ValueError(
            f"Unsupported config format: {config_path.suffix}. "
            "Use .yaml, .yml, or .json"
        )

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        if config_path.suffix == ".json":
            json.dump(config, f, indent=2)
        else:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
