"""Configuration management."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r") as f:
        if path.suffix.lower() in [".yaml", ".yml"]:
            return yaml.safe_load(f) or {}
        elif path.suffix.lower() == ".json":
            return json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "engine": {
            "near_critical_threshold": 2,  # days of float
            "strict_references": False,
        },
        "analysis": {
            "compression_min_duration": 2,
        },
        "logging": {
            "level": "INFO",
        },
    }


@dataclass(frozen=True)
class EngineConfig:
    """Settings for one schedule computation."""

    near_critical_threshold: int = 2
    strict_references: bool = False
    compression_min_duration: int = 2

    def __post_init__(self):
        for name in ("near_critical_threshold", "compression_min_duration"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if not isinstance(self.strict_references, bool):
            raise ValueError(
                f"strict_references must be a boolean, got {self.strict_references!r}"
            )

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]] = None) -> "EngineConfig":
        """Build from a config dict shaped like get_default_config().

        Missing sections and keys fall back to the defaults.
        """
        merged = get_default_config()
        for section, values in (config or {}).items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values

        engine = merged["engine"]
        analysis = merged["analysis"]
        return cls(
            near_critical_threshold=engine["near_critical_threshold"],
            strict_references=engine["strict_references"],
            compression_min_duration=analysis["compression_min_duration"],
        )

    @classmethod
    def from_file(cls, config_path: str) -> "EngineConfig":
        return cls.from_dict(load_config(config_path))
