"""
Runtime Configuration

Central configuration for hash oracle selection and library logging.
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from hashtree.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashOracle, get_hasher

load_dotenv()


@dataclass
class TreeConfig:
    """Configuration for tree construction and verification."""
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM

    def hasher(self) -> HashOracle:
        """Resolve the configured hash oracle."""
        return get_hasher(self.hash_algorithm)


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    log_level: str = "WARNING"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - HASHTREE_HASH_ALGORITHM: Hash oracle name (e.g. sha256, double_sha256)
        - HASHTREE_LOG_LEVEL: Logging level name for configure_logging()
        """
        overrides: dict[str, Any] = {}

        if os.getenv("HASHTREE_HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv("HASHTREE_HASH_ALGORITHM")
        if os.getenv("HASHTREE_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("HASHTREE_LOG_LEVEL", "WARNING").upper()

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()

        return cls(
            tree=tree,
            log_level=str(data.get("log_level", "WARNING")).upper(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            for key, value in overrides["tree"].items():
                setattr(new_config.tree, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "hash_algorithm": self.tree.hash_algorithm,
            },
            "log_level": self.log_level,
            "extra": self.extra,
        }


def configure_logging(config: Optional[RuntimeConfig] = None) -> None:
    """Apply the configured level to the package logger."""
    config = config or get_default_config()
    logging.getLogger("hashtree").setLevel(config.log_level)


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
