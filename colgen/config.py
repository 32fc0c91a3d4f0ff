"""
Configuration module for colgen.

This module provides configuration management for the colgen library:
loop limits, numerical tolerances, solver verbosity and logging.

Configuration can be set via:
1. Environment variables (COLGEN_*)
2. Config file (./colgen.toml or ~/.colgen/config.toml)
3. Programmatic API

Example:
    >>> from colgen.config import config
    >>> config.get_tolerance("reduced_cost")
    1e-06
    >>> config.max_iterations = 500
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _get_default_log_level() -> str:
    """Get the default log level (environment first)."""
    return os.environ.get('COLGEN_LOG_LEVEL', 'WARNING').upper()


def _default_tolerances() -> dict[str, float]:
    return {
        "reduced_cost": 1e-6,
        "feasibility": 1e-6,
        "integrality": 1e-5,
    }


@dataclass
class ColGenConfig:
    """
    Configuration for the colgen library.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        max_iterations: Default iteration budget for column generation
        solver_verbosity: HiGHS output level (0 = silent)
        tolerances: Numerical tolerances for optimization
    """

    # Logging
    log_level: str = field(default_factory=_get_default_log_level)

    # Column generation
    max_iterations: int = 100

    # Solver settings
    solver_verbosity: int = 0

    # Numerical tolerances
    tolerances: dict[str, float] = field(default_factory=_default_tolerances)

    def __post_init__(self):
        self.log_level = str(self.log_level).upper()
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative")

    # =========================================================================
    # Tolerance helpers
    # =========================================================================

    def get_tolerance(self, name: str) -> float:
        """Get a tolerance value by name."""
        return self.tolerances.get(name, 1e-6)

    def set_tolerance(self, name: str, value: float) -> None:
        """Set a tolerance value."""
        if value < 0:
            raise ValueError(f"Tolerance '{name}' must be non-negative, got {value}")
        self.tolerances[name] = value

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "log_level": self.log_level,
            "max_iterations": self.max_iterations,
            "solver_verbosity": self.solver_verbosity,
            "tolerances": self.tolerances.copy(),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> 'ColGenConfig':
        """Create config from dictionary."""
        tolerances = _default_tolerances()
        tolerances.update(d.get("tolerances", {}))
        return cls(
            log_level=d.get("log_level", _get_default_log_level()),
            max_iterations=int(d.get("max_iterations", 100)),
            solver_verbosity=int(d.get("solver_verbosity", 0)),
            tolerances=tolerances,
        )

    def save(self, path: Optional[Path] = None) -> None:
        """
        Save configuration to a TOML file.

        Args:
            path: Path to save to (default: ./colgen.toml)
        """
        if path is None:
            path = Path("colgen.toml")

        # Simple TOML-like format (no dependency needed)
        lines = [
            "# colgen configuration",
            "",
            "[general]",
            f'log_level = "{self.log_level}"',
            f"max_iterations = {self.max_iterations}",
            f"solver_verbosity = {self.solver_verbosity}",
            "",
            "[tolerances]",
        ]
        for name, value in self.tolerances.items():
            lines.append(f"{name} = {value!r}")

        Path(path).write_text("\n".join(lines) + "\n")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'ColGenConfig':
        """
        Load configuration from a TOML file.

        Args:
            path: Path to load from (default: ./colgen.toml or ~/.colgen/config.toml)

        Returns:
            Loaded configuration (or default if file not found)
        """
        if path is None:
            local_config = Path("colgen.toml")
            user_config = Path.home() / ".colgen" / "config.toml"

            if local_config.exists():
                path = local_config
            elif user_config.exists():
                path = user_config
            else:
                return cls()

        path = Path(path)
        if not path.exists():
            return cls()

        config_dict: dict[str, Any] = {"tolerances": {}}
        current_section = None

        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if line.startswith("[") and line.endswith("]"):
                current_section = line[1:-1].strip()
                continue

            if "=" not in line:
                raise ValueError(f"Malformed config line in {path}: {line!r}")

            key, value = line.split("=", 1)
            key = key.strip()
            value = _parse_value(value.strip())

            if current_section == "tolerances":
                config_dict["tolerances"][key] = float(value)
            else:
                config_dict[key] = value

        return cls.from_dict(config_dict)


def _parse_value(raw: str) -> Any:
    """Convert a TOML-like scalar to int, float or str."""
    if raw.startswith('"') and raw.endswith('"'):
        return raw[1:-1]
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


# Global configuration instance
config = ColGenConfig()


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a console handler to the ``colgen`` logger.

    The library itself never configures handlers on import; applications
    call this once. Calling it again only updates the level.

    Args:
        level: Level name (default: ``config.log_level``)

    Returns:
        The ``colgen`` package logger
    """
    logger = logging.getLogger("colgen")
    logger.setLevel((level or config.log_level).upper())

    if not any(getattr(h, "_colgen_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        handler._colgen_handler = True
        logger.addHandler(handler)

    return logger


def get_tolerance(name: str) -> float:
    """Get a tolerance from the global configuration."""
    return config.get_tolerance(name)
