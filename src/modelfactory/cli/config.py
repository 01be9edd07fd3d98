"""
CLI Configuration

Centralized configuration for the modelfactory CLI subsystem.
"""

import os
from typing import Optional

class CLIConfig:
    """Configuration for CLI commands"""

    # Machine mode (pure data output)
    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: Optional[bool]) -> None:
        """Set machine mode (pure data output, no presentation). None falls back to the environment."""
        cls._machine_mode = enabled

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Check if machine mode is active.

        Machine mode is the default. Returns False only if human mode is
        explicitly requested via --human or MODELFACTORY_HUMAN_MODE.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        if os.getenv("MODELFACTORY_HUMAN_MODE", "").lower() in ("1", "true", "yes"):
            return False
        return True
