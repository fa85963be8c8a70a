# =============================================================================
# Moondream Client - Centralized Configuration
# =============================================================================
# Provides a single Config dataclass containing the tunable parameters for
# the client library and its command-line entry point. Parameters are
# overridable via environment variables with the MOONDREAM_ prefix
# (e.g., MOONDREAM_API_KEY=md-...).
#
# The API base URL is intentionally absent: every operation talks to the
# same fixed endpoint.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Optional

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_bool(value: str) -> bool:
    """
    Convert an environment variable string to a bool.

    Args:
        value: Raw string such as "1", "true", "no".

    Returns:
        True for 1/true/yes/on (case-insensitive), False otherwise.
    """
    return value.strip().lower() in _TRUTHY


@dataclass
class Config:
    """
    Centralized configuration for the Moondream client.

    All fields can be overridden via environment variables prefixed with
    MOONDREAM_.
    """

    # -- Credentials --
    api_key: Optional[str] = None

    # -- Caption defaults --
    caption_length: str = "normal"
    caption_stream: bool = False

    # -- Logging --
    log_level: str = "WARNING"

    def __post_init__(self):
        """Apply environment variable overrides."""
        self._apply_env_overrides()

    def _apply_env_overrides(self):
        """
        Override config fields from environment variables.

        Looks for MOONDREAM_<FIELD_NAME_UPPERCASE> environment variables and
        applies them with appropriate type conversion. Empty values are
        ignored.
        """
        field_types = {
            "api_key": str,
            "caption_length": str,
            "caption_stream": _parse_bool,
            "log_level": str,
        }
        for field_name, field_type in field_types.items():
            env_key = f"MOONDREAM_{field_name.upper()}"
            env_value = os.environ.get(env_key)
            if env_value:
                setattr(self, field_name, field_type(env_value))


# ---------------------------------------------------------------------------
# Singleton accessor
# ---------------------------------------------------------------------------
_config_instance: Optional[Config] = None


def get_config() -> Config:
    """
    Return the singleton Config instance, creating it on first call.

    Returns:
        Config: The global configuration object.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached Config so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None
