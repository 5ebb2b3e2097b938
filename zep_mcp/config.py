"""Configuration for the Zep MCP server.

Simple dataclass-based configuration with sensible defaults.
Override via environment variables with the ZEP_ prefix.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from zep_mcp.log_config import get_logger

log = get_logger("config")

DEFAULT_API_URL = "https://api.getzep.com/api/v2"
DEFAULT_USER_ID = "default_user"

# Load .env file if present
try:
    from dotenv import load_dotenv
    _pkg_dir = Path(__file__).parent.parent
    _env_loaded = load_dotenv(_pkg_dir / ".env") or load_dotenv()
    log.debug(f"Loaded .env file: {_env_loaded}")
except ImportError:
    log.debug("python-dotenv not installed, using environment variables directly")


class ConfigError(Exception):
    """Configuration is missing or invalid."""


def _get_env(key: str, default: str) -> str:
    """Get environment variable with ZEP_ prefix."""
    return os.getenv(f"ZEP_{key}", default)


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable, falling back on parse errors."""
    val = os.getenv(f"ZEP_{key}")
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        log.warning(f"Invalid ZEP_{key}={val!r}, using {default}")
        return default


@dataclass
class Config:
    """Zep MCP server configuration.

    Attributes:
        api_key: Zep Cloud API key (required, ZEP_API_KEY)
        api_url: Zep Cloud API base URL
        user_id: Identity that owns threads and the knowledge graph
        user_email: Email used when the identity is first created
        user_first_name: First name used when the identity is first created
        user_last_name: Last name used when the identity is first created
        timeout: HTTP request timeout in seconds
    """

    api_key: str | None = field(default_factory=lambda: os.getenv("ZEP_API_KEY") or None)
    api_url: str = field(default_factory=lambda: _get_env("API_URL", DEFAULT_API_URL))
    user_id: str = field(default_factory=lambda: _get_env("USER_ID", DEFAULT_USER_ID))
    user_email: str = field(
        default_factory=lambda: _get_env("USER_EMAIL", "default@example.com")
    )
    user_first_name: str = field(
        default_factory=lambda: _get_env("USER_FIRST_NAME", "Claude")
    )
    user_last_name: str = field(
        default_factory=lambda: _get_env("USER_LAST_NAME", "Code")
    )
    timeout: float = field(default_factory=lambda: _get_env_float("TIMEOUT", 60.0))

    def __post_init__(self):
        self.api_url = self.api_url.rstrip("/")
        log.debug(f"api_url={self.api_url}")
        log.debug(f"user_id={self.user_id}")
        log.debug(f"timeout={self.timeout}")
        log.debug(f"api_key set: {bool(self.api_key)}")

    def validate(self) -> None:
        """Check settings that must be present before serving.

        Raises:
            ConfigError: If ZEP_API_KEY is missing
        """
        if not self.api_key:
            raise ConfigError("ZEP_API_KEY environment variable required")
