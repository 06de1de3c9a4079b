# config.py
"""
Server configuration

Everything the server needs from the process environment is read once here
and handed to the tools through the runtime object. Tool handlers never call
os.getenv themselves.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

NETWORKS = ("mainnet", "testnet")
TRANSPORTS = ("stdio", "streamable-http", "http")

DEFAULT_DOCS_PATH = Path(__file__).parent / "docs"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PORT = 10000


class ConfigError(ValueError):
    """Raised when the environment holds a value the server cannot start with."""


@dataclass(frozen=True)
class ServerConfig:
    network: str = "mainnet"
    default_brand_id: Optional[str] = None
    docs_path: Path = DEFAULT_DOCS_PATH
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    transport: str = "stdio"
    port: int = DEFAULT_PORT

    def __post_init__(self):
        if self.network not in NETWORKS:
            raise ConfigError(
                f"Invalid LOYALTEEZ_NETWORK '{self.network}'. Expected one of: {', '.join(NETWORKS)}"
            )
        if self.transport not in TRANSPORTS:
            raise ConfigError(
                f"Invalid MCP_TRANSPORT '{self.transport}'. Expected one of: {', '.join(TRANSPORTS)}"
            )
        if self.timeout <= 0:
            raise ConfigError("LOYALTEEZ_HTTP_TIMEOUT must be a positive number of seconds")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from e


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from e


def load_config(
    network: Optional[str] = None,
    transport: Optional[str] = None,
    port: Optional[int] = None,
) -> ServerConfig:
    """
    Build a ServerConfig from the environment.

    Explicit arguments (usually from the command line) take precedence over
    environment variables, which take precedence over defaults.

    Environment variables:
    - LOYALTEEZ_NETWORK: 'mainnet' (default) or 'testnet'
    - LOYALTEEZ_BRAND_ID: default brand id used when a tool call omits one
    - LOYALTEEZ_DOCS_PATH: directory with markdown documentation
    - LOYALTEEZ_HTTP_TIMEOUT: per-request timeout in seconds (default 30)
    - LOYALTEEZ_LOG_LEVEL: logging level name (default INFO)
    - MCP_TRANSPORT: 'stdio' (default), 'streamable-http' or 'http'
    - MCP_PORT: port for the HTTP transports (default 10000)
    """
    brand_id = os.getenv("LOYALTEEZ_BRAND_ID") or None
    docs_path = os.getenv("LOYALTEEZ_DOCS_PATH")

    return ServerConfig(
        network=(network or os.getenv("LOYALTEEZ_NETWORK", "mainnet")).strip().lower(),
        default_brand_id=brand_id.strip() if brand_id else None,
        docs_path=Path(docs_path).expanduser() if docs_path else DEFAULT_DOCS_PATH,
        timeout=_env_float("LOYALTEEZ_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        log_level=os.getenv("LOYALTEEZ_LOG_LEVEL", "INFO").upper(),
        transport=transport or os.getenv("MCP_TRANSPORT", "stdio"),
        port=port if port is not None else _env_int("MCP_PORT", DEFAULT_PORT),
    )
