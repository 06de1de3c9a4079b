from pathlib import Path

import pytest

from loyalteez_mcp.config import DEFAULT_DOCS_PATH, ConfigError, ServerConfig, load_config

ENV_VARS = (
    "LOYALTEEZ_NETWORK",
    "LOYALTEEZ_BRAND_ID",
    "LOYALTEEZ_DOCS_PATH",
    "LOYALTEEZ_HTTP_TIMEOUT",
    "LOYALTEEZ_LOG_LEVEL",
    "MCP_TRANSPORT",
    "MCP_PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = load_config()

    assert config == ServerConfig()
    assert config.network == "mainnet"
    assert config.default_brand_id is None
    assert config.docs_path == DEFAULT_DOCS_PATH
    assert config.timeout == 30.0
    assert config.transport == "stdio"
    assert config.port == 10000


def test_environment(clean_env):
    clean_env.setenv("LOYALTEEZ_NETWORK", " Testnet ")
    clean_env.setenv("LOYALTEEZ_BRAND_ID", " 0xabcdef1234567890abcdef1234567890abcdef12 ")
    clean_env.setenv("LOYALTEEZ_DOCS_PATH", "/srv/docs")
    clean_env.setenv("LOYALTEEZ_HTTP_TIMEOUT", "5.5")
    clean_env.setenv("LOYALTEEZ_LOG_LEVEL", "debug")
    clean_env.setenv("MCP_TRANSPORT", "streamable-http")
    clean_env.setenv("MCP_PORT", "8080")

    config = load_config()

    assert config.network == "testnet"
    assert config.default_brand_id == "0xabcdef1234567890abcdef1234567890abcdef12"
    assert config.docs_path == Path("/srv/docs")
    assert config.timeout == 5.5
    assert config.log_level == "DEBUG"
    assert config.transport == "streamable-http"
    assert config.port == 8080


def test_arguments_override_environment(clean_env):
    clean_env.setenv("LOYALTEEZ_NETWORK", "testnet")
    clean_env.setenv("MCP_TRANSPORT", "stdio")

    config = load_config(network="mainnet", transport="http", port=9000)

    assert config.network == "mainnet"
    assert config.transport == "http"
    assert config.port == 9000


def test_empty_brand_id_is_unset(clean_env):
    clean_env.setenv("LOYALTEEZ_BRAND_ID", "")
    assert load_config().default_brand_id is None


def test_invalid_network(clean_env):
    clean_env.setenv("LOYALTEEZ_NETWORK", "devnet")
    with pytest.raises(ConfigError, match="Invalid LOYALTEEZ_NETWORK 'devnet'"):
        load_config()


def test_invalid_timeout(clean_env):
    clean_env.setenv("LOYALTEEZ_HTTP_TIMEOUT", "soon")
    with pytest.raises(ConfigError, match="LOYALTEEZ_HTTP_TIMEOUT must be a number"):
        load_config()


def test_non_positive_timeout():
    with pytest.raises(ConfigError, match="positive number of seconds"):
        ServerConfig(timeout=0)


def test_invalid_port(clean_env):
    clean_env.setenv("MCP_PORT", "eighty")
    with pytest.raises(ConfigError, match="MCP_PORT must be an integer"):
        load_config()


def test_invalid_transport():
    with pytest.raises(ConfigError, match="Invalid MCP_TRANSPORT 'sse'"):
        ServerConfig(transport="sse")
