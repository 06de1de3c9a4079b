import pytest
import pytest_asyncio
from fastmcp import Client

from loyalteez_mcp.config import ServerConfig
from loyalteez_mcp.server import create_server

from .test_utils import BRAND_ID, FakeLoyalteezAPI


@pytest.fixture
def api() -> FakeLoyalteezAPI:
    return FakeLoyalteezAPI()


@pytest.fixture
def make_client(api):
    """Build an in-memory MCP client for a server wired to the fake API."""

    def _make(**config) -> Client:
        config.setdefault("default_brand_id", BRAND_ID)
        server = create_server(ServerConfig(**config), transport=api.transport)
        return Client(server)

    return _make


@pytest_asyncio.fixture
async def client(make_client):
    async with make_client() as c:
        yield c


@pytest_asyncio.fixture
async def unbranded_client(make_client):
    async with make_client(default_brand_id=None) as c:
        yield c
