"""Read-only loyalteez:// resources: reference data and bundled documentation."""

import json
from typing import Any

from fastmcp import FastMCP

from ..runtime import Runtime


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def register_resources(mcp: FastMCP, runtime: Runtime) -> None:
    from . import (
        contracts,
        docs,
        errors,
        event_types,
        network,
        oauth,
        rate_limits,
        sdk,
        shared_services,
        webhooks,
    )

    for module in (
        docs,
        contracts,
        network,
        event_types,
        oauth,
        rate_limits,
        sdk,
        shared_services,
        errors,
        webhooks,
    ):
        module.register(mcp, runtime)
