"""Loyalteez MCP tools, one module per domain."""

from fastmcp import FastMCP

from ..runtime import Runtime
from . import (
    achievements,
    diagnostics,
    drops,
    engagement,
    events,
    identity,
    integrations,
    perks,
    program_design,
    transactions,
    user,
    webhooks,
)

TOOL_MODULES = (
    events,
    identity,
    engagement,
    user,
    transactions,
    drops,
    integrations,
    perks,
    achievements,
    program_design,
    diagnostics,
    webhooks,
)


def register_tools(mcp: FastMCP, runtime: Runtime) -> None:
    for module in TOOL_MODULES:
        module.register(mcp, runtime)
