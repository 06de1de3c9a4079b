# tools/diagnostics.py
"""API health and version diagnostics."""

import json
from typing import Annotated, Optional

from fastmcp import Context, FastMCP

from .._version import API_VERSION, __version__
from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime

API_VERSION_COMPATIBILITY = {
    __version__: {
        "minApiVersion": API_VERSION,
        "maxApiVersion": API_VERSION,
        "deprecated": False,
    },
}


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_health_check",
        tags={"diagnostics", "read"}
    )
    async def health_check(
        ctx: Context,
        brand_id: Annotated[
            Optional[str],
            {"description": "Your brand wallet address. Optional, the health check works without it."}
        ] = None,
    ) -> str:
        """
        Check the health of the Loyalteez APIs (event handler, database,
        blockchain and Privy services). Useful before making other calls.

        See also: loyalteez://docs/api/rest-api
        """
        try:
            result = await runtime.client.health_check(ctx=ctx)
            return json.dumps({
                "success": True,
                "status": result.status,
                "timestamp": result.timestamp,
                "services": result.services,
                "message": (
                    "All services are operational"
                    if result.status == "healthy"
                    else "Some services may be experiencing issues"
                ),
                "apiVersion": {
                    "clientVersion": __version__,
                    "compatibility": API_VERSION_COMPATIBILITY,
                },
            }, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "checking API health", ctx)
