# errors.py
"""Conversion of internal exceptions into MCP tool errors."""

from typing import Optional

from fastmcp import Context
from fastmcp.exceptions import ToolError

from .client import EndpointUnavailableError, LoyalteezAPIError
from .validation import ValidationError


async def map_loyalteez_error_to_tool_error(
    e: Exception,
    context: str,
    ctx: Optional[Context] = None,
    resource_id: Optional[str] = None,
) -> ToolError:
    """
    Map client and validation exceptions to appropriate ToolError messages.

    Args:
        e: The caught exception
        context: Context description for the error (e.g., "tracking event")
        ctx: Optional MCP context for logging
        resource_id: Optional resource identifier for more specific error messages

    Returns:
        ToolError with appropriate message
    """
    if isinstance(e, ToolError):
        return e

    resource_context = f" '{resource_id}'" if resource_id else ""

    if isinstance(e, ValidationError):
        error_msg = f"Invalid input while {context}{resource_context}: {e}"
    elif isinstance(e, EndpointUnavailableError):
        error_msg = (
            f"Endpoint unavailable while {context}{resource_context} (HTTP {e.status_code}): {e.message}. "
            f"{e.guidance}"
        )
    elif isinstance(e, LoyalteezAPIError):
        if e.error_type == "http":
            if e.status_code == 400:
                error_msg = f"Invalid parameters while {context}{resource_context}: {e.message}. Details: {e.response_text}"
            elif e.status_code == 404:
                error_msg = f"Resource{resource_context} not found while {context}: {e.message}. Details: {e.response_text}"
            else:
                error_msg = f"API error while {context}{resource_context} (HTTP {e.status_code}): {e.message}. Details: {e.response_text}"
        elif e.error_type == "timeout":
            error_msg = f"Request timeout while {context}{resource_context}: {e.message}"
        elif e.error_type == "connection":
            error_msg = f"Connection error while {context}{resource_context}: {e.message}"
        elif e.error_type == "invalid_response":
            error_msg = f"Unexpected response while {context}{resource_context}: {e.message}"
        else:  # unexpected
            error_msg = f"Failed {context}{resource_context}: {e.message}"
    else:
        error_msg = f"Unexpected error while {context}{resource_context}: {str(e)}"

    if ctx:
        await ctx.error(error_msg)

    return ToolError(error_msg)
