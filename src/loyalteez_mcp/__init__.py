"""
Loyalteez MCP Server

A Model Context Protocol (MCP) server for the Loyalteez loyalty platform.
Provides tools for tracking events, managing users, streaks, perks and
achievements, plus reference resources and documentation.
"""

from ._version import __version__
from .server import create_server, main

__all__ = [
    "__version__",
    "create_server",
    "main",
]
