# resources/docs.py
"""Bundled Loyalteez developer documentation, served from the docs cache."""

from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError

from ..docs_index import DOCS_URI_PREFIX
from ..runtime import Runtime
from . import to_json


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://docs/index",
        name="Documentation Index",
        description="Every bundled documentation page with its URI, title and category",
        mime_type="application/json",
    )
    def docs_index() -> str:
        return to_json([
            {
                "uri": doc.uri,
                "name": doc.title,
                "description": doc.frontmatter.get("description"),
                "category": doc.category,
                "mimeType": "text/markdown",
            }
            for doc in runtime.docs.index().values()
        ])

    @mcp.resource(
        "loyalteez://docs/{path*}",
        name="Documentation Page",
        description="One documentation page, e.g. loyalteez://docs/guides/webhooks",
        mime_type="text/markdown",
    )
    def docs_page(path: str) -> str:
        uri = DOCS_URI_PREFIX + path.strip("/")
        doc = runtime.docs.get(uri)
        if doc is None:
            raise ResourceError(f"Documentation resource not found: {uri}")
        return doc.render()
