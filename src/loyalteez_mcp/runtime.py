# runtime.py
"""Per-server state handed to every tool and resource module at registration."""

from dataclasses import dataclass
from typing import Optional

from .brand_id import resolve_brand_id
from .client import LoyalteezClient
from .config import ServerConfig
from .docs_index import DocsCache


@dataclass
class Runtime:
    config: ServerConfig
    client: LoyalteezClient
    docs: DocsCache

    def brand_id(self, candidate: Optional[str] = None) -> str:
        return resolve_brand_id(candidate, self.config.default_brand_id)

    def base_url(self, service: str = "event_handler") -> str:
        return self.client.base_url(service)
