# A tiny common shape for document sources. We'll subclass this.
from __future__ import annotations

from typing import Optional

import httpx

from .. import config


class DocumentSource:
    """Base source interface. Subclasses override `fetch`."""

    name = "base"

    def __init__(self, path_template: str = config.SOURCE_PATH_TEMPLATE):
        self.path_template = path_template

    def path_for(self, country_id: str) -> str:
        return self.path_template.format(country_id=country_id)

    def locate(self, country_id: str) -> str:
        """Human-readable location of the document (URL or file path)."""
        return self.path_for(country_id)

    async def fetch(self, country_id: str, client: Optional[httpx.AsyncClient] = None) -> str:
        """
        Return the raw text of the country's source document.
        Raise FetchError on transport problems, timeouts or bad status.
        """
        raise NotImplementedError
