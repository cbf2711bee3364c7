# gdp_dashboard/adapters/local_source.py
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import httpx

from .. import config
from ..errors import FetchError
from .base import DocumentSource


class LocalDocumentSource(DocumentSource):
    """Reads country pages from a directory (the default for local runs)."""

    name = "local"

    def __init__(self, root: Path = config.SOURCE_DIR, path_template: str = config.SOURCE_PATH_TEMPLATE):
        super().__init__(path_template)
        self.root = Path(root)

    def locate(self, country_id: str) -> str:
        return str(self.root / self.path_for(country_id))

    async def fetch(self, country_id: str, client: Optional[httpx.AsyncClient] = None) -> str:
        path = Path(self.locate(country_id))
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FetchError(f"could not read {path}: {e}", country_id) from e
