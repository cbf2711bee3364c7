# gdp_dashboard/adapters/http_source.py
from __future__ import annotations

from typing import Optional

import httpx

from .. import config
from ..errors import FetchError
from .base import DocumentSource


class HttpDocumentSource(DocumentSource):
    """
    Fetches country pages over HTTP, e.g.
      http://localhost:8000/countries/japan.html
    """

    name = "http"

    def __init__(
        self,
        base_url: str = config.SOURCE_BASE_URL,
        path_template: str = config.SOURCE_PATH_TEMPLATE,
        timeout: float = config.FETCH_TIMEOUT,
    ):
        super().__init__(path_template)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def locate(self, country_id: str) -> str:
        return f"{self.base_url}/{self.path_for(country_id).lstrip('/')}"

    async def fetch(self, country_id: str, client: Optional[httpx.AsyncClient] = None) -> str:
        url = self.locate(country_id)
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=self.timeout) as own:
                    r = await own.get(url)
            else:
                r = await client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise FetchError(f"timed out fetching {url}", country_id) from e
        except httpx.HTTPError as e:
            raise FetchError(f"could not fetch {url}: {e}", country_id) from e

        if r.status_code != 200:
            raise FetchError(f"{url} returned HTTP {r.status_code}", country_id)
        return r.text
