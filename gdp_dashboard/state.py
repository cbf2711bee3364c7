# gdp_dashboard/state.py
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

from . import config
from .adapters import DocumentSource, default_source
from .models import CountryDataset
from .services.loader import load

logger = logging.getLogger(__name__)


class DashboardState:
    """
    Owns the loaded dataset. Year and metric are chosen per request, never stored here.
    The dataset is only ever swapped as a whole, after a load completes.
    """

    def __init__(self, ids: Iterable[str] = config.COUNTRY_IDS, source: Optional[DocumentSource] = None):
        self.ids: List[str] = list(ids)
        self.source = source or default_source()
        self.dataset: CountryDataset = {}
        self.loaded = False
        self._lock = asyncio.Lock()

    @property
    def is_empty(self) -> bool:
        return not self.dataset

    async def refresh(self) -> CountryDataset:
        async with self._lock:
            dataset = await load(self.ids, self.source)
            self.dataset = dataset
            self.loaded = True
        if self.is_empty:
            logger.error("Load finished with no country data")
        return self.dataset

    async def ensure_loaded(self) -> CountryDataset:
        if not self.loaded:
            await self.refresh()
        return self.dataset

