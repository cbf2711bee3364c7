# gdp_dashboard/services/loader.py
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

import httpx

from .. import config
from ..adapters import DocumentSource, default_source
from ..adapters.synthetic import synthetic_record
from ..errors import IngestError
from ..models import CountryDataset, CountryRecord
from .normalizer import normalize

logger = logging.getLogger(__name__)


def _unique_ids(ids: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for raw in ids:
        cid = (raw or "").strip().lower()
        if cid and cid not in seen:
            seen.add(cid)
            out.append(cid)
    return out


async def load_country(
    country_id: str,
    source: DocumentSource,
    client: Optional[httpx.AsyncClient] = None,
) -> CountryRecord:
    """
    Fetch + normalize one country. Never raises: a typed ingestion error
    (FetchError, NotFound, MalformedData, InvalidShape) or anything unexpected
    yields the synthetic default record instead.
    """
    try:
        payload = await source.fetch(country_id, client)
        return normalize(country_id, payload)
    except IngestError as e:
        logger.warning(
            "%s for %s (%s), using default data: %s",
            type(e).__name__, country_id, source.locate(country_id), e,
        )
        return synthetic_record(country_id)
    except Exception:
        logger.exception(
            "Unexpected error loading %s (%s), using default data",
            country_id, source.locate(country_id),
        )
        return synthetic_record(country_id)


async def load(
    ids: Iterable[str] = config.COUNTRY_IDS,
    source: Optional[DocumentSource] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> CountryDataset:
    """
    Load every requested country concurrently and return a fresh dataset with
    exactly one record per id. Nothing is returned until every fetch has
    resolved, real or synthetic.
    """
    source = source or default_source()
    country_ids = _unique_ids(ids)
    logger.info("Loading country data for %d countries from %s source", len(country_ids), source.name)

    async def _gather(c: Optional[httpx.AsyncClient]) -> List[CountryRecord]:
        return await asyncio.gather(*(load_country(cid, source, c) for cid in country_ids))

    if client is None:
        async with httpx.AsyncClient(timeout=config.FETCH_TIMEOUT) as own:
            records = await _gather(own)
    else:
        records = await _gather(client)

    dataset: CountryDataset = {cid: rec for cid, rec in zip(country_ids, records)}
    fallbacks = sum(1 for r in records if r.synthetic)
    if fallbacks:
        logger.warning("%d of %d countries fell back to default data", fallbacks, len(records))
    return dataset


def load_sync(
    ids: Iterable[str] = config.COUNTRY_IDS,
    source: Optional[DocumentSource] = None,
) -> CountryDataset:
    """Blocking wrapper for scripts and the CLI."""
    return asyncio.run(load(ids, source))
