# gdp_dashboard/adapters/synthetic.py
from __future__ import annotations

from typing import Dict

from .. import config
from ..models import CountryRecord, YearMetrics

COUNTRY_NAMES: Dict[str, str] = {
    "china": "China",
    "usa": "United States",
    "india": "India",
    "germany": "Germany",
    "japan": "Japan",
    "uk": "United Kingdom",
    "france": "France",
    "italy": "Italy",
    "brazil": "Brazil",
    "canada": "Canada",
}

# Illustrative baseline for the latest year; each earlier year steps down 5%
# of it: 1000/950/900/850 for gdp, 10000/9500/9000/8500 per capita.
# Windows longer than 20 years use a smaller step so every year stays distinct.
BASE_GDP = 1000.0
BASE_GDP_PER_CAPITA = 10000.0
BASE_POPULATION = 100.0
YEARLY_STEP = 0.05


def default_name(country_id: str) -> str:
    return COUNTRY_NAMES.get(country_id.strip().lower(), country_id)


def _synthetic_metrics() -> Dict[int, YearMetrics]:
    """Descending series over the supported window, latest year highest."""
    metrics: Dict[int, YearMetrics] = {}
    years = sorted(config.SUPPORTED_YEARS, reverse=True)
    step = min(YEARLY_STEP, 1.0 / max(len(years), 1))
    for offset, year in enumerate(years):
        factor = 1.0 - step * offset
        metrics[year] = YearMetrics(
            gdp=round(BASE_GDP * factor, 2),
            gdp_per_capita=round(BASE_GDP_PER_CAPITA * factor, 2),
            population=BASE_POPULATION,
        )
    return dict(sorted(metrics.items()))


def synthetic_record(country_id: str) -> CountryRecord:
    """Complete stand-in record used when a country's page can't be ingested."""
    cid = country_id.strip().lower()
    name = default_name(cid) or cid or "Unknown"
    return CountryRecord(
        id=cid,
        name=name,
        historical_names=[name],
        region="Unknown",
        currency="USD",
        yearly_metrics=_synthetic_metrics(),
        synthetic=True,
    )
