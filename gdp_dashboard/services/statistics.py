# gdp_dashboard/services/statistics.py
"""
Derived statistics for the dashboard.

Everything here is a pure function of (dataset, year, metric): no I/O, no
shared state, safe to call from any request handler.
"""
from __future__ import annotations

from typing import Any, List, Optional, Union

from .. import config
from ..models import (
    METRIC_ALIASES,
    AggregateSummary,
    ChartSeries,
    CountryDataset,
    CountryDetail,
    CountryRecord,
    HistoryRow,
    Metric,
)

UNAVAILABLE = "unavailable"


# -------------------------
# Selection helpers
# -------------------------
def latest_year() -> int:
    return max(config.SUPPORTED_YEARS)


def resolve_year(value: Any = None) -> int:
    """Clamp an external year selection to the window; default = latest year."""
    try:
        year = int(str(value).strip())
    except (TypeError, ValueError):
        return latest_year()
    return year if year in config.SUPPORTED_YEARS else latest_year()


def resolve_metric(value: Any = None) -> Metric:
    if isinstance(value, Metric):
        return value
    s = str(value or "").strip()
    try:
        return Metric(s)
    except ValueError:
        return METRIC_ALIASES.get(s.lower(), Metric.total_gdp)


# -------------------------
# Core statistics
# -------------------------
def rank(dataset: CountryDataset, year: int, metric: Metric = Metric.total_gdp) -> List[CountryRecord]:
    """
    Records having `year`, best first. Equal values keep dataset order: the
    sort key carries the original position explicitly.
    """
    rows = []
    for pos, record in enumerate(dataset.values()):
        m = record.metrics_for(year)
        if m is None:
            continue
        rows.append((-m.value(metric), pos, record))
    rows.sort(key=lambda r: (r[0], r[1]))
    return [r[2] for r in rows]


def aggregate(dataset: CountryDataset, year: int) -> AggregateSummary:
    present = [r for r in dataset.values() if r.metrics_for(year) is not None]
    if not present:
        return AggregateSummary(year=year)

    total_gdp = sum(r.yearly_metrics[year].gdp for r in present)
    avg_per_capita = sum(r.yearly_metrics[year].gdp_per_capita for r in present) / len(present)
    ranked = rank(dataset, year, Metric.total_gdp)
    return AggregateSummary(
        year=year,
        total_gdp=total_gdp,
        average_gdp_per_capita=avg_per_capita,
        top_country=ranked[0],
        country_count=len(present),
    )


def rank_of(dataset: CountryDataset, year: int, country_id: str) -> Union[int, str]:
    """1-based position by total GDP, or UNAVAILABLE if the country lacks `year`."""
    record = dataset.get(country_id)
    if record is None or record.metrics_for(year) is None:
        return UNAVAILABLE
    for i, r in enumerate(rank(dataset, year, Metric.total_gdp), start=1):
        if r.id == record.id:
            return i
    return UNAVAILABLE


def growth_rate(record: CountryRecord, year: int) -> Union[float, str]:
    """Year-over-year GDP change in %, one decimal."""
    cur = record.metrics_for(year)
    prev = record.metrics_for(year - 1)
    if cur is None or prev is None or prev.gdp == 0:
        return UNAVAILABLE
    return round((cur.gdp - prev.gdp) / prev.gdp * 100.0, 1)


# -------------------------
# View projections
# -------------------------
def search(dataset: CountryDataset, query: Optional[str]) -> List[CountryRecord]:
    """Case-insensitive substring match on current and historical names."""
    q = (query or "").strip().lower()
    if not q:
        return []
    return [
        r for r in dataset.values()
        if q in r.name.lower() or any(q in n.lower() for n in r.historical_names)
    ]


def detail(dataset: CountryDataset, country_id: str, year: int) -> Optional[CountryDetail]:
    record = dataset.get(country_id)
    if record is None:
        return None
    history = [
        HistoryRow(
            year=y,
            gdp=record.yearly_metrics[y].gdp,
            gdp_per_capita=record.yearly_metrics[y].gdp_per_capita,
            population=record.yearly_metrics[y].population,
        )
        for y in sorted(config.SUPPORTED_YEARS, reverse=True)
        if y in record.yearly_metrics
    ]
    return CountryDetail(
        id=record.id,
        name=record.name,
        region=record.region,
        currency=record.currency,
        historical_names=list(record.historical_names),
        synthetic=record.synthetic,
        year=year,
        metrics=record.metrics_for(year),
        rank=rank_of(dataset, year, country_id),
        growth_rate=growth_rate(record, year),
        history=history,
    )


def chart_series(
    dataset: CountryDataset,
    year: int,
    metric: Metric = Metric.total_gdp,
    top_n: int = config.TOP_N,
) -> ChartSeries:
    top = rank(dataset, year, metric)[:max(0, top_n)]
    return ChartSeries(
        title=f"Top {len(top)} Countries by {metric.short_name} ({year})",
        axis_label=metric.label,
        metric=metric,
        year=year,
        labels=[r.name for r in top],
        values=[r.yearly_metrics[year].value(metric) for r in top],
    )
