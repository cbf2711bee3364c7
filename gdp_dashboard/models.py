# gdp_dashboard/models.py
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class Metric(str, Enum):
    total_gdp = "totalGdp"
    gdp_per_capita = "gdpPerCapita"

    @property
    def label(self) -> str:
        return "Total GDP (Billions USD)" if self is Metric.total_gdp else "GDP per Capita (USD)"

    @property
    def short_name(self) -> str:
        return "GDP" if self is Metric.total_gdp else "GDP per Capita"


# legacy names used by the old dashboard pages
METRIC_ALIASES = {
    "gdp": Metric.total_gdp,
    "total_gdp": Metric.total_gdp,
    "totalgdp": Metric.total_gdp,
    "gdp_per_capita": Metric.gdp_per_capita,
    "gdppercapita": Metric.gdp_per_capita,
}


class YearMetrics(BaseModel):
    gdp: float = Field(gt=0)                       # billions USD
    gdp_per_capita: float = Field(gt=0)            # USD
    population: Optional[float] = Field(default=None, gt=0)  # millions

    def value(self, metric: Metric) -> float:
        return self.gdp if metric is Metric.total_gdp else self.gdp_per_capita


class CountryRecord(BaseModel):
    id: str
    name: str = Field(min_length=1)
    historical_names: List[str] = Field(default_factory=list)
    region: str = "Unknown"
    currency: str = "USD"
    yearly_metrics: Dict[int, YearMetrics]
    synthetic: bool = False

    @field_validator("id")
    @classmethod
    def _lower_id(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("yearly_metrics")
    @classmethod
    def _non_empty_metrics(cls, v: Dict[int, YearMetrics]) -> Dict[int, YearMetrics]:
        if not v:
            raise ValueError("yearly_metrics must hold at least one year")
        return v

    @model_validator(mode="after")
    def _current_name_in_history(self) -> "CountryRecord":
        if self.name not in self.historical_names:
            self.historical_names.append(self.name)
        return self

    def metrics_for(self, year: int) -> Optional[YearMetrics]:
        return self.yearly_metrics.get(year)


# id -> record; replaced wholesale on every load
CountryDataset = Dict[str, CountryRecord]


# ---------- Statistics outputs ----------
class AggregateSummary(BaseModel):
    year: int
    total_gdp: float = 0.0
    average_gdp_per_capita: Optional[float] = None
    top_country: Optional[CountryRecord] = None
    country_count: int = 0

    @property
    def has_data(self) -> bool:
        return self.country_count > 0


class HistoryRow(BaseModel):
    year: int
    gdp: float
    gdp_per_capita: float
    population: Optional[float] = None


class CountryDetail(BaseModel):
    id: str
    name: str
    region: str
    currency: str
    historical_names: List[str]
    synthetic: bool
    year: int
    metrics: Optional[YearMetrics] = None
    rank: Union[int, str]
    growth_rate: Union[float, str]
    history: List[HistoryRow]


class ChartSeries(BaseModel):
    title: str
    axis_label: str
    metric: Metric
    year: int
    labels: List[str]
    values: List[float]
