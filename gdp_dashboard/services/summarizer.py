# gdp_dashboard/services/summarizer.py
from __future__ import annotations

from typing import Optional, Union

from ..models import AggregateSummary


def format_number(num: Union[int, float, None], decimals: int = 0) -> str:
    """1234567.8 -> '1,234,568' (or with `decimals` places)."""
    if num is None:
        return "N/A"
    return f"{num:,.{decimals}f}"


def format_growth(value: Union[float, str]) -> str:
    return f"{value:+.1f}%" if isinstance(value, (int, float)) else "N/A"


def generate_summary(summary: AggregateSummary, synthetic_count: Optional[int] = None) -> str:
    if not summary.has_data:
        return f"No GDP data is available for {summary.year}."

    trillions = summary.total_gdp / 1000.0
    top = summary.top_country.name if summary.top_country else "N/A"
    text = (
        f"In {summary.year}, the {summary.country_count} tracked economies had a combined GDP of "
        f"${format_number(trillions, 2)}T. {top} ranked first by total GDP, and the average GDP "
        f"per capita was ${format_number(summary.average_gdp_per_capita)}."
    )
    if synthetic_count:
        text += f" Figures for {synthetic_count} countries are illustrative defaults."
    return text
