from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .. import config
from ..models import AggregateSummary, CountryRecord, Metric
from .summarizer import format_number


def _env(templates_dir: Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(),
    )
    env.filters["number"] = format_number
    return env


def render_dashboard(
    ranking: List[CountryRecord],
    summary: AggregateSummary,
    summary_text: str,
    year: int,
    metric: Metric,
    query: str = "",
    matches: Optional[List[CountryRecord]] = None,
    templates_dir: Path = config.TEMPLATES_DIR,
) -> str:
    """
    Renders templates/dashboard.html. An empty ranking renders the explicit
    "no data" state instead of an empty table.
    """
    tmpl = _env(templates_dir).get_template("dashboard.html")
    return tmpl.render(
        ranking=ranking,
        summary=summary,
        summary_text=summary_text,
        year=year,
        years=sorted(config.SUPPORTED_YEARS, reverse=True),
        metric=metric,
        metrics=list(Metric),
        query=query,
        matches=matches or [],
    )
