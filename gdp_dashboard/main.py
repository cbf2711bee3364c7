from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from . import config
from .models import AggregateSummary, CountryDetail, Metric
from .services import statistics
from .services.render import render_dashboard
from .services.summarizer import generate_summary
from .services.visualize import make_bar_chart
from .state import DashboardState
from .utils.geo import country_id as to_country_id

config.configure_logging()


# ---------- Schemas ----------
class RankingItem(BaseModel):
    rank: int
    id: str
    name: str
    value: float
    synthetic: bool = False

class RankingResponse(BaseModel):
    year: int
    metric: Metric
    label: str
    items: List[RankingItem]

class SummaryResponse(BaseModel):
    year: int
    total_gdp: float
    average_gdp_per_capita: Optional[float] = None
    top_country: Optional[str] = None
    country_count: int
    summary: str

class SearchItem(BaseModel):
    id: str
    name: str
    historical_names: List[str]
    gdp: Optional[float] = None

class SearchResponse(BaseModel):
    query: str
    year: int
    results: List[SearchItem]

class RefreshResponse(BaseModel):
    countries: int
    synthetic: int


# ---------- App ----------
app = FastAPI(title="GDP Dashboard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

state = DashboardState()


# ---------- Helpers ----------
async def _dataset():
    """Loaded dataset, or 503 when nothing at all could be loaded."""
    dataset = await state.ensure_loaded()
    if not dataset:
        raise HTTPException(status_code=503, detail="No data available")
    return dataset


def _synthetic_count(dataset) -> int:
    return sum(1 for r in dataset.values() if r.synthetic)


def _summary_response(summary: AggregateSummary, text: str) -> SummaryResponse:
    return SummaryResponse(
        year=summary.year,
        total_gdp=summary.total_gdp,
        average_gdp_per_capita=summary.average_gdp_per_capita,
        top_country=summary.top_country.name if summary.top_country else None,
        country_count=summary.country_count,
        summary=text,
    )


# ---------- Routes ----------
@app.get("/health")
def health():
    return {"status": "ok", "loaded": state.loaded, "countries": len(state.dataset)}


@app.get("/countries", response_model=RankingResponse)
async def ranking(year: Optional[str] = None, metric: Optional[str] = None):
    dataset = await _dataset()
    year, metric = statistics.resolve_year(year), statistics.resolve_metric(metric)
    ranked = statistics.rank(dataset, year, metric)
    items = [
        RankingItem(
            rank=i,
            id=r.id,
            name=r.name,
            value=r.yearly_metrics[year].value(metric),
            synthetic=r.synthetic,
        )
        for i, r in enumerate(ranked, start=1)
    ]
    return RankingResponse(year=year, metric=metric, label=metric.label, items=items)


@app.get("/summary", response_model=SummaryResponse)
async def summary(year: Optional[str] = None):
    dataset = await _dataset()
    year = statistics.resolve_year(year)
    agg = statistics.aggregate(dataset, year)
    return _summary_response(agg, generate_summary(agg, _synthetic_count(dataset)))


@app.get("/countries/{country}", response_model=CountryDetail)
async def country_detail(country: str, year: Optional[str] = None):
    dataset = await _dataset()
    year = statistics.resolve_year(year)
    cid = to_country_id(country)
    info = statistics.detail(dataset, cid, year)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Unknown country '{country}'")
    return info


@app.get("/search", response_model=SearchResponse)
async def search(q: str = Query("", description="Part of a current or historical name"), year: Optional[str] = None):
    dataset = await _dataset()
    year = statistics.resolve_year(year)
    results = []
    for r in statistics.search(dataset, q):
        m = r.metrics_for(year)
        results.append(SearchItem(
            id=r.id,
            name=r.name,
            historical_names=r.historical_names,
            gdp=m.gdp if m else None,
        ))
    return SearchResponse(query=q.strip(), year=year, results=results)


@app.get("/chart")
async def chart(year: Optional[str] = None, metric: Optional[str] = None, top: Optional[int] = None):
    dataset = await _dataset()
    year, metric = statistics.resolve_year(year), statistics.resolve_metric(metric)
    series = statistics.chart_series(dataset, year, metric, config.TOP_N if top is None else top)
    return Response(content=make_bar_chart(series), media_type="image/png")


@app.post("/refresh", response_model=RefreshResponse)
async def refresh():
    dataset = await state.refresh()
    return RefreshResponse(countries=len(dataset), synthetic=_synthetic_count(dataset))


@app.get("/", response_class=HTMLResponse)
async def dashboard(year: Optional[str] = None, metric: Optional[str] = None, q: str = ""):
    dataset = await state.ensure_loaded()
    year, metric = statistics.resolve_year(year), statistics.resolve_metric(metric)
    agg = statistics.aggregate(dataset, year)
    html = render_dashboard(
        ranking=statistics.rank(dataset, year, metric),
        summary=agg,
        summary_text=generate_summary(agg, _synthetic_count(dataset)),
        year=year,
        metric=metric,
        query=q.strip(),
        matches=statistics.search(dataset, q),
    )
    return HTMLResponse(html, status_code=200 if dataset else 503)
