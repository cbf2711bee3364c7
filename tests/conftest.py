from pathlib import Path

import pytest

from gdp_dashboard.models import CountryRecord, YearMetrics

REPO_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def make_record(cid, name=None, years=None, **kwargs):
    """
    years: {year: gdp} or {year: (gdp, gdp_per_capita)}
    """
    metrics = {}
    for year, v in (years or {2025: 100}).items():
        gdp, per_capita = v if isinstance(v, tuple) else (v, v * 10)
        metrics[year] = YearMetrics(gdp=gdp, gdp_per_capita=per_capita, population=10)
    return CountryRecord(id=cid, name=name or cid.title(), yearly_metrics=metrics, **kwargs)


def page(script: str, title: str = "Country") -> str:
    return f"""<!DOCTYPE html>
<html>
<head><title>{title}</title></head>
<body>
  <h1>{title}</h1>
  <script>
{script}
  </script>
</body>
</html>
"""


JAPAN_PAGE = page(
    "const gdpData = {name: 'Japan', gdp_data: {2024: {gdp: 4000, gdp_per_capita: 32000, population: 125}}};",
    "Japan",
)


@pytest.fixture
def sample_dataset():
    return {
        "a": make_record("a", "Alpha", {2024: (100, 5000), 2025: (110, 5200)}),
        "b": make_record("b", "Beta", {2024: (200, 3000), 2025: (190, 2900)}),
        "c": make_record("c", "Gamma", {2025: (150, 8000)}, historical_names=["Old Gamma"]),
    }


@pytest.fixture
def pages_dir(tmp_path):
    """A SOURCE_DIR with a couple of country pages."""
    countries = tmp_path / "countries"
    countries.mkdir()
    (countries / "japan.html").write_text(JAPAN_PAGE, encoding="utf-8")
    (countries / "broken.html").write_text(page("const gdpData = {name: 'Broken', gdp_data: {2024: }};"), encoding="utf-8")
    (countries / "nodata.html").write_text(page("console.log('hello');"), encoding="utf-8")
    return tmp_path
