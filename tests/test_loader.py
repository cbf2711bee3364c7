import asyncio
import logging

import httpx
import pytest

from gdp_dashboard import config
from gdp_dashboard.adapters import HttpDocumentSource, LocalDocumentSource
from gdp_dashboard.adapters.synthetic import synthetic_record
from gdp_dashboard.errors import FetchError
from gdp_dashboard.services.loader import load, load_country, load_sync

from .conftest import JAPAN_PAGE, REPO_DATA_DIR, page


def _mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _run_http(ids, handler):
    async def go():
        source = HttpDocumentSource(base_url="http://pages.test", timeout=2)
        async with _mock_client(handler) as client:
            return await load(ids, source, client=client)
    return asyncio.run(go())


def test_synthetic_record_defaults():
    rec = synthetic_record("usa")
    assert rec.name == "United States"
    assert rec.historical_names == ["United States"]
    assert rec.region == "Unknown"
    assert rec.currency == "USD"
    assert rec.synthetic is True
    assert sorted(rec.yearly_metrics) == list(config.SUPPORTED_YEARS)
    assert rec.yearly_metrics[2025].gdp == 1000
    assert rec.yearly_metrics[2024].gdp == 950
    assert rec.yearly_metrics[2023].gdp_per_capita == 9000
    assert rec.yearly_metrics[2022].gdp == 850
    assert all(m.population == 100 for m in rec.yearly_metrics.values())


def test_synthetic_record_unknown_id_uses_id_as_name():
    assert synthetic_record("atlantis").name == "atlantis"


def test_http_load_mixes_real_and_synthetic(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/countries/japan.html":
            return httpx.Response(200, text=JAPAN_PAGE)
        if path == "/countries/india.html":
            return httpx.Response(500, text="oops")
        if path == "/countries/usa.html":
            return httpx.Response(200, text=page("const gdpData = {name: 'United States', gdp_data: {2025: {gdp: }}};"))
        if path == "/countries/uk.html":
            return httpx.Response(200, text=page("const somethingElse = {};"))
        if path == "/countries/france.html":
            return httpx.Response(200, text=page("const gdpData = {gdp_data: {2025: {gdp: 1, gdp_per_capita: 2}}};"))
        raise httpx.ConnectError("connection refused", request=request)

    ids = ["japan", "india", "usa", "uk", "france", "china"]
    with caplog.at_level(logging.WARNING):
        dataset = _run_http(ids, handler)

    assert list(dataset) == ids
    assert dataset["japan"].synthetic is False
    assert dataset["japan"].yearly_metrics[2024].gdp == 4000
    for cid in ids[1:]:
        assert dataset[cid].synthetic is True
        assert dataset[cid].yearly_metrics

    messages = caplog.text
    assert "FetchError for india" in messages
    assert "MalformedData for usa" in messages
    assert "NotFound for uk" in messages
    assert "InvalidShape for france" in messages
    assert "FetchError for china" in messages


def test_timeout_falls_back_to_synthetic():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    dataset = _run_http(["japan"], handler)
    assert dataset["japan"].synthetic is True
    assert dataset["japan"].name == "Japan"


def test_ids_are_normalized_and_deduplicated():
    def handler(request):
        return httpx.Response(404)

    dataset = _run_http(["Japan", "japan", " usa ", ""], handler)
    assert list(dataset) == ["japan", "usa"]


def test_reload_returns_new_dataset():
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        gdp = 100 * calls["n"]
        return httpx.Response(200, text=page(
            f"const gdpData = {{name: 'Japan', gdp_data: {{2025: {{gdp: {gdp}, gdp_per_capita: 1}}}}}};"
        ))

    first = _run_http(["japan"], handler)
    second = _run_http(["japan"], handler)
    assert first is not second
    assert first["japan"].yearly_metrics[2025].gdp == 100
    assert second["japan"].yearly_metrics[2025].gdp == 200


def test_fetches_run_concurrently():
    started = []
    release = asyncio.Event()

    class SlowSource(LocalDocumentSource):
        async def fetch(self, country_id, client=None):
            started.append(country_id)
            if len(started) == 3:
                release.set()
            # every fetch waits until all three have started
            await asyncio.wait_for(release.wait(), timeout=2)
            return JAPAN_PAGE.replace("Japan", country_id.title())

    async def go():
        return await load(["a", "b", "c"], SlowSource())

    dataset = asyncio.run(go())
    assert sorted(started) == ["a", "b", "c"]
    assert [r.name for r in dataset.values()] == ["A", "B", "C"]
    assert not any(r.synthetic for r in dataset.values())


def test_local_source_reads_pages(pages_dir):
    source = LocalDocumentSource(root=pages_dir)
    dataset = asyncio.run(load(["japan", "broken", "nodata", "missing"], source))
    assert list(dataset) == ["japan", "broken", "nodata", "missing"]
    assert dataset["japan"].synthetic is False
    assert dataset["broken"].synthetic is True
    assert dataset["nodata"].synthetic is True
    assert dataset["missing"].synthetic is True


def test_local_source_missing_file_raises_fetch_error(tmp_path):
    source = LocalDocumentSource(root=tmp_path)
    with pytest.raises(FetchError):
        asyncio.run(source.fetch("nowhere"))


def test_load_country_never_raises_for_ingest_errors(tmp_path):
    record = asyncio.run(load_country("canada", LocalDocumentSource(root=tmp_path)))
    assert record.synthetic is True
    assert record.name == "Canada"


def test_load_sync_with_bundled_pages():
    dataset = load_sync(config.DEFAULT_COUNTRY_IDS, LocalDocumentSource(root=REPO_DATA_DIR))
    assert list(dataset) == config.DEFAULT_COUNTRY_IDS
    # canada has no bundled page
    assert dataset["canada"].synthetic is True
    assert sum(r.synthetic for r in dataset.values()) == 1
    assert dataset["brazil"].yearly_metrics[2025].population is None


def test_number_too_large_for_float_drops_year_without_aborting(tmp_path):
    huge = "1" + "0" * 400
    countries = tmp_path / "countries"
    countries.mkdir()
    (countries / "japan.html").write_text(page(
        f"const gdpData = {{name: 'Japan', gdp_data: {{2024: {{gdp: {huge}, gdp_per_capita: 1}}, "
        f"2025: {{gdp: 4190, gdp_per_capita: 34060}}}}}};"
    ))
    (countries / "usa.html").write_text(page(
        f"const gdpData = {{name: 'United States', gdp_data: {{2025: {{gdp: {huge}, gdp_per_capita: 1}}}}}};"
    ))

    dataset = asyncio.run(load(["japan", "usa"], LocalDocumentSource(root=tmp_path)))
    assert list(dataset) == ["japan", "usa"]
    assert dataset["japan"].synthetic is False
    assert list(dataset["japan"].yearly_metrics) == [2025]
    # no usable year left
    assert dataset["usa"].synthetic is True


def test_deeply_nested_literal_falls_back(tmp_path, caplog):
    depth = 100_000
    countries = tmp_path / "countries"
    countries.mkdir()
    (countries / "japan.html").write_text(page(
        "const gdpData = {name: 'Japan', x: " + "[" * depth + "]" * depth + "};"
    ))
    (countries / "usa.html").write_text(JAPAN_PAGE.replace("Japan", "United States"))

    with caplog.at_level(logging.WARNING):
        dataset = asyncio.run(load(["japan", "usa"], LocalDocumentSource(root=tmp_path)))
    assert dataset["japan"].synthetic is True
    assert dataset["usa"].synthetic is False
    assert "MalformedData for japan" in caplog.text


def test_unexpected_error_falls_back_and_is_logged(caplog):
    class BrokenSource(LocalDocumentSource):
        async def fetch(self, country_id, client=None):
            if country_id == "japan":
                raise RuntimeError("boom")
            return JAPAN_PAGE.replace("Japan", country_id.title())

    with caplog.at_level(logging.ERROR):
        dataset = asyncio.run(load(["japan", "usa"], BrokenSource()))
    assert dataset["japan"].synthetic is True
    assert dataset["usa"].synthetic is False
    assert "Unexpected error loading japan" in caplog.text


def test_synthetic_series_strictly_descends_over_long_window(monkeypatch):
    monkeypatch.setattr(config, "SUPPORTED_YEARS", tuple(range(1990, 2026)))
    rec = synthetic_record("usa")
    years = sorted(rec.yearly_metrics)
    assert years == list(range(1990, 2026))
    gdps = [rec.yearly_metrics[y].gdp for y in years]
    assert all(a < b for a, b in zip(gdps, gdps[1:]))
    assert gdps[0] > 0
    assert rec.yearly_metrics[2025].gdp == 1000
