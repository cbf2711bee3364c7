# gdp_dashboard/services/normalizer.py
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from bs4 import BeautifulSoup
from pydantic import ValidationError

from .. import config
from ..errors import InvalidShape, MalformedData, NotFound
from ..models import CountryRecord, YearMetrics
from .repair import parse_literal

logger = logging.getLogger(__name__)

# strict pages ship the literal in its own block instead of a JS declaration
JSON_BLOCK_ID = "gdp-data"

NESTED_KEYS = ("gdp_data", "yearlyMetrics", "yearly_metrics")
PARALLEL_GDP_KEYS = ("gdp", "gdp_by_year")
PARALLEL_PER_CAPITA_KEYS = ("gdp_per_capita", "gdpPerCapita", "gdp_per_capita_by_year")
PER_CAPITA_FIELDS = ("gdp_per_capita", "gdpPerCapita")
HISTORICAL_NAME_KEYS = ("historical_names", "historicalNames")


def _marker_re(variable: str) -> re.Pattern:
    return re.compile(rf"\b(?:const|let|var)\s+{re.escape(variable)}\s*=\s*")


# ---------------- Locating the literal ----------------
def _balanced_object(text: str, start: int) -> Optional[str]:
    """
    Return the {...} literal opening at text[start], honouring quotes so braces
    inside strings don't count. None if it never closes.
    """
    depth = 0
    quote = None
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in "\"'`":
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _literal_after_marker(text: str, marker: re.Pattern) -> Optional[str]:
    m = marker.search(text)
    if not m:
        return None
    pos = m.end()
    if pos >= len(text) or text[pos] != "{":
        return None
    literal = _balanced_object(text, pos)
    if literal is None:
        raise MalformedData("data literal is never closed")
    return literal


def _script_texts(payload: str) -> Iterable[tuple]:
    soup = BeautifulSoup(payload, "html.parser")
    for tag in soup.find_all("script"):
        yield tag, tag.string or tag.get_text() or ""


def extract_literal(payload: str, variable: str = config.DATA_VARIABLE) -> str:
    """
    Find the embedded data literal in an HTML page. Raises NotFound when no
    recognizable declaration (or JSON block) is present.
    """
    if not payload:
        raise NotFound("empty document")

    marker = _marker_re(variable)
    saw_script = False
    for tag, text in _script_texts(payload):
        saw_script = True
        if tag.get("id") == JSON_BLOCK_ID and text.strip():
            return text.strip()
        literal = _literal_after_marker(text, marker)
        if literal is not None:
            return literal

    # plain .js / text payloads have no <script> wrapper
    if not saw_script:
        literal = _literal_after_marker(payload, marker)
        if literal is not None:
            return literal

    raise NotFound(f"no '{variable}' declaration found")


# ---------------- Shapes ----------------
@dataclass
class NestedShape:
    """One mapping keyed by year, each value holding all three metrics."""
    by_year: Dict[Any, Any]


@dataclass
class ParallelShape:
    """Two flat mappings keyed by year: gdp and gdp per capita. No population."""
    gdp: Dict[Any, Any]
    gdp_per_capita: Dict[Any, Any] = field(default_factory=dict)


RawShape = Union[NestedShape, ParallelShape]


def _first_mapping(data: Dict[str, Any], keys: Iterable[str]) -> Optional[Dict[Any, Any]]:
    for k in keys:
        v = data.get(k)
        if isinstance(v, dict):
            return v
    return None


def resolve_shape(data: Dict[str, Any]) -> RawShape:
    nested = _first_mapping(data, NESTED_KEYS)
    if nested is not None:
        return NestedShape(nested)
    gdp = _first_mapping(data, PARALLEL_GDP_KEYS)
    per_capita = _first_mapping(data, PARALLEL_PER_CAPITA_KEYS)
    if gdp is not None and per_capita is not None:
        return ParallelShape(gdp, per_capita)
    raise InvalidShape("no yearly metrics in a known shape")


# ---------------- Value coercion ----------------
def _to_year(key: Any) -> Optional[int]:
    try:
        year = int(str(key).strip())
    except ValueError:
        return None
    return year if year in config.SUPPORTED_YEARS else None


def _to_positive(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(str(value).replace(",", "")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return num if math.isfinite(num) and num > 0 else None


def _pick(row: Dict[str, Any], keys: Iterable[str]) -> Any:
    for k in keys:
        if k in row:
            return row[k]
    return None


def _metrics_from_shape(shape: RawShape) -> Dict[int, YearMetrics]:
    out: Dict[int, YearMetrics] = {}
    if isinstance(shape, NestedShape):
        for key, row in shape.by_year.items():
            year = _to_year(key)
            if year is None or not isinstance(row, dict):
                continue
            gdp = _to_positive(row.get("gdp"))
            per_capita = _to_positive(_pick(row, PER_CAPITA_FIELDS))
            if gdp is None or per_capita is None:
                continue
            out[year] = YearMetrics(
                gdp=gdp,
                gdp_per_capita=per_capita,
                population=_to_positive(row.get("population")),
            )
    else:
        per_capita_by_year = {_to_year(k): v for k, v in shape.gdp_per_capita.items()}
        for key, value in shape.gdp.items():
            year = _to_year(key)
            if year is None:
                continue
            gdp = _to_positive(value)
            per_capita = _to_positive(per_capita_by_year.get(year))
            if gdp is None or per_capita is None:
                continue
            out[year] = YearMetrics(gdp=gdp, gdp_per_capita=per_capita)
    return dict(sorted(out.items()))


def _historical_names(data: Dict[str, Any]) -> List[str]:
    raw = _pick(data, HISTORICAL_NAME_KEYS)
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    return [str(n).strip() for n in raw if isinstance(n, str) and n.strip()]


# ---------------- Entry point ----------------
def build_record(country_id: str, data: Any) -> CountryRecord:
    """Map an already-parsed literal to a CountryRecord."""
    if not isinstance(data, dict):
        raise MalformedData("data literal is not an object", country_id)

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidShape("missing 'name'", country_id)

    try:
        shape = resolve_shape(data)
    except InvalidShape as e:
        e.country_id = country_id
        raise
    metrics = _metrics_from_shape(shape)
    if not metrics:
        raise InvalidShape("no usable year within the supported window", country_id)

    region = data.get("region")
    currency = data.get("currency")
    try:
        return CountryRecord(
            id=country_id,
            name=name.strip(),
            historical_names=_historical_names(data),
            region=region.strip() if isinstance(region, str) and region.strip() else "Unknown",
            currency=currency.strip() if isinstance(currency, str) and currency.strip() else "USD",
            yearly_metrics=metrics,
        )
    except ValidationError as e:
        raise InvalidShape(f"record failed validation: {e}", country_id) from e


def normalize(country_id: str, payload: str, variable: str = config.DATA_VARIABLE) -> CountryRecord:
    """
    Turn one source document into a CountryRecord.
    Raises NotFound / MalformedData / InvalidShape; the loader decides what to
    do about them.
    """
    country_id = country_id.strip().lower()
    try:
        literal = extract_literal(payload, variable)
        data = parse_literal(literal)
    except (NotFound, MalformedData) as e:
        e.country_id = country_id
        raise
    record = build_record(country_id, data)
    logger.info("Loaded data for %s (%d years)", record.name, len(record.yearly_metrics))
    return record
