# gdp_dashboard/services/repair.py
"""
Best-effort repair of the near-JSON object literals embedded in country pages.

The pages declare their data as JavaScript object literals. Exactly three
deviations from JSON are corrected, and nothing else:

  1. single-quoted strings        {name: 'Japan'}      -> {name: "Japan"}
  2. bare identifier/integer keys {name: 1, 2024: 2}   -> {"name": 1, "2024": 2}
  3. trailing commas              {a: 1, b: 2,}        -> {a: 1, b: 2}

Rewrites 2 and 3 are only applied outside string literals, so values such as
"Rome, Italy" or "http://example.org" survive untouched. Anything else the
source gets wrong (comments, NaN, expressions...) is left for json.loads to
reject.
"""
from __future__ import annotations

import json
import re

from ..errors import MalformedData

# "..." or '...' with backslash escapes
_STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'', re.DOTALL)

# key directly after "{" or "," (whitespace allowed), not already quoted
_BARE_KEY_RE = re.compile(r'([{,]\s*)([A-Za-z_$][\w$]*|\d+)(\s*):')

_TRAILING_COMMA_RE = re.compile(r',(\s*[}\]])')


def _requote(token: str) -> str:
    """Turn one string token into a JSON string token."""
    if token.startswith('"'):
        return token
    inner = token[1:-1]
    inner = inner.replace("\\'", "'")
    # escape bare double quotes; keep existing escapes intact
    inner = re.sub(r'(?<!\\)"', r'\\"', inner)
    return f'"{inner}"'


def _fix_code(segment: str) -> str:
    segment = _BARE_KEY_RE.sub(r'\1"\2"\3:', segment)
    return _TRAILING_COMMA_RE.sub(r'\1', segment)


def repair_literal(text: str) -> str:
    """
    Return `text` rewritten into strict JSON syntax (see module docstring).
    Raises MalformedData for empty input.
    """
    if not text or not text.strip():
        raise MalformedData("empty data literal")

    out = []
    pos = 0
    for m in _STRING_RE.finditer(text):
        out.append(_fix_code(text[pos:m.start()]))
        out.append(_requote(m.group(0)))
        pos = m.end()
    out.append(_fix_code(text[pos:]))

    return "".join(out)


def parse_literal(text: str) -> object:
    """Repair then parse; any JSON failure becomes MalformedData."""
    repaired = repair_literal(text)
    try:
        return json.loads(repaired)
    except json.JSONDecodeError as e:
        raise MalformedData(f"could not parse data literal: {e.msg} (line {e.lineno}, col {e.colno})") from e
    except RecursionError as e:
        raise MalformedData("data literal is nested too deeply") from e
