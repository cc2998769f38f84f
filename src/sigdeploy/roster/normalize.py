"""Per-field text normalization applied while parsing roster rows."""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal

# Legal-form suffixes written loosely in the roster, mapped to canonical form.
# The suffix must be separated from the name by whitespace or a comma.
_COMPANY_SUFFIXES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(?:\s*,\s*|\s+)s\.?\s*r\.?\s*o\.?$", re.IGNORECASE), ", s.r.o."),
    (re.compile(r"(?:\s*,\s*|\s+)a\.?\s*s\.?$", re.IGNORECASE), ", a.s."),
    (re.compile(r"(?:\s*,\s*|\s+)k\.?\s*s\.?$", re.IGNORECASE), ", k.s."),
    (re.compile(r"(?:\s*,\s*|\s+)v\.?\s*o\.?\s*s\.?$", re.IGNORECASE), ", v.o.s."),
]

_TRUE_VALUES = frozenset({"true", "1", "yes", "y", "x", "ano", "áno"})


def cell_text(value: object) -> str:
    """Render a spreadsheet cell as trimmed text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == datetime.min.time() else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def normalize_company(name: str) -> str:
    """Expand a trailing legal-form suffix: ``Acme s r o`` -> ``Acme, s.r.o.``."""
    name = name.strip()
    for pattern, canonical in _COMPANY_SUFFIXES:
        match = pattern.search(name)
        if match and match.start() > 0:
            return name[: match.start()].rstrip(" ,") + canonical
    return name


def normalize_country(country: str, fallback: str) -> str:
    country = country.strip()
    return country or fallback


def parse_flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return cell_text(value).casefold() in _TRUE_VALUES
