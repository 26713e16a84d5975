"""Decision matrix scoring engine.

Reduces each career option to a total of three 1-5 scores (interest, skills
match, job demand) and provides the sorted and filtered views of a row set.
Everything here is pure; persistence lives in ``tools.matrix``.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, Union

from .models import FreeTextSkill, MatrixRow, NumberSkill, SortDirection, SortKey, ViewFilter

logger = logging.getLogger(__name__)

SCORE_MIN = 1
SCORE_MAX = 5

_NUMBER_RE = re.compile(r"-?\d+(\.\d+)?")

Number = Union[int, float]


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return float(value)
        text = str(value).strip()
        if not text:
            return None
        return float(text)
    except (ValueError, OverflowError):
        return None


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def clamp_score(value: Any) -> int:
    """Coerce a score field to 1-5.

    0 means unset: empty input, text without a finite number, and a literal 0
    (what an unset score is stored as) all come back as 0.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return 0 if value == 0 else max(SCORE_MIN, min(SCORE_MAX, value))
    n = _to_float(value)
    if n is None or not math.isfinite(n) or n == 0:
        return 0
    return max(SCORE_MIN, min(SCORE_MAX, round_half_up(n)))


def extract_number(text: Any) -> Number:
    """Return the first signed/decimal number embedded in text, or 0."""
    match = _NUMBER_RE.search(str(text or ""))
    if not match:
        return 0
    if match.group(1):
        return float(match.group(0))
    return int(match.group(0))


def parse_skills(value: Any) -> dict:
    """Turn raw skills input into the tagged ``NumberSkill | FreeTextSkill`` form.

    Numbers and numeric strings become clamped number scores; other text is
    kept verbatim so the embedded number can be extracted later.
    """
    if isinstance(value, (NumberSkill, FreeTextSkill)):
        return value.model_dump()
    if isinstance(value, dict) and value.get("kind") in ("number", "text"):
        return value
    if isinstance(value, str) and value.strip() and _to_float(value) is None:
        return {"kind": "text", "text": value.strip()}
    return {"kind": "number", "value": clamp_score(value)}


def skill_points(skills: Union[NumberSkill, FreeTextSkill]) -> Number:
    if isinstance(skills, FreeTextSkill):
        return extract_number(skills.text)
    return skills.value


def compute_total(row: MatrixRow) -> Number:
    return row.interest + skill_points(row.skills) + row.demand


def recalculate(rows: Iterable[MatrixRow]) -> list[MatrixRow]:
    """Return copies of rows with every total recomputed."""
    return [row.model_copy(update={"total": compute_total(row)}) for row in rows]


def sorted_view(
    rows: Iterable[MatrixRow],
    key: SortKey | str = SortKey.TOTAL,
    direction: SortDirection | str = SortDirection.DESC,
) -> list[MatrixRow]:
    """Sort rows by total or by name (case-insensitive). The sort is stable."""
    key = SortKey(key)
    reverse = SortDirection(direction) == SortDirection.DESC
    if key == SortKey.NAME:
        return sorted(rows, key=lambda r: r.name.casefold(), reverse=reverse)
    return sorted(rows, key=lambda r: r.total, reverse=reverse)


def filtered_view(rows: Iterable[MatrixRow], mode: ViewFilter | str = ViewFilter.ALL) -> list[MatrixRow]:
    """Keep all rows, or only those tied for the highest total."""
    rows = list(rows)
    if ViewFilter(mode) == ViewFilter.ALL or not rows:
        return rows
    best = max(r.total for r in rows)
    return [r for r in rows if r.total == best]


def view(
    rows: Iterable[MatrixRow],
    sort_key: SortKey | str = SortKey.TOTAL,
    direction: SortDirection | str = SortDirection.DESC,
    mode: ViewFilter | str = ViewFilter.ALL,
) -> list[MatrixRow]:
    return filtered_view(sorted_view(rows, sort_key, direction), mode)
