"""APS calculator and NSC pass-level evaluator.

Marks are banded onto the standard 7-point NSC scale and summed into an
Admission Point Score. The three pass levels are evaluated independently
against the raw marks (not against the APS total); the reported level is the
highest one satisfied.

These criteria approximate the national minimums; individual institutions
and faculties set their own APS and subject requirements on top of them.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Sequence, Union

from .models import APSResult, PassLevels, Tier
from .scoring import round_half_up

logger = logging.getLogger(__name__)

SUBJECT_KEYS = ("homeLanguage", "fal", "s3", "s4", "s5", "s6", "s7")
SUBJECT_COUNT = len(SUBJECT_KEYS)

# (lower bound, points), checked top-down
APS_BANDS = [
    (80, 7),
    (70, 6),
    (60, 5),
    (50, 4),
    (40, 3),
    (30, 2),
]

MarksInput = Union[Sequence[Any], Mapping[str, Any]]


def percent(value: Any) -> int:
    """Coerce a mark to an integer percentage in [0, 100]; junk becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, min(100, value))
    try:
        n = float(str(value).strip() or 0) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if math.isnan(n):
        return 0
    n = max(0.0, min(100.0, n))
    return round_half_up(n)


def mark_to_aps(mark: Any) -> int:
    """Band a percentage onto APS points: 0-29 -> 1 up to 80-100 -> 7."""
    m = percent(mark)
    for lower, points in APS_BANDS:
        if m >= lower:
            return points
    return 1


def normalize_marks(values: MarksInput) -> list[int]:
    """Return exactly seven clamped marks from a sequence or a subject mapping."""
    if isinstance(values, Mapping):
        raw = [values.get(k) for k in SUBJECT_KEYS]
    elif isinstance(values, (str, bytes)) or values is None:
        raw = []
    else:
        raw = list(values)[:SUBJECT_COUNT]
    raw += [None] * (SUBJECT_COUNT - len(raw))
    return [percent(v) for v in raw]


def _count_at_least(marks: list[int], threshold: int) -> int:
    return sum(1 for m in marks if m >= threshold)


def evaluate_pass_levels(values: MarksInput) -> PassLevels:
    """Evaluate the Higher Certificate, Diploma and Bachelor's criteria.

    Advice only targets the next unmet level: someone short of a Higher
    Certificate is told what that needs, not what a Bachelor's pass would.
    """
    marks = normalize_marks(values)

    ge50 = _count_at_least(marks, 50)
    ge40 = _count_at_least(marks, 40)
    ge30 = _count_at_least(marks, 30)

    pass_6_of_7 = ge30 >= 6
    home_language_ok = marks[0] >= 40

    base = pass_6_of_7 and home_language_ok
    higher_certificate = base and ge40 >= 2 and ge30 >= 5
    diploma = base and ge40 >= 4 and ge30 >= 6
    bachelors = base and ge50 >= 4 and ge30 >= 6

    best = Tier.NONE
    if higher_certificate:
        best = Tier.HIGHER_CERTIFICATE
    if diploma:
        best = Tier.DIPLOMA
    if bachelors:
        best = Tier.BACHELORS

    advice = []
    if not higher_certificate:
        if not home_language_ok:
            advice.append("Raise Home Language to at least 40%")
        if ge40 < 2:
            advice.append(f"Have at least 2 subjects at 40%+ (currently {ge40})")
        if not pass_6_of_7:
            advice.append("Ensure at least 6 of 7 subjects are 30%+")
    elif not diploma:
        if ge40 < 4:
            advice.append(f"Increase subjects at 40%+ to at least 4 (currently {ge40})")
    elif not bachelors:
        if ge50 < 4:
            advice.append(f"Increase subjects at 50%+ to at least 4 (currently {ge50})")

    return PassLevels(
        pass_6_of_7=pass_6_of_7,
        home_language_ok=home_language_ok,
        higher_certificate=higher_certificate,
        diploma=diploma,
        bachelors=bachelors,
        best=best,
        advice=advice,
    )


def compute_aps(values: MarksInput) -> APSResult:
    marks = normalize_marks(values)
    points = [mark_to_aps(m) for m in marks]
    return APSResult(
        marks=marks,
        points=points,
        total_aps=sum(points),
        pass_levels=evaluate_pass_levels(marks),
    )


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def format_summary(result: APSResult) -> str:
    """Plain-text summary suitable for the clipboard."""
    levels = result.pass_levels
    lines = [
        f"APS total: {result.total_aps}",
        f"Best eligible pass level: {levels.best.value}",
        f"Meets Bachelor's: {_yes_no(levels.bachelors)}",
        f"Meets Diploma: {_yes_no(levels.diploma)}",
        f"Meets Higher Certificate: {_yes_no(levels.higher_certificate)}",
    ]
    if levels.advice:
        lines.append("Next steps:")
        lines.extend(f"- {a}" for a in levels.advice)
    return "\n".join(lines)
