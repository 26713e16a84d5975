"""CSV and JSON export/import for decision matrix rows.

Exports are plain text; imports are all-or-nothing. A payload that cannot be
parsed into a list of row records raises ``ImportFormatError`` before any
caller state is touched.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from typing import Any, Iterable, Mapping, Sequence

from pydantic import ValidationError

from .models import MatrixRow
from .scoring import skill_points

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Career Option",
    "Interest (1-5)",
    "Skills Match (1-5)",
    "Job Demand (1-5)",
    "Qualification",
    "Funding",
    "Total",
]


class ImportFormatError(ValueError):
    """Raised when an import payload is not a sequence of row records."""


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def to_csv(headers: Sequence[str], rows: Iterable[Mapping[str, Any] | Sequence[Any]]) -> str:
    """Render rows as CSV.

    Rows may be mappings keyed by header or positional sequences. Fields that
    contain a comma, a quote or a newline are quoted, with quotes doubled.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([_cell(h) for h in headers])
    for row in rows:
        if isinstance(row, Mapping):
            writer.writerow([_cell(row.get(h)) for h in headers])
        else:
            writer.writerow([_cell(v) for v in row])
    return buf.getvalue()


def rows_to_csv(rows: Iterable[MatrixRow]) -> str:
    records = [
        [r.name, r.interest, skill_points(r.skills), r.demand, r.qualification, r.funding, r.total]
        for r in rows
    ]
    return to_csv(CSV_HEADERS, records)


def rows_from_csv(text: str) -> list[MatrixRow]:
    """Parse the 7-column matrix CSV back into rows with fresh ids."""
    if not isinstance(text, str):
        raise ImportFormatError("CSV import expects text")
    try:
        records = list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))
    except csv.Error as exc:
        raise ImportFormatError(f"Invalid CSV: {exc}") from exc

    records = [rec for rec in records if any(cell.strip() for cell in rec)]
    if not records:
        raise ImportFormatError("CSV is empty")

    header = [h.strip() for h in records[0]]
    if header != CSV_HEADERS:
        raise ImportFormatError("Unexpected CSV header: " + ",".join(header))

    rows = []
    for line_no, rec in enumerate(records[1:], start=2):
        if len(rec) != len(CSV_HEADERS):
            raise ImportFormatError(f"Row {line_no} has {len(rec)} columns, expected {len(CSV_HEADERS)}")
        name, interest, skills, demand, qualification, funding, _total = rec
        rows.append(MatrixRow(
            name=name,
            interest=interest,
            skills=skills,
            demand=demand,
            qualification=qualification,
            funding=funding,
        ))
    return rows


def rows_to_json(rows: Iterable[MatrixRow]) -> str:
    return json.dumps([r.model_dump(mode="json") for r in rows], indent=2)


def rows_from_json(text: str) -> list[MatrixRow]:
    """Parse a JSON array of row objects; totals are recomputed."""
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ImportFormatError(f"Invalid JSON: {exc}") from exc

    if not isinstance(parsed, list):
        raise ImportFormatError("Invalid format: expected a JSON array of rows")

    rows = []
    for i, item in enumerate(parsed):
        if not isinstance(item, dict):
            raise ImportFormatError(f"Invalid format: item {i} is not an object")
        try:
            rows.append(MatrixRow.model_validate(item))
        except ValidationError as exc:
            raise ImportFormatError(f"Invalid row {i}: {exc.error_count()} field error(s)") from exc
    return rows
