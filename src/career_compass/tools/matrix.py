"""Persistent career decision matrix.

Rows live under ``matrix:rows`` and are written through on every command.
Imports replace the whole row set or, on a malformed payload, nothing at all.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from ..core import codec
from ..core import scoring
from ..core.models import MatrixRow, SortDirection, SortKey, ViewFilter
from ..sinks import TextSink, safe_write
from ..store import Store

logger = logging.getLogger(__name__)

NS = "matrix"
ROWS_KEY = "rows"

CSV_FILENAME = "decision-matrix.csv"
JSON_FILENAME = "decision-matrix.json"

EXAMPLE_ROWS = [
    {
        "id": "ex-1",
        "name": "Foundation Phase Teacher",
        "interest": 4,
        "skills": 4,
        "demand": 5,
        "qualification": "B.Ed Degree",
        "funding": "Funza Lushaka",
    },
    {
        "id": "ex-2",
        "name": "Human Resources Officer",
        "interest": 3,
        "skills": 3,
        "demand": 4,
        "qualification": "Diploma/Degree",
        "funding": "NSFAS",
    },
]


def example_rows() -> list[MatrixRow]:
    return [MatrixRow.model_validate(r) for r in EXAMPLE_ROWS]


class DecisionMatrix:
    """Scored career options with sorting, filtering and CSV/JSON exchange."""

    def __init__(self, store: Store):
        self.store = store
        self._rows = self._restore()

    def _restore(self) -> list[MatrixRow]:
        saved = self.store.get(NS, ROWS_KEY, None)
        if not isinstance(saved, list):
            return example_rows()
        rows = []
        for item in saved:
            if not isinstance(item, dict):
                continue
            try:
                rows.append(MatrixRow.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping unreadable saved matrix row: %s", exc)
        return rows

    def _persist(self) -> bool:
        return self.store.set(NS, ROWS_KEY, [r.model_dump(mode="json") for r in self._rows])

    def _index_of(self, row_id: str) -> int:
        for i, row in enumerate(self._rows):
            if row.id == row_id:
                return i
        raise KeyError(row_id)

    @property
    def rows(self) -> list[MatrixRow]:
        return list(self._rows)

    def get_row(self, row_id: str) -> MatrixRow:
        return self._rows[self._index_of(row_id)]

    def recalculate(self) -> list[MatrixRow]:
        self._rows = scoring.recalculate(self._rows)
        self._persist()
        return self.rows

    def add_row(self, **fields: Any) -> MatrixRow:
        """Append a row; with no fields it is blank and scores 0."""
        fields.pop("total", None)
        row = MatrixRow.model_validate(fields)
        self._rows.append(row)
        self._persist()
        return row

    def update_row(self, row_id: str, **fields: Any) -> MatrixRow:
        """Apply a partial edit and recompute that row's total.

        ``id`` and ``total`` cannot be changed through an edit.
        """
        i = self._index_of(row_id)
        data = self._rows[i].model_dump()
        data.update({k: v for k, v in fields.items() if k not in ("id", "total")})
        row = MatrixRow.model_validate(data)
        self._rows[i] = row
        self._persist()
        return row

    def remove_row(self, row_id: str) -> bool:
        before = len(self._rows)
        self._rows = [r for r in self._rows if r.id != row_id]
        if len(self._rows) == before:
            return False
        self._persist()
        return True

    def clear(self) -> None:
        self._rows = []
        self._persist()

    def reset_examples(self) -> list[MatrixRow]:
        self._rows = example_rows()
        self._persist()
        return self.rows

    def sorted_view(
        self,
        key: SortKey | str = SortKey.TOTAL,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> list[MatrixRow]:
        return scoring.sorted_view(self._rows, key, direction)

    def filtered_view(self, mode: ViewFilter | str = ViewFilter.ALL) -> list[MatrixRow]:
        return scoring.filtered_view(self._rows, mode)

    def view(
        self,
        sort_key: SortKey | str = SortKey.TOTAL,
        direction: SortDirection | str = SortDirection.DESC,
        mode: ViewFilter | str = ViewFilter.ALL,
    ) -> list[MatrixRow]:
        return scoring.view(self._rows, sort_key, direction, mode)

    # ─── Export / import ────────────────────────────────────────────────────

    def export_csv(self) -> str:
        return codec.rows_to_csv(self._rows)

    def export_json(self) -> str:
        return codec.rows_to_json(self._rows)

    def _replace(self, rows: list[MatrixRow]) -> list[MatrixRow]:
        self._rows = rows
        self._persist()
        logger.info("Imported %d matrix rows", len(rows))
        return self.rows

    def import_json(self, text: str) -> list[MatrixRow]:
        """Replace all rows from a JSON array. Raises ``ImportFormatError``."""
        return self._replace(codec.rows_from_json(text))

    def import_csv(self, text: str) -> list[MatrixRow]:
        """Replace all rows from the 7-column CSV export. Raises ``ImportFormatError``."""
        return self._replace(codec.rows_from_csv(text))

    def copy_json(self, sink: Optional[TextSink]) -> bool:
        return safe_write(sink, self.export_json())

    def download_csv(self, sink: Optional[TextSink]) -> bool:
        return safe_write(sink, self.export_csv())

    def download_json(self, sink: Optional[TextSink]) -> bool:
        return safe_write(sink, self.export_json())
