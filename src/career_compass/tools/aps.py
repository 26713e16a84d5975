"""Persistent APS calculator.

Keeps the last set of marks under ``aps:last`` and recomputes the outcome from
them on restore, so a change to the banding rules never serves a stale result.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.eligibility import SUBJECT_KEYS, MarksInput, compute_aps, format_summary
from ..core.models import APSResult
from ..sinks import TextSink, safe_write
from ..store import Store

logger = logging.getLogger(__name__)

NS = "aps"
LAST_KEY = "last"


class ApsCalculator:
    def __init__(self, store: Store, sink: Optional[TextSink] = None):
        self.store = store
        self.sink = sink

    def calculate(self, values: MarksInput) -> APSResult:
        result = compute_aps(values)
        self.store.set(NS, LAST_KEY, {
            "values": dict(zip(SUBJECT_KEYS, result.marks)),
            "result": result.model_dump(mode="json"),
        })
        return result

    def saved_values(self) -> dict[str, int]:
        saved = self.store.get(NS, LAST_KEY, None)
        if isinstance(saved, dict) and isinstance(saved.get("values"), dict):
            return saved["values"]
        return {}

    def last(self) -> Optional[APSResult]:
        """The outcome for the saved marks, or None if nothing was calculated yet."""
        values = self.saved_values()
        if not values:
            return None
        return compute_aps(values)

    def summary(self) -> str:
        result = self.last()
        if result is None:
            result = compute_aps({})
        return format_summary(result)

    def copy_summary(self, sink: Optional[TextSink] = None) -> bool:
        """Copy the summary text; False when no sink accepted it."""
        ok = safe_write(sink or self.sink, self.summary())
        if not ok:
            logger.info("APS summary copy failed")
        return ok

    def clear(self) -> None:
        self.store.clear_namespace(NS)
