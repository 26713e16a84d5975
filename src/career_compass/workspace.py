"""One store, every tool: the object a host creates once per session."""

from __future__ import annotations

import logging
from typing import Optional

from .sinks import BufferSink, TextSink
from .store import KeyValueSubstrate, MemorySubstrate, SqliteSubstrate, Store
from .tools import ApsCalculator, Checklist, DecisionMatrix, FundingWizard, WeeklyPlanner, nsfas_readiness

logger = logging.getLogger(__name__)


class Workspace:
    def __init__(self, store: Store, sink: Optional[TextSink] = None):
        self.store = store
        self.sink = sink if sink is not None else BufferSink()
        self.matrix = DecisionMatrix(store)
        self.aps = ApsCalculator(store, self.sink)
        self.wizard = FundingWizard(store)
        self.planner = WeeklyPlanner(store)
        self.readiness = nsfas_readiness(store)
        self._checklists: dict[str, Checklist] = {self.readiness.list_id: self.readiness}

    @classmethod
    def from_substrate(cls, substrate: KeyValueSubstrate, root: Optional[str] = None,
                       sink: Optional[TextSink] = None) -> "Workspace":
        return cls(Store(substrate, root), sink)

    @classmethod
    def in_memory(cls, root: Optional[str] = None) -> "Workspace":
        return cls.from_substrate(MemorySubstrate(), root)

    @classmethod
    def open_sqlite(cls, url: Optional[str] = None, root: Optional[str] = None) -> "Workspace":
        substrate = SqliteSubstrate.open(url)
        logger.info("Workspace opened on %s", substrate.engine.url)
        return cls.from_substrate(substrate, root)

    def checklist(self, list_id: str) -> Checklist:
        """Get or create a checklist; new lists start empty."""
        if list_id not in self._checklists:
            self._checklists[list_id] = Checklist(self.store, list_id)
        return self._checklists[list_id]

    def close(self) -> None:
        substrate = self.store.substrate
        if isinstance(substrate, SqliteSubstrate):
            substrate.close()
