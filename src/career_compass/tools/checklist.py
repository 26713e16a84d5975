"""Persistent checklists, including the NSFAS readiness check."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from ..core.models import ChecklistItem, ChecklistStats
from ..core.scoring import round_half_up
from ..store import Store

logger = logging.getLogger(__name__)

NS = "checklist"

VIEW_FILTERS = ("all", "open", "done")

NSFAS_READINESS_ID = "nsfas-readiness"
NSFAS_READINESS_ITEMS = [
    {"id": "r1", "label": "Create myNSFAS account and verify email/phone"},
    {"id": "r2", "label": "SA ID or birth certificate (certified copy)"},
    {"id": "r3", "label": "Parent/guardian ID (certified copy)"},
    {"id": "r4", "label": "Proof of household income (salary slip / SASSA letter / affidavit)"},
    {"id": "r5", "label": "Completed and signed NSFAS consent form"},
    {"id": "r6", "label": "Proof of application/acceptance to a public institution (if available)"},
    {"id": "r7", "label": "Scan/photograph documents clearly (no cut-off edges, readable)"},
    {"id": "r8", "label": "Apply as soon as the window opens (Sep/Oct for 2026 intake)"},
    {"id": "r9", "label": "Keep a single folder for PDFs/screenshots to re-upload quickly"},
]


def readiness_tier(percent: int) -> str:
    if percent >= 100:
        return "Ready to apply"
    if percent >= 60:
        return "Almost there"
    if percent >= 30:
        return "In progress"
    return "Not ready"


def _normalize(items: Iterable[Any]) -> list[ChecklistItem]:
    out = []
    for item in items:
        if isinstance(item, ChecklistItem):
            out.append(item.model_copy())
            continue
        if not isinstance(item, dict):
            continue
        try:
            out.append(ChecklistItem.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping unreadable checklist item: %s", exc)
    return out


class Checklist:
    """A named list of tickable items stored under ``checklist:<list_id>``."""

    def __init__(self, store: Store, list_id: str, default_items: Optional[Iterable[Any]] = None):
        self.store = store
        self.list_id = list_id
        self.default_items = _normalize(default_items or [])
        saved = store.get(NS, list_id, None)
        if isinstance(saved, list):
            self._items = _normalize(saved)
        else:
            self._items = self._defaults()

    def _defaults(self) -> list[ChecklistItem]:
        return [item.model_copy() for item in self.default_items]

    def _save(self) -> bool:
        return self.store.set(NS, self.list_id, [i.model_dump() for i in self._items])

    @property
    def items(self) -> list[ChecklistItem]:
        return list(self._items)

    def view(self, filter: str = "all") -> list[ChecklistItem]:
        if filter == "open":
            return [i for i in self._items if not i.checked]
        if filter == "done":
            return [i for i in self._items if i.checked]
        return self.items

    def stats(self) -> ChecklistStats:
        total = len(self._items)
        done = sum(1 for i in self._items if i.checked)
        percent = round_half_up(done / total * 100) if total else 0
        return ChecklistStats(total=total, done=done, open=total - done, percent=percent, tier=readiness_tier(percent))

    def toggle(self, item_id: str) -> bool:
        """Flip an item; returns False when the id is unknown."""
        for item in self._items:
            if item.id == item_id:
                item.checked = not item.checked
                self._save()
                return True
        return False

    def add(self, label: str) -> Optional[ChecklistItem]:
        label = (label or "").strip()
        if not label:
            return None
        item = ChecklistItem(id=uuid.uuid4().hex, label=label)
        self._items.append(item)
        self._save()
        return item

    def remove(self, item_id: str) -> bool:
        before = len(self._items)
        self._items = [i for i in self._items if i.id != item_id]
        if len(self._items) == before:
            return False
        self._save()
        return True

    def clear_completed(self) -> None:
        self._items = [i for i in self._items if not i.checked]
        self._save()

    def mark_all(self) -> None:
        for item in self._items:
            item.checked = True
        self._save()

    def reset(self) -> None:
        self._items = self._defaults()
        self._save()


def nsfas_readiness(store: Store) -> Checklist:
    return Checklist(store, NSFAS_READINESS_ID, NSFAS_READINESS_ITEMS)
