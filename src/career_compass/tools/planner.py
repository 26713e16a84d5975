"""Weekly study planner: seven days of six study blocks each."""

from __future__ import annotations

import logging

from ..store import Store

logger = logging.getLogger(__name__)

NS = "planner"
GRID_KEY = "grid"

DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
SLOTS = 6

# (day, slot, text)
TEMPLATES: dict[str, list[tuple[int, int, str]]] = {
    "balanced": [
        (0, 0, "Math Lit: Worksheets (Siyavula)"),
        (0, 1, "English HL: Past paper Qs"),
        (1, 0, "Accounting: Ledger basics"),
        (1, 1, "Business: Essay plan"),
        (2, 0, "Zulu FAL: Grammar drills"),
        (2, 1, "LO: Portfolio tasks"),
        (3, 0, "Accounting: Past Paper (untimed)"),
        (4, 0, "Business: Key terms revision"),
        (4, 1, "English HL: Literature"),
        (5, 0, "Group call: peer marking"),
        (6, 0, "Weekly review + prep"),
    ],
    "exam": [
        (0, 0, "Accounting: Past Paper 1 (Timed)"),
        (0, 1, "English HL: Essay planning"),
        (1, 0, "Math Lit: Functions practice (Siyavula)"),
        (1, 1, "Accounting: Corrections"),
        (2, 0, "Business Studies: Definitions + Mindmaps"),
        (2, 1, "Zulu FAL: Comprehension"),
        (3, 0, "Accounting: Past Paper 2 (Timed)"),
        (3, 1, "English HL: Literature revision"),
        (4, 0, "Math Lit: Data handling (Siyavula)"),
        (4, 1, "Business Studies: Case study"),
        (5, 0, "Study group: Teach-back session"),
        (6, 0, "Accountability check + plan adjustments"),
    ],
    "light": [
        (0, 0, "English HL: Summary practice"),
        (1, 0, "Zulu FAL: Language exercises"),
        (2, 0, "Math Lit: Basic revision"),
        (3, 0, "Business: Reading + notes"),
        (4, 0, "Accounting: Concepts recap"),
        (6, 0, "Plan next week"),
    ],
}
DEFAULT_TEMPLATE = "balanced"


def grid_key(day: int, slot: int) -> str:
    return f"{day}:{slot}"


def default_grid() -> dict[str, str]:
    return {grid_key(d, s): "" for d in range(len(DAYS)) for s in range(SLOTS)}


class WeeklyPlanner:
    def __init__(self, store: Store):
        self.store = store

    def load(self) -> dict[str, str]:
        """Current grid; cells missing from the saved copy come back empty."""
        grid = default_grid()
        saved = self.store.get(NS, GRID_KEY, None)
        if isinstance(saved, dict):
            for key in grid:
                value = saved.get(key)
                grid[key] = value if isinstance(value, str) else ""
        return grid

    def _save(self, grid: dict[str, str]) -> bool:
        return self.store.set(NS, GRID_KEY, grid)

    def as_matrix(self) -> list[list[str]]:
        grid = self.load()
        return [[grid[grid_key(d, s)] for s in range(SLOTS)] for d in range(len(DAYS))]

    def set_cell(self, day: int, slot: int, text: str) -> dict[str, str]:
        if not (0 <= day < len(DAYS) and 0 <= slot < SLOTS):
            raise IndexError(f"No planner cell at day={day}, slot={slot}")
        grid = self.load()
        grid[grid_key(day, slot)] = text or ""
        self._save(grid)
        return grid

    def apply_template(self, name: str) -> dict[str, str]:
        """Replace the whole week with a template; unknown names use the balanced one."""
        if name not in TEMPLATES:
            logger.debug("Unknown planner template %r, using %s", name, DEFAULT_TEMPLATE)
            name = DEFAULT_TEMPLATE
        grid = default_grid()
        for day, slot, text in TEMPLATES[name]:
            grid[grid_key(day, slot)] = text
        self._save(grid)
        return grid

    def clear_week(self) -> dict[str, str]:
        grid = default_grid()
        self._save(grid)
        return grid
