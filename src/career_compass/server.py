"""Career Compass MCP server.

FastMCP server exposing the decision matrix, APS calculator, funding wizard,
study planner and checklists as tools over one local store.
Run: career-compass-mcp
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations

from .core.codec import ImportFormatError
from .core.funding import format_assessment
from .core.models import MatrixRow, StepResult
from .workspace import Workspace

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
EDIT = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=False)
RESET = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=True, openWorldHint=False)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[Workspace]:
    """Open the SQLite-backed workspace for the lifetime of the server."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    workspace = Workspace.open_sqlite()
    try:
        yield workspace
    finally:
        workspace.close()


mcp = FastMCP(
    "Career Compass",
    instructions="Career and study planning tools: score career options, check NSC pass levels and APS, "
    "check NSFAS funding eligibility step by step, plan a study week and track application checklists.",
    lifespan=lifespan,
)


def _workspace(ctx: Context) -> Workspace:
    return ctx.request_context.lifespan_context


def _rows_payload(rows: list[MatrixRow]) -> list[dict]:
    return [r.model_dump(mode="json") for r in rows]


def _step_payload(step: StepResult) -> dict:
    payload = step.model_dump(mode="json")
    if step.result is not None:
        payload["summary"] = format_assessment(step.result)
    elif step.question is not None:
        payload["summary"] = f"Question {step.index + 1} of {step.total_questions}: {step.question.text}"
    return payload


# ─── Decision Matrix ────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def matrix_list(ctx: Context, sort_key: str = "total", direction: str = "desc", mode: str = "all") -> dict:
    """List decision matrix rows.

    Args:
        sort_key: 'total' or 'name'. Default 'total'.
        direction: 'asc' or 'desc'. Default 'desc'.
        mode: 'all' or 'top' (only rows tied for the highest total). Default 'all'.
    """
    rows = _workspace(ctx).matrix.view(sort_key, direction, mode)
    return {
        "title": "Career Decision Matrix",
        "rows": _rows_payload(rows),
        "count": len(rows),
        "summary": _matrix_summary(rows),
    }


def _matrix_summary(rows: list[MatrixRow]) -> str:
    if not rows:
        return "No career options yet."
    best = max(rows, key=lambda r: r.total)
    return f"{len(rows)} option(s). Highest total: {best.name or 'Unnamed'} ({best.total})."


@mcp.tool(annotations=EDIT)
async def matrix_add_row(
    ctx: Context,
    name: str = "",
    interest: Optional[int] = None,
    skills: Optional[str] = None,
    demand: Optional[int] = None,
    qualification: str = "",
    funding: str = "",
) -> dict:
    """Add a career option. Scores are 1-5; skills may be free text such as '4 (Languages)'."""
    row = _workspace(ctx).matrix.add_row(
        name=name, interest=interest, skills=skills, demand=demand,
        qualification=qualification, funding=funding,
    )
    return {"row": row.model_dump(mode="json"), "summary": f"Added {row.name or 'a blank row'} (total {row.total})."}


@mcp.tool(annotations=EDIT)
async def matrix_update_row(
    ctx: Context,
    row_id: str,
    name: Optional[str] = None,
    interest: Optional[int] = None,
    skills: Optional[str] = None,
    demand: Optional[int] = None,
    qualification: Optional[str] = None,
    funding: Optional[str] = None,
) -> dict:
    """Edit some fields of a row; the total is recomputed."""
    patch = {
        k: v for k, v in {
            "name": name, "interest": interest, "skills": skills, "demand": demand,
            "qualification": qualification, "funding": funding,
        }.items() if v is not None
    }
    try:
        row = _workspace(ctx).matrix.update_row(row_id, **patch)
    except KeyError:
        return {"ok": False, "error": f"No row with id {row_id}"}
    return {"ok": True, "row": row.model_dump(mode="json"), "summary": f"{row.name} now totals {row.total}."}


@mcp.tool(annotations=EDIT)
async def matrix_remove_row(ctx: Context, row_id: str) -> dict:
    """Remove a row by id."""
    removed = _workspace(ctx).matrix.remove_row(row_id)
    return {"ok": removed, "summary": "Row removed." if removed else f"No row with id {row_id}"}


@mcp.tool(annotations=RESET)
async def matrix_clear(ctx: Context, restore_examples: bool = False) -> dict:
    """Remove every row, or restore the two example rows."""
    matrix = _workspace(ctx).matrix
    if restore_examples:
        matrix.reset_examples()
    else:
        matrix.clear()
    return {"rows": _rows_payload(matrix.rows), "summary": f"Matrix now has {len(matrix.rows)} row(s)."}


@mcp.tool(annotations=READ_ONLY)
async def matrix_export(ctx: Context, format: str = "csv") -> dict:
    """Export the matrix as 'csv' or 'json' text."""
    matrix = _workspace(ctx).matrix
    text = matrix.export_json() if format == "json" else matrix.export_csv()
    return {"format": "json" if format == "json" else "csv", "content": text}


@mcp.tool(annotations=EDIT)
async def matrix_import(ctx: Context, content: str, format: str = "json") -> dict:
    """Replace all rows from exported 'json' or 'csv' text. Nothing changes if the text is invalid."""
    matrix = _workspace(ctx).matrix
    try:
        rows = matrix.import_csv(content) if format == "csv" else matrix.import_json(content)
    except ImportFormatError as exc:
        return {"ok": False, "error": f"Import failed: {exc}"}
    return {"ok": True, "rows": _rows_payload(rows), "summary": f"Imported {len(rows)} row(s)."}


# ─── APS Calculator ─────────────────────────────────────────────────────────


@mcp.tool(annotations=EDIT)
async def aps_calculate(ctx: Context, marks: list[float]) -> dict:
    """Compute APS and NSC pass levels.

    Args:
        marks: Seven percentages in order: Home Language, First Additional Language, then five subjects.
    """
    result = _workspace(ctx).aps.calculate(marks)
    return {
        "title": "APS Calculator",
        **result.model_dump(mode="json"),
        "summary": f"APS {result.total_aps}. Best eligible pass level: {result.pass_levels.best.value}.",
    }


@mcp.tool(annotations=EDIT)
async def aps_summary(ctx: Context) -> dict:
    """Plain-text summary of the last APS calculation."""
    aps = _workspace(ctx).aps
    text = aps.summary()
    copied = aps.copy_summary()
    return {"content": text, "copied": copied}


@mcp.tool(annotations=RESET)
async def aps_clear(ctx: Context) -> dict:
    """Forget the saved marks."""
    _workspace(ctx).aps.clear()
    return {"summary": "APS calculator cleared."}


# ─── Funding Wizard ─────────────────────────────────────────────────────────


@mcp.tool(annotations=EDIT)
async def wizard_start(ctx: Context) -> dict:
    """Start the NSFAS funding wizard at the first question (saved answers are pre-filled)."""
    return _step_payload(_workspace(ctx).wizard.start())


@mcp.tool(annotations=EDIT)
async def wizard_next(ctx: Context, answer: Optional[str] = None) -> dict:
    """Answer the current question and advance.

    Args:
        answer: 'yes'/'no', one of the listed options, or a number. Omit to keep the pre-filled answer.
    """
    return _step_payload(_workspace(ctx).wizard.next(answer))


@mcp.tool(annotations=EDIT)
async def wizard_back(ctx: Context) -> dict:
    """Go back one question; answers are kept."""
    return _step_payload(_workspace(ctx).wizard.back())


@mcp.tool(annotations=RESET)
async def wizard_reset(ctx: Context) -> dict:
    """Clear all answers and return to the first question."""
    return _step_payload(_workspace(ctx).wizard.reset())


# ─── Study Planner ──────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def planner_get(ctx: Context) -> dict:
    """The weekly study grid: 7 days (Mon-Sun) of 6 blocks each."""
    from .tools.planner import DAYS

    matrix = _workspace(ctx).planner.as_matrix()
    return {"days": DAYS, "grid": matrix}


@mcp.tool(annotations=EDIT)
async def planner_set_cell(ctx: Context, day: int, slot: int, text: str) -> dict:
    """Set one study block. day is 0 (Mon) to 6 (Sun), slot is 0 to 5."""
    try:
        _workspace(ctx).planner.set_cell(day, slot, text)
    except IndexError as exc:
        return {"ok": False, "error": str(exc)}
    return {"ok": True, "grid": _workspace(ctx).planner.as_matrix()}


@mcp.tool(annotations=EDIT)
async def planner_apply_template(ctx: Context, name: str = "balanced") -> dict:
    """Replace the week with the 'balanced', 'exam' or 'light' template."""
    planner = _workspace(ctx).planner
    planner.apply_template(name)
    return {"grid": planner.as_matrix()}


@mcp.tool(annotations=RESET)
async def planner_clear(ctx: Context) -> dict:
    """Empty every study block."""
    planner = _workspace(ctx).planner
    planner.clear_week()
    return {"grid": planner.as_matrix()}


# ─── Checklists ─────────────────────────────────────────────────────────────


def _checklist_payload(workspace: Workspace, list_id: str, filter: str = "all") -> dict:
    checklist = workspace.checklist(list_id)
    stats = checklist.stats()
    return {
        "list_id": list_id,
        "items": [i.model_dump() for i in checklist.view(filter)],
        "stats": stats.model_dump(),
        "summary": f"{stats.tier}: {stats.done}/{stats.total} complete",
    }


@mcp.tool(annotations=READ_ONLY)
async def checklist_get(ctx: Context, list_id: str = "nsfas-readiness", filter: str = "all") -> dict:
    """Show a checklist ('all', 'open' or 'done' items) with progress."""
    return _checklist_payload(_workspace(ctx), list_id, filter)


@mcp.tool(annotations=EDIT)
async def checklist_toggle(ctx: Context, item_id: str, list_id: str = "nsfas-readiness") -> dict:
    """Tick or untick an item."""
    workspace = _workspace(ctx)
    ok = workspace.checklist(list_id).toggle(item_id)
    return {"ok": ok, **_checklist_payload(workspace, list_id)}


@mcp.tool(annotations=EDIT)
async def checklist_add(ctx: Context, label: str, list_id: str = "nsfas-readiness") -> dict:
    """Add an item to a checklist."""
    workspace = _workspace(ctx)
    item = workspace.checklist(list_id).add(label)
    return {"ok": item is not None, **_checklist_payload(workspace, list_id)}


@mcp.tool(annotations=EDIT)
async def checklist_remove(ctx: Context, item_id: str, list_id: str = "nsfas-readiness") -> dict:
    """Remove an item from a checklist."""
    workspace = _workspace(ctx)
    ok = workspace.checklist(list_id).remove(item_id)
    return {"ok": ok, **_checklist_payload(workspace, list_id)}


@mcp.tool(annotations=RESET)
async def checklist_reset(ctx: Context, list_id: str = "nsfas-readiness", completed_only: bool = False) -> dict:
    """Restore a checklist's default items, or only drop the completed ones."""
    workspace = _workspace(ctx)
    checklist = workspace.checklist(list_id)
    if completed_only:
        checklist.clear_completed()
    else:
        checklist.reset()
    return _checklist_payload(workspace, list_id)


# ─── Store ──────────────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def store_export(ctx: Context, namespace: str = "") -> dict:
    """Export saved data for one namespace ('matrix', 'aps', 'wizard', 'planner', 'checklist') or all of them."""
    store = _workspace(ctx).store
    if namespace:
        try:
            return {"namespace": namespace, "data": store.export_namespace(namespace)}
        except ValueError as exc:
            return {"ok": False, "error": str(exc)}
    return {"data": store.export_all()}


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
