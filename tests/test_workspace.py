"""Tests for the workspace and the MCP tool layer."""
import asyncio
from types import SimpleNamespace

import pytest

from career_compass import server
from career_compass.workspace import Workspace


@pytest.fixture
def ctx(workspace):
    return SimpleNamespace(request_context=SimpleNamespace(lifespan_context=workspace))


def call(tool, ctx, **kwargs):
    return asyncio.run(tool(ctx, **kwargs))


class TestWorkspace:
    def test_tools_share_one_store(self, workspace):
        workspace.matrix.clear()
        workspace.aps.calculate([50] * 7)
        workspace.planner.set_cell(0, 0, "Maths")
        assert set(workspace.store.export_all()) == {"matrix", "aps", "planner"}

    def test_checklist_is_cached(self, workspace):
        assert workspace.checklist("nsfas-readiness") is workspace.readiness
        assert workspace.checklist("mine") is workspace.checklist("mine")

    def test_in_memory_uses_root_from_environment(self, monkeypatch):
        monkeypatch.setenv("STORE_ROOT_NAMESPACE", "learner")
        workspace = Workspace.in_memory()
        workspace.matrix.clear()
        assert workspace.store.substrate.keys() == ["learner:matrix:rows"]

    def test_sqlite_workspace_survives_reopen(self, sqlite_url):
        first = Workspace.open_sqlite(sqlite_url, root="roadmap")
        first.wizard.start()
        first.wizard.next("yes")
        first.close()

        second = Workspace.open_sqlite(sqlite_url, root="roadmap")
        try:
            assert second.wizard.start().prefill is True
        finally:
            second.close()


class TestServerTools:
    def test_matrix_list(self, ctx):
        payload = call(server.matrix_list, ctx, mode="top")
        assert payload["count"] == 1
        assert payload["rows"][0]["name"] == "Foundation Phase Teacher"

    def test_matrix_add_and_update(self, ctx):
        added = call(server.matrix_add_row, ctx, name="Nurse", interest=5, skills="4 (Biology)", demand=5)
        assert added["row"]["total"] == 14
        updated = call(server.matrix_update_row, ctx, row_id=added["row"]["id"], demand=1)
        assert updated["ok"] is True
        assert updated["row"]["total"] == 10

    def test_matrix_update_unknown(self, ctx):
        assert call(server.matrix_update_row, ctx, row_id="nope", name="x")["ok"] is False

    def test_matrix_import_error_is_reported(self, ctx, workspace):
        payload = call(server.matrix_import, ctx, content='{"not": "a list"}', format="json")
        assert payload["ok"] is False
        assert len(workspace.matrix.rows) == 2

    def test_matrix_export_import_csv(self, ctx, workspace):
        exported = call(server.matrix_export, ctx, format="csv")["content"]
        workspace.matrix.clear()
        payload = call(server.matrix_import, ctx, content=exported, format="csv")
        assert payload["ok"] is True
        assert len(payload["rows"]) == 2

    def test_aps_calculate_and_summary(self, ctx, buffer_sink):
        payload = call(server.aps_calculate, ctx, marks=[50] * 7)
        assert payload["total_aps"] == 28
        summary = call(server.aps_summary, ctx)
        assert summary["copied"] is True
        assert buffer_sink.text == summary["content"]

    def test_wizard_flow(self, ctx):
        step = call(server.wizard_start, ctx)
        assert step["status"] == "question"
        assert call(server.wizard_next, ctx)["status"] == "needs_input"
        for answer in ["yes", "yes", "Public University", "yes", "200000", "no", "no"]:
            step = call(server.wizard_next, ctx, answer=answer)
        assert step["status"] == "result"
        assert step["result"]["eligible"] is True
        assert step["summary"].startswith("NSFAS Status: Likely Eligible")

    def test_planner_bad_cell(self, ctx):
        assert call(server.planner_set_cell, ctx, day=9, slot=0, text="x")["ok"] is False

    def test_checklist_toggle(self, ctx):
        payload = call(server.checklist_toggle, ctx, item_id="r1")
        assert payload["ok"] is True
        assert payload["stats"]["done"] == 1

    def test_store_export_rejects_bad_namespace(self, ctx):
        assert call(server.store_export, ctx, namespace="a:b")["ok"] is False

    @pytest.mark.parametrize("name", ["wizard_start", "wizard_back", "wizard_next"])
    def test_wizard_navigation_is_not_read_only(self, name):
        tools = {tool.name: tool for tool in asyncio.run(server.mcp.list_tools())}
        assert tools[name].annotations.readOnlyHint is False
        assert tools[name].annotations.idempotentHint is False
