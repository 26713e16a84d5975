"""Tests for the persistent decision matrix."""
import pytest

from career_compass.core.codec import CSV_HEADERS, ImportFormatError
from career_compass.sinks import BufferSink
from career_compass.tools.matrix import DecisionMatrix


@pytest.fixture
def matrix(store):
    return DecisionMatrix(store)


class TestRestore:
    def test_fresh_store_starts_with_examples(self, matrix):
        assert [r.id for r in matrix.rows] == ["ex-1", "ex-2"]
        assert [r.total for r in matrix.rows] == [13, 10]

    def test_saved_rows_are_restored(self, store, matrix):
        row = matrix.add_row(name="Nurse", interest=5, skills=4, demand=5)
        again = DecisionMatrix(store)
        assert again.get_row(row.id).total == 14
        assert len(again.rows) == 3

    def test_saved_empty_list_stays_empty(self, store, matrix):
        matrix.clear()
        assert DecisionMatrix(store).rows == []

    def test_malformed_saved_value_falls_back_to_examples(self, store):
        store.set("matrix", "rows", "garbage")
        assert len(DecisionMatrix(store).rows) == 2


class TestEditing:
    def test_blank_row_scores_zero_and_persists(self, store, matrix):
        row = matrix.add_row()
        assert row.total == 0
        assert len(store.get("matrix", "rows")) == 3

    def test_blank_row_survives_restore(self, store, matrix):
        row = matrix.add_row()
        restored = DecisionMatrix(store).get_row(row.id)
        assert restored.total == 0
        assert (restored.interest, restored.demand) == (0, 0)

    def test_rename_keeps_unset_scores(self, matrix):
        row = matrix.add_row()
        renamed = matrix.update_row(row.id, name="Nurse")
        assert renamed.name == "Nurse"
        assert (renamed.interest, renamed.skills.value, renamed.demand, renamed.total) == (0, 0, 0, 0)

    def test_update_recomputes_total(self, matrix):
        row = matrix.update_row("ex-2", interest=5, skills="5 (People)")
        assert row.total == 14
        assert matrix.get_row("ex-2").name == "Human Resources Officer"

    def test_update_cannot_change_id_or_total(self, matrix):
        row = matrix.update_row("ex-1", id="other", total=1)
        assert row.id == "ex-1"
        assert row.total == 13

    def test_update_unknown_row(self, matrix):
        with pytest.raises(KeyError):
            matrix.update_row("missing", interest=1)

    def test_remove(self, store, matrix):
        assert matrix.remove_row("ex-1") is True
        assert matrix.remove_row("ex-1") is False
        assert [r["id"] for r in store.get("matrix", "rows")] == ["ex-2"]

    def test_reset_examples(self, matrix):
        matrix.clear()
        assert len(matrix.reset_examples()) == 2

    def test_views(self, matrix):
        assert [r.id for r in matrix.sorted_view("total", "asc")] == ["ex-2", "ex-1"]
        assert [r.id for r in matrix.filtered_view("top")] == ["ex-1"]
        assert [r.id for r in matrix.view("name", "asc", "all")] == ["ex-1", "ex-2"]


class TestImport:
    def test_bad_json_leaves_rows_unchanged(self, store, matrix):
        before = store.get("matrix", "rows")
        with pytest.raises(ImportFormatError):
            matrix.import_json('{"rows": []}')
        assert [r.id for r in matrix.rows] == ["ex-1", "ex-2"]
        assert store.get("matrix", "rows") == before

    def test_json_import_replaces_rows(self, store, matrix):
        matrix.import_json('[{"name": "Chef", "interest": 4, "skills": 4, "demand": 2}]')
        assert [r.name for r in DecisionMatrix(store).rows] == ["Chef"]

    def test_json_roundtrip_keeps_blank_row(self, matrix):
        matrix.clear()
        row = matrix.add_row()
        matrix.import_json(matrix.export_json())
        assert [(r.id, r.total) for r in matrix.rows] == [(row.id, 0)]

    def test_csv_roundtrip(self, store, matrix):
        matrix.add_row(name="Teacher, Foundation Phase", interest=5, skills=5, demand=5)
        exported = matrix.export_csv()
        other = DecisionMatrix(store)
        other.clear()
        other.import_csv(exported)
        assert [r.name for r in other.rows] == [
            "Foundation Phase Teacher",
            "Human Resources Officer",
            "Teacher, Foundation Phase",
        ]

    def test_bad_csv_leaves_rows_unchanged(self, matrix):
        with pytest.raises(ImportFormatError):
            matrix.import_csv(",".join(CSV_HEADERS) + "\nonly,two\n")
        assert len(matrix.rows) == 2


class TestOutputs:
    def test_download_csv(self, matrix):
        sink = BufferSink()
        assert matrix.download_csv(sink) is True
        assert sink.text.startswith("Career Option,")

    def test_copy_json_without_sink(self, matrix):
        assert matrix.copy_json(None) is False

    def test_failed_sink_reports_false(self, matrix, failing_sink, raising_sink):
        assert matrix.download_json(failing_sink) is False
        assert matrix.download_json(raising_sink) is False
