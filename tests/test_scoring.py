"""Tests for the decision matrix scoring engine."""
import pytest

from career_compass.core.models import FreeTextSkill, MatrixRow, NumberSkill
from career_compass.core.scoring import (
    clamp_score,
    compute_total,
    extract_number,
    filtered_view,
    parse_skills,
    recalculate,
    sorted_view,
    view,
)


def _row(name, interest, skills, demand):
    return MatrixRow(name=name, interest=interest, skills=skills, demand=demand)


class TestClampScore:
    @pytest.mark.parametrize("value,expected", [
        (3, 3),
        ("4", 4),
        (7, 5),
        (-2, 1),
        (0, 0),
        ("0", 0),
        (0.4, 1),
        (10 ** 400, 5),
        ("1e400", 0),
        (2.5, 3),
        ("", 0),
        (None, 0),
        ("abc", 0),
        (float("nan"), 0),
        (float("inf"), 0),
        (True, 0),
    ])
    def test_clamp(self, value, expected):
        assert clamp_score(value) == expected


class TestExtractNumber:
    def test_leading_integer(self):
        assert extract_number("4 (Languages)") == 4

    def test_signed_decimal(self):
        assert extract_number("about -2.5 points") == -2.5

    def test_no_number(self):
        assert extract_number("strong") == 0

    def test_none(self):
        assert extract_number(None) == 0


class TestParseSkills:
    def test_number(self):
        assert parse_skills(9) == {"kind": "number", "value": 5}

    def test_numeric_string_is_a_number(self):
        assert parse_skills(" 3 ") == {"kind": "number", "value": 3}

    def test_free_text(self):
        assert parse_skills("4 (Languages)") == {"kind": "text", "text": "4 (Languages)"}

    def test_blank(self):
        assert parse_skills("") == {"kind": "number", "value": 0}


class TestMatrixRow:
    def test_total_from_free_text_skills(self):
        row = _row("Teacher", 4, "4 (Languages)", 5)
        assert isinstance(row.skills, FreeTextSkill)
        assert row.total == 13

    def test_free_text_number_is_not_clamped(self):
        assert _row("X", 1, "9 out of 10", 1).total == 11

    def test_incoming_total_is_ignored(self):
        row = MatrixRow(name="X", interest=1, skills=1, demand=1, total=99)
        assert row.total == 3

    def test_blank_row_totals_zero(self):
        row = MatrixRow()
        assert row.total == 0
        assert row.skills == NumberSkill(value=0)
        assert row.id

    def test_revalidating_a_dump_changes_nothing(self):
        for row in (MatrixRow(), _row("A", 0, "", 5), _row("B", 2, "3 (Maths)", 4)):
            again = MatrixRow.model_validate(row.model_dump())
            assert again == row

    @pytest.mark.parametrize("total", [None, "N/A", [1]])
    def test_junk_total_is_discarded(self, total):
        row = MatrixRow.model_validate({"name": "A", "interest": 3, "skills": 3, "demand": 3, "total": total})
        assert row.total == 9

    def test_career_alias(self):
        assert MatrixRow.model_validate({"career": "Nurse"}).name == "Nurse"

    def test_skills_serialize_as_entered(self):
        assert _row("A", 3, 4, 3).model_dump()["skills"] == 4
        assert _row("A", 3, "4 (Maths)", 3).model_dump()["skills"] == "4 (Maths)"

    def test_compute_total_matches_field(self):
        row = _row("A", 5, 2, 3)
        assert compute_total(row) == row.total == 10


class TestViews:
    @pytest.fixture
    def rows(self):
        return [
            _row("banker", 3, 3, 3),
            _row("Actuary", 5, 5, 5),
            _row("chef", 5, 5, 5),
            _row("Baker", 1, 1, 1),
        ]

    def test_recalculate_is_idempotent(self, rows):
        once = recalculate(rows)
        assert [r.total for r in recalculate(once)] == [r.total for r in once]

    def test_sort_by_total_descending(self, rows):
        assert [r.total for r in sorted_view(rows)] == [15, 15, 9, 3]

    def test_sort_by_total_is_stable(self, rows):
        assert [r.name for r in sorted_view(rows)][:2] == ["Actuary", "chef"]

    def test_sort_by_name_ignores_case(self, rows):
        names = [r.name for r in sorted_view(rows, "name", "asc")]
        assert names == ["Actuary", "Baker", "banker", "chef"]

    def test_sort_by_name_descending(self, rows):
        names = [r.name for r in sorted_view(rows, "name", "desc")]
        assert names == ["chef", "banker", "Baker", "Actuary"]

    def test_top_keeps_ties(self, rows):
        top = filtered_view(rows, "top")
        assert {r.name for r in top} == {"Actuary", "chef"}

    def test_top_of_empty(self):
        assert filtered_view([], "top") == []

    def test_all_keeps_everything(self, rows):
        assert len(filtered_view(rows, "all")) == 4

    def test_combined_view(self, rows):
        assert [r.name for r in view(rows, "name", "desc", "top")] == ["chef", "Actuary"]

    def test_unknown_sort_key_rejected(self, rows):
        with pytest.raises(ValueError):
            sorted_view(rows, "salary")
