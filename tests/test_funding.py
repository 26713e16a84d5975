"""Tests for NSFAS eligibility rules."""
import pytest

from career_compass.core.funding import (
    DISABILITY_INCOME_THRESHOLD,
    INCOME_THRESHOLD,
    assess_funding,
    format_assessment,
    format_rands,
)

INCOME_EXCEEDS = "Income exceeds threshold (R350 000). Explore university bursaries or learnerships."


@pytest.fixture
def answers():
    return {
        "citizenship": True,
        "firstTime": True,
        "institution": "Public University",
        "passedNSC": True,
        "householdIncome": 200000,
        "disability": False,
        "interestedTeaching": False,
    }


class TestAssessFunding:
    def test_eligible_under_threshold(self, answers):
        result = assess_funding(answers)
        assert result.eligible is True
        assert result.threshold == INCOME_THRESHOLD == 350000
        assert result.diagnostics == []

    def test_threshold_is_inclusive(self, answers):
        answers["householdIncome"] = 350000
        assert assess_funding(answers).eligible is True

    def test_over_threshold(self, answers):
        answers["householdIncome"] = 400000
        result = assess_funding(answers)
        assert result.eligible is False
        assert result.diagnostics == [INCOME_EXCEEDS]

    def test_disability_raises_threshold(self, answers):
        answers["householdIncome"] = 400000
        answers["disability"] = True
        result = assess_funding(answers)
        assert result.eligible is True
        assert result.threshold == DISABILITY_INCOME_THRESHOLD

    def test_zero_income_is_not_eligible(self, answers):
        answers["householdIncome"] = 0
        result = assess_funding(answers)
        assert result.eligible is False
        assert result.diagnostics == ["Provide an estimated annual household income."]

    @pytest.mark.parametrize("institution", ["Private College / Other", "Somewhere else", None])
    def test_institution_must_be_public(self, answers, institution):
        answers["institution"] = institution
        assert assess_funding(answers).diagnostics == ["Institution must be a public University/UoT/TVET."]

    @pytest.mark.parametrize("institution", ["University of Technology", "TVET College"])
    def test_other_public_institutions(self, answers, institution):
        answers["institution"] = institution
        assert assess_funding(answers).eligible is True

    @pytest.mark.parametrize("income", [10 ** 400, "abc", None, float("inf")])
    def test_unusable_income_is_treated_as_missing(self, answers, income):
        answers["householdIncome"] = income
        result = assess_funding(answers)
        assert result.eligible is False
        assert result.diagnostics == ["Provide an estimated annual household income."]

    def test_truthy_strings_do_not_count(self, answers):
        answers["citizenship"] = "yes"
        assert assess_funding(answers).eligible is False

    def test_diagnostics_order(self):
        assert assess_funding({}).diagnostics == [
            "NSFAS requires SA citizenship or permanent residency.",
            "Typically for first-time entering students in 2026.",
            "Institution must be a public University/UoT/TVET.",
            "You must have a valid NSC by January 2026.",
            "Provide an estimated annual household income.",
        ]

    def test_teaching_interest_adds_notes_only(self, answers):
        plain = assess_funding(answers)
        answers["interestedTeaching"] = True
        teaching = assess_funding(answers)
        assert plain.teaching_path == []
        assert teaching.teaching_path
        assert teaching.eligible == plain.eligible

    def test_checklists_always_present(self):
        result = assess_funding({})
        assert len(result.documents) == 5
        assert len(result.timeline) == 2
        assert "NSFAS" in result.links


class TestFormatting:
    def test_rands(self):
        assert format_rands(350000) == "R350 000"
        assert format_rands(1250000.4) == "R1 250 000"
        assert format_rands(0) == "R0"

    def test_eligible_text(self, answers):
        text = format_assessment(assess_funding(answers))
        assert text.startswith("NSFAS Status: Likely Eligible")
        assert "Your input: R200 000." in text
        assert "What to check or fix:" not in text

    def test_ineligible_text(self, answers):
        answers["householdIncome"] = 400000
        text = format_assessment(assess_funding(answers))
        assert text.startswith("NSFAS Status: Check Requirements")
        assert f"- {INCOME_EXCEEDS}" in text
