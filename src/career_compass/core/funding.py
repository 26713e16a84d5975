"""NSFAS funding eligibility derived from the wizard's answers.

The household income ceiling is R350 000 per year, raised to R600 000 for
applicants with a disability. The teaching-interest answer only adds the
Funza Lushaka notes; it never changes eligibility.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from .models import PUBLIC_INSTITUTIONS, FundingAssessment

logger = logging.getLogger(__name__)

INCOME_THRESHOLD = 350_000
DISABILITY_INCOME_THRESHOLD = 600_000

DOCUMENT_CHECKLIST = [
    "South African ID / birth certificate (certified copy)",
    "Parent/guardian ID (certified copy)",
    "Proof of household income (salary slip, SASSA letter, or affidavit if unemployed)",
    "Completed and signed NSFAS consent form",
    "Proof of application / acceptance to a public university or TVET (when available)",
]

TIMELINE = [
    "NSFAS applications typically open in September/October. Apply as soon as the window opens.",
    "Update your application with final NSC results in January 2026.",
]

TEACHING_PATH = [
    "Consider applying for the Funza Lushaka bursary if pursuing a BEd (Foundation Phase is prioritized).",
    "Covers tuition, accommodation, and stipend; recipients commit to teach in public schools.",
    "Check guidance and dates: https://www.funzalushaka.doe.gov.za/",
]

LINKS = {
    "NSFAS": "https://www.nsfas.org.za/",
    "WCED NSC": "https://www.westerncape.gov.za/education/national-senior-certificate-nsc-exams-june",
}


def format_rands(amount: float) -> str:
    """Format an amount the en-ZA way, e.g. ``R350 000``."""
    return "R" + f"{int(round(amount)):,}".replace(",", " ")


def _income(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return n if math.isfinite(n) else 0.0


def income_threshold(disability: Any) -> int:
    return DISABILITY_INCOME_THRESHOLD if disability is True else INCOME_THRESHOLD


def assess_funding(answers: Mapping[str, Any]) -> FundingAssessment:
    """Evaluate NSFAS eligibility.

    Boolean requirements must be exactly ``True``; a missing answer counts as
    unmet. Diagnostics are listed in a fixed order: citizenship, first-time
    status, institution type, NSC, income provided, income ceiling.
    """
    citizenship = answers.get("citizenship") is True
    first_time = answers.get("firstTime") is True
    is_public = answers.get("institution") in PUBLIC_INSTITUTIONS
    passed_nsc = answers.get("passedNSC") is True
    income = _income(answers.get("householdIncome"))
    threshold = income_threshold(answers.get("disability"))

    eligible = citizenship and first_time and is_public and passed_nsc and 0 < income <= threshold

    diagnostics = []
    if not eligible:
        if not citizenship:
            diagnostics.append("NSFAS requires SA citizenship or permanent residency.")
        if not first_time:
            diagnostics.append("Typically for first-time entering students in 2026.")
        if not is_public:
            diagnostics.append("Institution must be a public University/UoT/TVET.")
        if not passed_nsc:
            diagnostics.append("You must have a valid NSC by January 2026.")
        if not income > 0:
            diagnostics.append("Provide an estimated annual household income.")
        if income > threshold:
            diagnostics.append(
                f"Income exceeds threshold ({format_rands(threshold)}). "
                "Explore university bursaries or learnerships."
            )

    logger.debug("Funding assessment: eligible=%s threshold=%d unmet=%d", eligible, threshold, len(diagnostics))

    return FundingAssessment(
        eligible=eligible,
        threshold=threshold,
        income=income,
        diagnostics=diagnostics,
        documents=list(DOCUMENT_CHECKLIST),
        timeline=list(TIMELINE),
        teaching_path=list(TEACHING_PATH) if answers.get("interestedTeaching") is True else [],
        links=dict(LINKS),
    )


def format_assessment(assessment: FundingAssessment) -> str:
    """Plain-text rendering of an assessment."""
    verdict = "Likely Eligible" if assessment.eligible else "Check Requirements"
    lines = [
        f"NSFAS Status: {verdict}",
        f"Household income threshold used: {format_rands(assessment.threshold)}. "
        f"Your input: {format_rands(assessment.income)}.",
    ]
    if assessment.diagnostics:
        lines.append("What to check or fix:")
        lines.extend(f"- {d}" for d in assessment.diagnostics)
    lines.append("NSFAS Document Checklist:")
    lines.extend(f"- {d}" for d in assessment.documents)
    lines.append("Timeline:")
    lines.extend(f"- {t}" for t in assessment.timeline)
    if assessment.teaching_path:
        lines.append("Teaching Path (Funza Lushaka):")
        lines.extend(f"- {t}" for t in assessment.teaching_path)
    return "\n".join(lines)
