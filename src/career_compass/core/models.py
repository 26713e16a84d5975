"""Pydantic data models shared across the package.

The stateful tools, the codec and the MCP server all exchange these models.
Rows, results and questions round-trip through ``model_dump(mode="json")``
into the key-value store.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_serializer, field_validator, model_validator


class Tier(str, Enum):
    """NSC pass levels, lowest to highest."""

    NONE = "None"
    HIGHER_CERTIFICATE = "Higher Certificate"
    DIPLOMA = "Diploma"
    BACHELORS = "Bachelor's"


class SortKey(str, Enum):
    TOTAL = "total"
    NAME = "name"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ViewFilter(str, Enum):
    """Decision matrix row filters."""

    ALL = "all"
    TOP = "top"


class QuestionType(str, Enum):
    BOOLEAN = "boolean"
    SELECT = "select"
    NUMBER = "number"


class InstitutionType(str, Enum):
    """Where the applicant plans to study."""

    PUBLIC_UNIVERSITY = "Public University"
    UNIVERSITY_OF_TECHNOLOGY = "University of Technology"
    TVET_COLLEGE = "TVET College"
    PRIVATE_OTHER = "Private College / Other"


PUBLIC_INSTITUTIONS = frozenset({
    InstitutionType.PUBLIC_UNIVERSITY.value,
    InstitutionType.UNIVERSITY_OF_TECHNOLOGY.value,
    InstitutionType.TVET_COLLEGE.value,
})


class StepStatus(str, Enum):
    """Outcome of a wizard command."""

    QUESTION = "question"
    NEEDS_INPUT = "needs_input"
    RESULT = "result"


# ─── Decision matrix ─────────────────────────────────────────────────────────


class NumberSkill(BaseModel):
    """A skills score entered as a number (already clamped to 1-5, 0 when unset)."""

    kind: Literal["number"] = "number"
    value: int = 0


class FreeTextSkill(BaseModel):
    """A skills score entered as free text, e.g. ``"4 (Languages)"``."""

    kind: Literal["text"] = "text"
    text: str


SkillsValue = Annotated[Union[NumberSkill, FreeTextSkill], Field(discriminator="kind")]


class MatrixRow(BaseModel):
    """One career option in the decision matrix.

    ``total`` is derived: it is recomputed whenever a row is constructed or
    validated, so any incoming ``total`` is ignored.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = Field(default="", validation_alias=AliasChoices("name", "career"))
    interest: int = 0
    skills: SkillsValue = Field(default_factory=NumberSkill)
    demand: int = 0
    qualification: str = ""
    funding: str = ""
    total: Union[int, float] = 0

    @model_validator(mode="before")
    @classmethod
    def _drop_incoming_total(cls, data: Any) -> Any:
        if isinstance(data, dict) and "total" in data:
            data = {k: v for k, v in data.items() if k != "total"}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        if v is None or v == "":
            return uuid.uuid4().hex
        return str(v)

    @field_validator("name", "qualification", "funding", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("interest", "demand", mode="before")
    @classmethod
    def _coerce_score(cls, v: Any) -> int:
        from .scoring import clamp_score

        return clamp_score(v)

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, v: Any) -> Any:
        from .scoring import parse_skills

        return parse_skills(v)

    @model_validator(mode="after")
    def _derive_total(self) -> "MatrixRow":
        from .scoring import compute_total

        self.total = compute_total(self)
        return self

    @field_serializer("skills")
    def _serialize_skills(self, skills: Union[NumberSkill, FreeTextSkill]) -> Union[int, str]:
        if isinstance(skills, FreeTextSkill):
            return skills.text
        return skills.value


# ─── APS / pass levels ───────────────────────────────────────────────────────


class PassLevels(BaseModel):
    """Independently evaluated NSC pass criteria and the resulting advice."""

    pass_6_of_7: bool
    home_language_ok: bool
    higher_certificate: bool
    diploma: bool
    bachelors: bool
    best: Tier = Tier.NONE
    advice: list[str] = Field(default_factory=list)


class APSResult(BaseModel):
    """Banded APS points for seven subjects plus the pass-level evaluation."""

    marks: list[int] = Field(description="Clamped percentage per subject")
    points: list[int] = Field(description="APS points per subject, 1-7")
    total_aps: int = Field(ge=7, le=49)
    pass_levels: PassLevels


# ─── Funding wizard ──────────────────────────────────────────────────────────


class Question(BaseModel):
    key: str
    text: str
    type: QuestionType
    options: list[str] = Field(default_factory=list)
    help: str = ""
    placeholder: str = ""


class FundingAssessment(BaseModel):
    """NSFAS eligibility derived from a completed set of wizard answers."""

    eligible: bool
    threshold: int = Field(description="Household income ceiling in Rands")
    income: float = 0
    diagnostics: list[str] = Field(default_factory=list, description="One line per unmet requirement")
    documents: list[str] = Field(default_factory=list)
    timeline: list[str] = Field(default_factory=list)
    teaching_path: list[str] = Field(default_factory=list, description="Funza Lushaka notes, empty unless requested")
    links: dict[str, str] = Field(default_factory=dict)


class StepResult(BaseModel):
    """What the wizard shows after a command."""

    status: StepStatus
    index: int
    total_questions: int
    question: Optional[Question] = None
    prefill: Optional[Union[bool, float, str]] = None
    message: str = ""
    result: Optional[FundingAssessment] = None


# ─── Checklists ──────────────────────────────────────────────────────────────


class ChecklistItem(BaseModel):
    id: str
    label: str
    checked: bool = False

    @field_validator("id", "label", mode="before")
    @classmethod
    def _coerce_str(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("checked", mode="before")
    @classmethod
    def _coerce_checked(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v is True


class ChecklistStats(BaseModel):
    total: int
    done: int
    open: int
    percent: int = Field(ge=0, le=100)
    tier: str
