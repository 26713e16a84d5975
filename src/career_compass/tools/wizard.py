"""Funding (NSFAS) eligibility wizard.

A linear question sequence: ``Question(0) .. Question(N-1)`` followed by the
``Result`` stage. Answers are persisted under ``wizard:answers`` as soon as a
step is accepted and survive back-navigation; only ``reset()`` discards them.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Optional, Union

from ..core.funding import assess_funding
from ..core.models import InstitutionType, Question, QuestionType, StepResult, StepStatus
from ..store import Store

logger = logging.getLogger(__name__)

NS = "wizard"
ANSWERS_KEY = "answers"

NEEDS_INPUT_MESSAGE = "Please answer this question to continue."

QUESTIONS = [
    Question(
        key="citizenship",
        text="Are you a South African citizen or permanent resident?",
        type=QuestionType.BOOLEAN,
    ),
    Question(
        key="firstTime",
        text="Will you be a first-time entering student at a public University or TVET in 2026?",
        type=QuestionType.BOOLEAN,
    ),
    Question(
        key="institution",
        text="Are you planning to study at a public University, University of Technology, or TVET College?",
        type=QuestionType.SELECT,
        options=[t.value for t in InstitutionType],
    ),
    Question(
        key="passedNSC",
        text="Will you have a valid NSC (matric) by January 2026?",
        help='If you are rewriting now, answer "Yes" if you expect to qualify.',
        type=QuestionType.BOOLEAN,
    ),
    Question(
        key="householdIncome",
        text="Approximate combined household income per year (Rands)",
        type=QuestionType.NUMBER,
        placeholder="e.g. 120000",
    ),
    Question(
        key="disability",
        text="Do you (the applicant) have a disability?",
        type=QuestionType.BOOLEAN,
    ),
    Question(
        key="interestedTeaching",
        text="Are you considering a BEd (teaching), especially Foundation Phase?",
        type=QuestionType.BOOLEAN,
    ),
]

_TRUE_WORDS = {"yes", "y", "true"}
_FALSE_WORDS = {"no", "n", "false"}


def parse_answer(question: Question, raw: Any) -> Optional[Union[bool, float, int, str]]:
    """Validate raw input for a question. Returns None when the answer is absent.

    Empty strings and non-finite numbers count as absent, never as False or 0.
    """
    if raw is None:
        return None
    if isinstance(raw, Enum):
        raw = raw.value

    if question.type == QuestionType.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            word = raw.strip().lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
        return None

    if question.type == QuestionType.SELECT:
        choice = str(raw).strip()
        return choice if choice in question.options else None

    if question.type == QuestionType.NUMBER:
        if isinstance(raw, bool):
            return None
        if isinstance(raw, (int, float)):
            n = raw
        else:
            text = str(raw).strip()
            if not text:
                return None
            try:
                n = float(text)
            except ValueError:
                return None
            if n.is_integer():
                n = int(n)
        try:
            finite = math.isfinite(n)
        except OverflowError:
            return None
        return n if finite else None

    return None


class FundingWizard:
    def __init__(self, store: Store, questions: Optional[list[Question]] = None):
        self.store = store
        self.questions = list(questions or QUESTIONS)
        self._index = 0
        self._answers: dict[str, Any] = self._restore()

    def _restore(self) -> dict[str, Any]:
        """Saved answers that still parse; anything else is dropped."""
        saved = self.store.get(NS, ANSWERS_KEY, {})
        if not isinstance(saved, dict):
            return {}
        answers = {}
        for question in self.questions:
            answer = parse_answer(question, saved.get(question.key))
            if answer is not None:
                answers[question.key] = answer
        if len(answers) != len(saved):
            logger.warning("Dropped %d unreadable saved wizard answer(s)", len(saved) - len(answers))
        return answers

    @property
    def index(self) -> int:
        return self._index

    @property
    def answers(self) -> dict[str, Any]:
        return dict(self._answers)

    @property
    def is_complete(self) -> bool:
        return self._index >= len(self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.is_complete:
            return None
        return self.questions[self._index]

    def _save(self) -> None:
        self.store.set(NS, ANSWERS_KEY, self._answers)

    def _step(self, status: Optional[StepStatus] = None, message: str = "") -> StepResult:
        total = len(self.questions)
        if self.is_complete:
            return StepResult(
                status=StepStatus.RESULT,
                index=self._index,
                total_questions=total,
                result=assess_funding(self._answers),
            )
        question = self.questions[self._index]
        return StepResult(
            status=status or StepStatus.QUESTION,
            index=self._index,
            total_questions=total,
            question=question,
            prefill=self._answers.get(question.key),
            message=message,
        )

    def start(self) -> StepResult:
        """Begin at the first question, with any saved answers pre-filled."""
        self._index = 0
        return self._step()

    def next(self, value: Any = None) -> StepResult:
        """Accept an answer for the current question and move forward.

        ``value=None`` submits the pre-filled answer, if there is one.
        """
        if self.is_complete:
            return self._step()
        question = self.questions[self._index]
        raw = value if value is not None else self._answers.get(question.key)
        answer = parse_answer(question, raw)
        if answer is None:
            logger.debug("Wizard question %s needs input", question.key)
            return self._step(StepStatus.NEEDS_INPUT, NEEDS_INPUT_MESSAGE)

        self._answers[question.key] = answer
        self._save()
        self._index += 1
        return self._step()

    def back(self) -> StepResult:
        if self._index > 0:
            self._index -= 1
        return self._step()

    def reset(self) -> StepResult:
        self._index = 0
        self._answers = {}
        self._save()
        return self._step()
