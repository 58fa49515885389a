"""Pure scoring of the wellness self-assessment."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from alliswell.domain import AssessmentAnswer, AssessmentResult
from alliswell.domain.reference_data import (
    ASSESSMENT_BANDS,
    ASSESSMENT_QUESTIONS,
    RESOURCE_BANDS,
)


class InvalidAssessmentError(ValueError):
    """Raised when responses do not match the questionnaire."""


def option_values(question: Mapping[str, Any]) -> list[int]:
    return [int(option["value"]) for option in question["options"]]


def max_score(questions: Sequence[Mapping[str, Any]] = ASSESSMENT_QUESTIONS) -> int:
    return sum(max(option_values(question)) for question in questions)


def band_thresholds(bands: Sequence[Mapping[str, Any]]) -> list[int | None]:
    """Inclusive upper bounds of each band, ``None`` for the open top band."""
    return [band["max_score"] for band in bands]


def select_band(score: float, bands: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
    for band in bands:
        upper = band["max_score"]
        if upper is None or score <= upper:
            return band
    return bands[-1]


def score(
    responses: Sequence[AssessmentAnswer],
    *,
    questions: Sequence[Mapping[str, Any]] = ASSESSMENT_QUESTIONS,
    bands: Sequence[Mapping[str, Any]] = ASSESSMENT_BANDS,
) -> AssessmentResult:
    """
    Score one complete questionnaire.

    Requires exactly one answer per question, in question order, each value
    being one of that question's option values.
    """
    if len(responses) != len(questions):
        raise InvalidAssessmentError(
            f"Expected {len(questions)} responses, got {len(responses)}"
        )

    total = 0
    for position, (answer, question) in enumerate(zip(responses, questions, strict=True)):
        if answer.question_index != position:
            raise InvalidAssessmentError(
                f"Response {position} answers question {answer.question_index}"
            )
        if answer.value not in option_values(question):
            raise InvalidAssessmentError(
                f"Value {answer.value} is not an option for question {question['id']}"
            )
        total += answer.value

    band = select_band(total, bands)
    return AssessmentResult(
        score=total,
        max_score=max_score(questions),
        category=str(band["category"]),
        description=str(band["description"]),
        suggestions=list(band["suggestions"]),
    )


def answers_from_values(values: Sequence[int]) -> list[AssessmentAnswer]:
    return [AssessmentAnswer(question_index=index, value=value) for index, value in enumerate(values)]


def resources_for_score(
    score: float, *, bands: Sequence[Mapping[str, Any]] = RESOURCE_BANDS
) -> dict[str, Any]:
    """Coarse category and suggestions returned by the assessment API."""
    band = select_band(score, bands)
    return {"category": band["category"], "suggestions": list(band["suggestions"])}
