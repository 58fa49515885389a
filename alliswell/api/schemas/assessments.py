"""Pydantic schemas for the assessment API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, StrictFloat, StrictInt


class AssessmentSubmission(BaseModel):
    responses: list[Any] = Field(..., description="Answers in question order, as sent by the page")
    score: StrictInt | StrictFloat = Field(..., description="Total score computed by the client")
    category: str | None = Field(None, description="Category label shown to the user")
    timestamp: datetime | None = Field(None, description="When the client finished")


class AssessmentResources(BaseModel):
    category: str
    suggestions: list[str]


class AssessmentSubmitResponse(BaseModel):
    success: bool = True
    message: str = "Assessment saved successfully"
    resources: AssessmentResources


class QuestionOption(BaseModel):
    text: str
    value: int


class AssessmentQuestion(BaseModel):
    id: int
    text: str
    options: list[QuestionOption]


class AssessmentQuestionsResponse(BaseModel):
    questions: list[AssessmentQuestion]
    max_score: int
