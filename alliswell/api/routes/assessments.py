from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from alliswell.api.deps import get_db_session, require_api_login
from alliswell.api.schemas.assessments import (
    AssessmentQuestion,
    AssessmentQuestionsResponse,
    AssessmentResources,
    AssessmentSubmission,
    AssessmentSubmitResponse,
)
from alliswell.api.schemas.common import ErrorResponse
from alliswell.domain import RequestContext
from alliswell.domain.reference_data import ASSESSMENT_QUESTIONS
from alliswell.domain.services.assessment_scorer import max_score
from alliswell.domain.services.assessments import AssessmentService

router = APIRouter(prefix="/api/assessment", tags=["Assessments"])


@router.get("/questions", response_model=AssessmentQuestionsResponse)
async def list_questions() -> AssessmentQuestionsResponse:
    return AssessmentQuestionsResponse(
        questions=[AssessmentQuestion.model_validate(q) for q in ASSESSMENT_QUESTIONS],
        max_score=max_score(),
    )


@router.post(
    "",
    response_model=AssessmentSubmitResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Save a completed self-assessment",
)
async def submit_assessment(
    request: Request,
    context: RequestContext = Depends(require_api_login),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> AssessmentSubmitResponse | JSONResponse:
    try:
        payload = AssessmentSubmission.model_validate(await request.json())
    except (ValueError, ValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="Invalid assessment data").model_dump(),
        )

    service = AssessmentService(session)
    resources = await service.record_submission(
        user=context.user,
        responses=payload.responses,
        score=payload.score,
        category=payload.category,
        submitted_at=payload.timestamp,
    )

    return AssessmentSubmitResponse(resources=AssessmentResources(**resources))
