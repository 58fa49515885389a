from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from alliswell.domain import User
from alliswell.domain.services.assessment_scorer import resources_for_score
from alliswell.infrastructure.db.models import AssessmentResultModel

logger = structlog.get_logger()


class AssessmentService:
    """Records submitted self-assessments and answers with matching resources."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record_submission(
        self,
        *,
        user: User,
        responses: list[Any],
        score: float,
        category: str | None = None,
        submitted_at: datetime | None = None,
    ) -> dict[str, Any]:
        resources = resources_for_score(score)

        record = AssessmentResultModel(
            user_id=user.user_id,
            score=score,
            category=category,
            resource_category=resources["category"],
            responses=responses,
            question_count=len(responses),
            submitted_at=submitted_at,
        )
        self.session.add(record)
        await self.session.commit()

        await logger.ainfo(
            "assessment_saved",
            user_id=user.user_id,
            assessment_id=record.id,
            score=score,
            category=category,
            resource_category=resources["category"],
        )
        return resources
