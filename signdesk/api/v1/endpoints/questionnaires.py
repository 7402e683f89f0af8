"""Questionnaire API: generate validated questions for a training."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from signdesk.api.v1.dependencies import get_current_session, get_questionnaire_generator
from signdesk.application.dtos.auth import AuthSession
from signdesk.application.services.questionnaire_generation import (
    QuestionnaireGenerator,
    TrainingOutline,
)
from signdesk.core.limiter import limit_generation
from signdesk.schemas.questionnaire import (
    GenerateQuestionnaireRequest,
    GenerateQuestionnaireResponse,
    QuestionItem,
)

router = APIRouter()


@router.post("/generate", response_model=GenerateQuestionnaireResponse)
@limit_generation
async def generate_questionnaire(
    request: Request,
    body: GenerateQuestionnaireRequest,
    _: Annotated[AuthSession, Depends(get_current_session)],
    generator: Annotated[QuestionnaireGenerator, Depends(get_questionnaire_generator)],
):
    """Ask the model for questions and return the ones that pass validation."""
    training = TrainingOutline(
        title=body.training.title,
        content=body.training.content,
        objectives=body.training.objectives,
    )
    questions = await generator.generate(training, body.type, body.count)
    return GenerateQuestionnaireResponse(
        type=body.type,
        questions=[QuestionItem(**q.to_dict()) for q in questions],
    )
