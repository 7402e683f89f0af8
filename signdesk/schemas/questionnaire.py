"""Questionnaire generation API schemas."""

from pydantic import BaseModel, Field

from signdesk.application.services.questionnaire_generation import (
    MAX_QUESTIONS,
    QuestionnaireType,
    QuestionType,
)


class TrainingInput(BaseModel):
    """Training facts used to build the prompt."""

    title: str = Field(..., min_length=1, max_length=500)
    content: str | None = Field(default=None, max_length=50_000)
    objectives: list[str] = Field(default_factory=list)


class GenerateQuestionnaireRequest(BaseModel):
    """Body of POST /questionnaires/generate."""

    training: TrainingInput
    type: QuestionnaireType
    count: int = Field(default=5, ge=1, le=MAX_QUESTIONS)


class QuestionItem(BaseModel):
    """One validated question."""

    question_text: str
    question_type: QuestionType
    options: list[str] | None = None
    correct_answer: str | None = None
    is_required: bool = True
    order_index: int


class GenerateQuestionnaireResponse(BaseModel):
    """Validated questions in order."""

    type: QuestionnaireType
    questions: list[QuestionItem]
