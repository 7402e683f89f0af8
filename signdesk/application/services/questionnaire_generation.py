"""Questionnaire generation from training content with a hosted language model.

The model is asked for a JSON array of questions but may wrap it in an
object. The envelope is classified into explicit variants before the
questions are extracted; anything else is a format error, never a silent
empty list.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import jsonschema

from signdesk.domain.enums import _ValuesMixin
from signdesk.domain.exceptions import LLMResponseFormatError, ValidationException

if TYPE_CHECKING:
    from signdesk.application.interfaces.services import ILLMClient

logger = logging.getLogger(__name__)

YES_NO_OPTIONS = ["Yes", "No"]
EVALUATION_CHOICE_COUNT = 4
MAX_QUESTIONS = 50

SYSTEM_PROMPT = (
    "You are an expert in designing training evaluation questionnaires that "
    "meet French Qualiopi certification requirements. You only produce "
    "questions in the requested JSON format."
)


class QuestionnaireType(_ValuesMixin, str, Enum):
    """Purpose of a questionnaire within a training."""

    POSITIONING = "positioning"
    EVALUATION = "initial_final_evaluation"
    SATISFACTION = "satisfaction"


class QuestionType(_ValuesMixin, str, Enum):
    """Answer format of a single question."""

    MULTIPLE_CHOICE = "multiple_choice"
    SHORT_ANSWER = "short_answer"
    RATING = "rating"
    YES_NO = "yes_no"


_TYPE_DESCRIPTIONS: dict[QuestionnaireType, str] = {
    QuestionnaireType.POSITIONING: (
        "Positioning questionnaire: mix question types; use short answers to "
        "capture expectations and 1-5 ratings to assess initial knowledge and "
        "practical skills."
    ),
    QuestionnaireType.EVALUATION: (
        "Evaluation questionnaire: measure how far the learning objectives were "
        "reached. Use only multiple choice questions with exactly 4 options and "
        "yes/no questions (at least 30% yes/no). Every question must have a "
        "correct answer."
    ),
    QuestionnaireType.SATISFACTION: (
        "Satisfaction questionnaire: favour 1-5 ratings and include free-text "
        "questions about content, organisation, teaching methods and trainers, "
        "including strengths and areas for improvement."
    ),
}

QUESTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["question", "type"],
    "properties": {
        "question": {"type": "string", "minLength": 1},
        "type": {"type": "string"},
        "options": {"type": ["array", "null"], "items": {"type": "string"}},
        "correct_answer": {"type": ["string", "null"]},
        "is_required": {"type": ["boolean", "null"]},
    },
}


@dataclass(frozen=True)
class TrainingOutline:
    """Training facts fed into the prompt."""

    title: str
    content: str | None = None
    objectives: list[str] = field(default_factory=list)


@dataclass
class GeneratedQuestion:
    """Question ready to be stored in a questionnaire template."""

    question_text: str
    question_type: QuestionType
    order_index: int
    options: list[str] | None = None
    correct_answer: str | None = None
    is_required: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_text": self.question_text,
            "question_type": self.question_type.value,
            "options": self.options,
            "correct_answer": self.correct_answer,
            "is_required": self.is_required,
            "order_index": self.order_index,
        }


# Response envelope variants


@dataclass(frozen=True)
class BareQuestionList:
    """The model returned a JSON array at top level."""

    items: list[Any]


@dataclass(frozen=True)
class KeyedQuestionList:
    """The model returned an object whose key holds the array."""

    key: str
    items: list[Any]


LLMEnvelope = BareQuestionList | KeyedQuestionList

_PREFERRED_KEYS = ("questionnaire", "questions")


def parse_llm_envelope(raw: str) -> LLMEnvelope:
    """Classify a raw model response.

    Raises:
        LLMResponseFormatError: Not JSON, or no question array can be found.
    """
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise LLMResponseFormatError("response is not valid JSON") from e
    if isinstance(parsed, list):
        return BareQuestionList(parsed)
    if isinstance(parsed, dict):
        for key in _PREFERRED_KEYS:
            if isinstance(parsed.get(key), list):
                return KeyedQuestionList(key, parsed[key])
        for key, value in parsed.items():
            if isinstance(value, list) and value:
                return KeyedQuestionList(key, value)
    raise LLMResponseFormatError("no question array in response")


def extract_questions(envelope: LLMEnvelope) -> list[Any]:
    """Return the raw question items of an envelope."""
    if isinstance(envelope, BareQuestionList):
        return envelope.items
    if isinstance(envelope, KeyedQuestionList):
        logger.debug("Questions found under key %r", envelope.key)
        return envelope.items
    raise LLMResponseFormatError(f"unsupported envelope {type(envelope).__name__}")


def _normalize_yes_no_answer(answer: str | None) -> str | None:
    if answer is None:
        return None
    for option in YES_NO_OPTIONS:
        if answer.strip().lower() == option.lower():
            return option
    return None


def _build_question(
    item: dict[str, Any], index: int, questionnaire_type: QuestionnaireType
) -> GeneratedQuestion | None:
    """Apply the per-type business rules; None drops the item."""
    try:
        question_type = QuestionType(item["type"])
    except ValueError:
        logger.debug("Dropping question with unknown type %r", item["type"])
        return None
    options = item.get("options")
    correct_answer = item.get("correct_answer")

    if questionnaire_type == QuestionnaireType.EVALUATION:
        if question_type == QuestionType.MULTIPLE_CHOICE:
            if not options or len(options) != EVALUATION_CHOICE_COUNT:
                logger.debug("Dropping evaluation question without 4 options")
                return None
            if not correct_answer or correct_answer not in options:
                logger.debug("Dropping evaluation question without a valid answer")
                return None
        elif question_type == QuestionType.YES_NO:
            options = list(YES_NO_OPTIONS)
            correct_answer = _normalize_yes_no_answer(correct_answer)
            if correct_answer is None:
                logger.debug("Dropping yes/no evaluation question without an answer")
                return None
        else:
            logger.debug("Dropping %s question from evaluation", question_type.value)
            return None
    else:
        if question_type == QuestionType.MULTIPLE_CHOICE and not options:
            logger.debug("Dropping multiple choice question without options")
            return None
        if question_type == QuestionType.YES_NO:
            options = list(YES_NO_OPTIONS)
            correct_answer = _normalize_yes_no_answer(correct_answer)

    is_required = item.get("is_required")
    return GeneratedQuestion(
        question_text=item["question"].strip(),
        question_type=question_type,
        order_index=index,
        options=options,
        correct_answer=correct_answer,
        is_required=True if is_required is None else is_required,
    )


def validate_questions(
    items: list[Any], questionnaire_type: QuestionnaireType
) -> list[GeneratedQuestion]:
    """Keep the items that pass the schema and the questionnaire rules, reindexed in order."""
    questions: list[GeneratedQuestion] = []
    for item in items:
        try:
            jsonschema.validate(instance=item, schema=QUESTION_SCHEMA)
        except jsonschema.ValidationError as e:
            logger.debug("Dropping malformed question: %s", e.message)
            continue
        question = _build_question(item, len(questions), questionnaire_type)
        if question is not None:
            questions.append(question)
    return questions


def build_questionnaire_prompt(
    training: TrainingOutline, questionnaire_type: QuestionnaireType, count: int
) -> str:
    """Render the user prompt for a questionnaire of count questions."""
    objectives = "\n".join(f"- {obj}" for obj in training.objectives) or "- Not specified"
    return (
        f"<training_program>\n{training.content or 'Not specified'}\n</training_program>\n\n"
        f"<training_title>\n{training.title}\n</training_title>\n\n"
        f"<training_objectives>\n{objectives}\n</training_objectives>\n\n"
        f"<questionnaire_type>\n{questionnaire_type.value}\n</questionnaire_type>\n\n"
        f"<question_count>\n{count}\n</question_count>\n\n"
        f"{_TYPE_DESCRIPTIONS[questionnaire_type]}\n\n"
        f"Generate exactly {count} questions tied to the training content and objectives. "
        "Each question is a JSON object:\n"
        '{"question": "...", "type": "multiple_choice" | "short_answer" | "rating" | "yes_no", '
        '"options": ["..."], "correct_answer": "...", "is_required": true}\n'
        'Yes/no questions use the options ["Yes", "No"].\n'
        "Return only a JSON array of questions, with no other text."
    )


class QuestionnaireGenerator:
    """Generates validated questions for a training through an ILLMClient."""

    def __init__(self, llm_client: ILLMClient) -> None:
        self._llm = llm_client

    async def generate(
        self,
        training: TrainingOutline,
        questionnaire_type: QuestionnaireType,
        count: int = 5,
    ) -> list[GeneratedQuestion]:
        """Ask the model for count questions and return the ones that validate.

        Raises:
            ValidationException: count out of range or training has no title.
            LLMResponseFormatError: Unusable response or no valid question.
        """
        if not training.title or not training.title.strip():
            raise ValidationException("Training title is required", field="title")
        if count < 1 or count > MAX_QUESTIONS:
            raise ValidationException(
                f"Question count must be between 1 and {MAX_QUESTIONS}", field="count"
            )
        prompt = build_questionnaire_prompt(training, questionnaire_type, count)
        raw = await self._llm.complete_json(SYSTEM_PROMPT, prompt)
        items = extract_questions(parse_llm_envelope(raw))
        questions = validate_questions(items, questionnaire_type)
        if not questions:
            raise LLMResponseFormatError("no valid question was generated")
        logger.info(
            "Generated %s/%s valid %s questions for %r",
            len(questions),
            len(items),
            questionnaire_type.value,
            training.title,
        )
        return questions
