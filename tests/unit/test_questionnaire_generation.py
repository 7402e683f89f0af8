"""Unit tests for questionnaire generation: envelope parsing, validation rules, generator."""

import json

import pytest

from signdesk.application.services.questionnaire_generation import (
    BareQuestionList,
    KeyedQuestionList,
    QuestionnaireGenerator,
    QuestionnaireType,
    QuestionType,
    TrainingOutline,
    build_questionnaire_prompt,
    extract_questions,
    parse_llm_envelope,
    validate_questions,
)
from signdesk.domain.exceptions import LLMResponseFormatError, ValidationException


class FakeLLM:
    """Returns a canned response and records the prompts."""

    def __init__(self, response: str) -> None:
        self.response = response
        self.prompts: list[tuple[str, str]] = []

    async def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append((system_prompt, user_prompt))
        return self.response


MCQ = {
    "question": "Which HTTP method is idempotent?",
    "type": "multiple_choice",
    "options": ["POST", "PUT", "PATCH", "CONNECT"],
    "correct_answer": "PUT",
}
YES_NO = {"question": "Is TLS required?", "type": "yes_no", "correct_answer": "yes"}
RATING = {"question": "Rate your confidence", "type": "rating"}


class TestParseEnvelope:
    def test_bare_array(self) -> None:
        envelope = parse_llm_envelope(json.dumps([MCQ]))
        assert envelope == BareQuestionList([MCQ])

    @pytest.mark.parametrize("key", ["questionnaire", "questions"])
    def test_preferred_keys(self, key) -> None:
        envelope = parse_llm_envelope(json.dumps({"meta": [1], key: [MCQ]}))
        assert envelope == KeyedQuestionList(key, [MCQ])

    def test_first_non_empty_array(self) -> None:
        envelope = parse_llm_envelope(json.dumps({"title": "x", "empty": [], "items": [MCQ]}))
        assert envelope == KeyedQuestionList("items", [MCQ])

    @pytest.mark.parametrize("raw", ["not json", '"text"', '{"title": "x"}', "42"])
    def test_unusable_responses_raise(self, raw) -> None:
        with pytest.raises(LLMResponseFormatError):
            parse_llm_envelope(raw)

    def test_extract_rejects_unknown_variant(self) -> None:
        with pytest.raises(LLMResponseFormatError):
            extract_questions({"questions": []})


class TestValidateQuestions:
    def test_evaluation_keeps_only_scored_questions(self) -> None:
        items = [
            MCQ,
            YES_NO,
            RATING,
            {**MCQ, "options": ["A", "B", "C"]},
            {**MCQ, "correct_answer": "GET"},
            {"question": "Missing answer", "type": "yes_no"},
        ]
        questions = validate_questions(items, QuestionnaireType.EVALUATION)

        assert [q.question_type for q in questions] == [
            QuestionType.MULTIPLE_CHOICE,
            QuestionType.YES_NO,
        ]
        assert [q.order_index for q in questions] == [0, 1]
        assert questions[1].options == ["Yes", "No"]
        assert questions[1].correct_answer == "Yes"

    def test_satisfaction_accepts_open_questions(self) -> None:
        items = [
            RATING,
            {"question": "What could be improved?", "type": "short_answer", "is_required": False},
            {"question": "Pick one", "type": "multiple_choice"},
        ]
        questions = validate_questions(items, QuestionnaireType.SATISFACTION)
        assert len(questions) == 2
        assert questions[0].is_required is True
        assert questions[1].is_required is False

    def test_yes_no_answer_is_optional_outside_evaluation(self) -> None:
        questions = validate_questions(
            [{"question": "Did you enjoy it?", "type": "yes_no", "correct_answer": "maybe"}],
            QuestionnaireType.POSITIONING,
        )
        assert questions[0].options == ["Yes", "No"]
        assert questions[0].correct_answer is None

    @pytest.mark.parametrize(
        "item",
        [
            "just a string",
            {"type": "rating"},
            {"question": "", "type": "rating"},
            {"question": "Q", "type": "essay"},
            {"question": "Q", "type": "rating", "options": "A,B"},
        ],
    )
    def test_malformed_items_are_dropped(self, item) -> None:
        assert validate_questions([item], QuestionnaireType.POSITIONING) == []

    def test_question_text_is_stripped(self) -> None:
        questions = validate_questions(
            [{"question": "  Rate us  ", "type": "rating"}], QuestionnaireType.SATISFACTION
        )
        assert questions[0].to_dict()["question_text"] == "Rate us"


class TestPrompt:
    def test_contains_training_facts(self) -> None:
        prompt = build_questionnaire_prompt(
            TrainingOutline(title="HTTP basics", content="Verbs", objectives=["Know PUT"]),
            QuestionnaireType.EVALUATION,
            7,
        )
        assert "<training_title>\nHTTP basics\n</training_title>" in prompt
        assert "- Know PUT" in prompt
        assert "Generate exactly 7 questions" in prompt
        assert "exactly 4 options" in prompt

    def test_missing_objectives(self) -> None:
        prompt = build_questionnaire_prompt(
            TrainingOutline(title="T"), QuestionnaireType.SATISFACTION, 3
        )
        assert "- Not specified" in prompt


class TestQuestionnaireGenerator:
    async def test_generate(self) -> None:
        llm = FakeLLM(json.dumps({"questions": [MCQ, YES_NO, RATING]}))
        questions = await QuestionnaireGenerator(llm).generate(
            TrainingOutline(title="HTTP basics"), QuestionnaireType.EVALUATION, count=3
        )
        assert len(questions) == 2
        assert len(llm.prompts) == 1

    async def test_no_valid_question_is_an_error(self) -> None:
        llm = FakeLLM(json.dumps([RATING]))
        with pytest.raises(LLMResponseFormatError):
            await QuestionnaireGenerator(llm).generate(
                TrainingOutline(title="T"), QuestionnaireType.EVALUATION
            )

    @pytest.mark.parametrize("count", [0, 51])
    async def test_count_bounds(self, count) -> None:
        llm = FakeLLM("[]")
        with pytest.raises(ValidationException):
            await QuestionnaireGenerator(llm).generate(
                TrainingOutline(title="T"), QuestionnaireType.SATISFACTION, count
            )
        assert llm.prompts == []

    async def test_title_required(self) -> None:
        with pytest.raises(ValidationException):
            await QuestionnaireGenerator(FakeLLM("[]")).generate(
                TrainingOutline(title="  "), QuestionnaireType.SATISFACTION
            )
