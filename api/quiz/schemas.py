"""
Quiz API schemas (request/response models).

Question views handed out while a session is active never carry the
correct answer; only the post-quiz result detail does.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from core.schemas import CamelModel

SessionStatus = Literal["active", "completed", "timeout"]


class StartQuizRequest(CamelModel):
    phone_number: str

    @field_validator("phone_number", mode="before")
    @classmethod
    def _phone_number(cls, value: object) -> str:
        text = value.strip() if isinstance(value, str) else ""
        if not text:
            raise PydanticCustomError("required", "Phone number is required")
        return text


class SubmitAnswerRequest(CamelModel):
    session_id: int
    question_id: int
    selected_answer: int = Field(..., ge=0)


class SubmitQuizRequest(CamelModel):
    session_id: int


class SessionView(CamelModel):
    id: int
    phone_number: str
    full_name: str
    email: str | None
    status: SessionStatus
    start_time: datetime
    time_allowed: int
    time_remaining: int
    question_count: int
    answered_count: int
    score: int
    total_questions: int
    completed_at: datetime | None
    duration: int | None


class QuestionView(CamelModel):
    id: int
    question: str
    options: list[str]
    selected_answer: int | None


class AnswerResult(CamelModel):
    question_id: int
    selected_answer: int
    is_correct: bool
    answered_count: int


class ResultSummary(CamelModel):
    session_id: int
    phone_number: str
    full_name: str
    email: str | None
    status: SessionStatus
    score: int
    total_questions: int
    question_count: int
    percentage: float
    start_time: datetime
    completed_at: datetime | None
    duration: int | None


class AnswerDetail(CamelModel):
    question_id: int
    question: str
    options: list[str]
    correct_answer: int
    selected_answer: int | None
    is_correct: bool | None


class ResultDetail(ResultSummary):
    answers: list[AnswerDetail]
