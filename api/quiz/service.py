"""
Quiz business logic.

A session moves from `active` to `completed` (explicit submit) or to
`timeout`. There is no background sweep: the deadline is checked whenever a
session is read, and an expired active session is finalized on that read.
Answer submission reads the session first, so late answers are rejected.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status

from core.config import quiz_time_limit_ms
from registrations import service as registrations_service

from . import repository, schemas
from .questions import SEED_QUESTIONS

ACTIVE = "active"
COMPLETED = "completed"
TIMEOUT = "timeout"

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


# -------- Pure helpers --------

def elapsed_ms(session: dict, now: datetime) -> int:
    return (now - session["start_time"]) // timedelta(milliseconds=1)


def is_expired(session: dict, now: datetime) -> bool:
    return elapsed_ms(session, now) > int(session["time_allowed_ms"])


def tally(answers: list[dict]) -> tuple[int, int]:
    """
    Return (correct, answered) over the session's answer records.
    """
    answered = [a for a in answers if a.get("selected_answer") is not None]
    correct = sum(1 for a in answered if a.get("is_correct") is True)
    return correct, len(answered)


def percentage(score: int, total_questions: int) -> float:
    if total_questions <= 0:
        return 0.0
    return round(score / total_questions * 100, 2)


def new_answer_entries(questions: list[dict]) -> list[dict]:
    """
    One unanswered record per question, in random order.
    """
    shuffled = random.sample(questions, len(questions))
    return [
        {
            "question_id": int(q["id"]),
            "selected_answer": None,
            "is_correct": None,
            "answered_at": None,
        }
        for q in shuffled
    ]


def to_session_view(session: dict, *, now: datetime | None = None) -> schemas.SessionView:
    now = now or _utc_now()
    allowed = int(session["time_allowed_ms"])
    remaining = max(allowed - elapsed_ms(session, now), 0) if session["status"] == ACTIVE else 0
    _, answered = tally(session["answers"])
    return schemas.SessionView(
        id=int(session["id"]),
        phone_number=str(session["phone_number"]),
        full_name=str(session["full_name"]),
        email=session.get("email"),
        status=session["status"],
        start_time=session["start_time"],
        time_allowed=allowed,
        time_remaining=remaining,
        question_count=len(session["answers"]),
        answered_count=answered,
        score=int(session.get("score") or 0),
        total_questions=int(session.get("total_questions") or 0),
        completed_at=session.get("completed_at"),
        duration=session.get("duration_ms"),
    )


def _summary_fields(session: dict) -> dict:
    score = int(session.get("score") or 0)
    total_questions = int(session.get("total_questions") or 0)
    return {
        "session_id": int(session["id"]),
        "phone_number": str(session["phone_number"]),
        "full_name": str(session["full_name"]),
        "email": session.get("email"),
        "status": session["status"],
        "score": score,
        "total_questions": total_questions,
        "question_count": len(session["answers"]),
        "percentage": percentage(score, total_questions),
        "start_time": session["start_time"],
        "completed_at": session.get("completed_at"),
        "duration": session.get("duration_ms"),
    }


def to_result_summary(session: dict) -> schemas.ResultSummary:
    return schemas.ResultSummary(**_summary_fields(session))


def to_result_detail(session: dict, questions: dict[int, dict]) -> schemas.ResultDetail:
    details: list[schemas.AnswerDetail] = []
    for entry in session["answers"]:
        question = questions.get(int(entry["question_id"]))
        if question is None:
            continue
        details.append(
            schemas.AnswerDetail(
                question_id=int(question["id"]),
                question=str(question["question"]),
                options=list(question["options"]),
                correct_answer=int(question["correct_answer"]),
                selected_answer=entry.get("selected_answer"),
                is_correct=entry.get("is_correct"),
            )
        )
    return schemas.ResultDetail(**_summary_fields(session), answers=details)


# -------- Seeding --------

async def seed_questions_if_needed() -> int:
    """
    Insert the fixed question set when the table is empty. Returns the number
    of inserted questions.
    """
    if await repository.count_questions() > 0:
        return 0
    await repository.insert_questions(SEED_QUESTIONS)
    logger.info("questions_seeded count=%s", len(SEED_QUESTIONS))
    return len(SEED_QUESTIONS)


# -------- Session lifecycle --------

async def _expire(session: dict) -> dict:
    """
    Finalize an active session whose deadline has passed.
    """
    allowed = int(session["time_allowed_ms"])
    score, answered = tally(session["answers"])
    finished = await repository.finalize_session(
        int(session["id"]),
        status=TIMEOUT,
        score=score,
        total_questions=answered,
        completed_at=session["start_time"] + timedelta(milliseconds=allowed),
        duration_ms=allowed,
    )
    if finished is None:
        # Finalized concurrently; return whatever is stored now.
        return await repository.get_session(int(session["id"])) or session
    logger.info("quiz_timeout session_id=%s score=%s answered=%s", finished["id"], score, answered)
    return finished


async def refresh_session(session: dict, *, now: datetime | None = None) -> dict:
    """
    Apply the lazy timeout check to a freshly read session.
    """
    if session["status"] == ACTIVE and is_expired(session, now or _utc_now()):
        return await _expire(session)
    return session


async def _load_session(session_id: int) -> dict:
    session = await repository.get_session(session_id)
    if session is None:
        raise _not_found("Quiz session not found")
    return await refresh_session(session)


def _require_active(session: dict) -> None:
    if session["status"] == TIMEOUT:
        raise _bad_request("Quiz time has expired")
    if session["status"] != ACTIVE:
        raise _bad_request("Quiz session is no longer active")


async def start_quiz(payload: schemas.StartQuizRequest) -> tuple[bool, schemas.SessionView]:
    """
    Start or resume the participant's quiz.

    Returns (created, session). An active session is resumed as is; a finished
    one blocks a second attempt.
    """
    registration = await registrations_service.get_registration_row_by_phone(payload.phone_number)
    phone_number = str(registration["phone_number"])

    existing = await repository.get_session_by_phone(phone_number)
    if existing is not None:
        return False, await _resume(existing)

    questions = await repository.list_active_questions()
    if not questions:
        raise _bad_request("No quiz questions available")

    created = await repository.create_session(
        phone_number=phone_number,
        full_name=str(registration["full_name"]),
        email=registration.get("email"),
        time_allowed_ms=quiz_time_limit_ms(),
        answers=new_answer_entries(questions),
    )
    if created is None:
        # Lost a race with a concurrent start for the same phone number.
        existing = await repository.get_session_by_phone(phone_number)
        if existing is None:
            raise RuntimeError("Quiz session vanished after a conflicting insert.")
        return False, await _resume(existing)

    logger.info("quiz_started session_id=%s questions=%s", created["id"], len(questions))
    return True, to_session_view(created)


async def _resume(session: dict) -> schemas.SessionView:
    session = await refresh_session(session)
    if session["status"] != ACTIVE:
        raise _bad_request("You have already taken the quiz")
    return to_session_view(session)


async def get_session_for_phone(phone_number: str) -> schemas.SessionView:
    session = await repository.get_session_by_phone(phone_number.strip())
    if session is None:
        raise _not_found("No quiz session found")
    session = await refresh_session(session)
    return to_session_view(session)


async def get_session_questions(session_id: int) -> tuple[schemas.SessionView, list[schemas.QuestionView]]:
    session = await _load_session(session_id)
    if session["status"] != ACTIVE:
        raise _bad_request("Quiz session is no longer active")

    question_ids = [int(entry["question_id"]) for entry in session["answers"]]
    questions = await repository.get_questions_by_ids(question_ids)

    views: list[schemas.QuestionView] = []
    for entry in session["answers"]:
        question = questions.get(int(entry["question_id"]))
        if question is None:
            continue
        views.append(
            schemas.QuestionView(
                id=int(question["id"]),
                question=str(question["question"]),
                options=list(question["options"]),
                selected_answer=entry.get("selected_answer"),
            )
        )
    return to_session_view(session), views


async def submit_answer(payload: schemas.SubmitAnswerRequest) -> schemas.AnswerResult:
    session = await _load_session(payload.session_id)
    _require_active(session)

    position = next(
        (i for i, a in enumerate(session["answers"]) if int(a["question_id"]) == payload.question_id),
        None,
    )
    if position is None:
        raise _bad_request("Question is not part of this session")

    questions = await repository.get_questions_by_ids([payload.question_id])
    question = questions.get(payload.question_id)
    if question is None:
        raise _not_found("Question not found")
    if payload.selected_answer >= len(question["options"]):
        raise _bad_request("Selected answer is out of range")

    is_correct = payload.selected_answer == int(question["correct_answer"])
    entry = {
        "question_id": payload.question_id,
        "selected_answer": payload.selected_answer,
        "is_correct": is_correct,
        "answered_at": _utc_now().isoformat(),
    }

    updated = await repository.record_answer(int(session["id"]), position=position, entry=entry)
    if updated is None:
        raise _bad_request("Quiz session is no longer active")

    _, answered = tally(updated["answers"])
    return schemas.AnswerResult(
        question_id=payload.question_id,
        selected_answer=payload.selected_answer,
        is_correct=is_correct,
        answered_count=answered,
    )


async def submit_quiz(payload: schemas.SubmitQuizRequest) -> schemas.ResultSummary:
    session = await _load_session(payload.session_id)
    if session["status"] == COMPLETED:
        raise _bad_request("Quiz already submitted")
    _require_active(session)

    now = _utc_now()
    score, answered = tally(session["answers"])
    finished = await repository.finalize_session(
        int(session["id"]),
        status=COMPLETED,
        score=score,
        total_questions=answered,
        completed_at=now,
        duration_ms=elapsed_ms(session, now),
    )
    if finished is None:
        raise _bad_request("Quiz already submitted")

    logger.info("quiz_completed session_id=%s score=%s answered=%s", finished["id"], score, answered)
    return to_result_summary(finished)


async def list_results() -> list[schemas.ResultSummary]:
    sessions = await repository.list_finished_sessions()
    return [to_result_summary(session) for session in sessions]


async def get_user_result(phone_number: str) -> schemas.ResultDetail:
    session = await repository.get_session_by_phone(phone_number.strip())
    if session is None:
        raise _not_found("No quiz session found")
    session = await refresh_session(session)
    if session["status"] == ACTIVE:
        raise _bad_request("Quiz not yet completed")

    question_ids = [int(entry["question_id"]) for entry in session["answers"]]
    questions = await repository.get_questions_by_ids(question_ids)
    return to_result_detail(session, questions)
