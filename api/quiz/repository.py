"""
Quiz persistence (raw SQL).

Sessions are stored document-style: the per-question answer records live in
the `quiz_sessions.answers` jsonb array and are rewritten as a whole.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from core import db

from .questions import SeedQuestion

_SESSION_COLUMNS = """
    id, phone_number, full_name, email, start_time, time_allowed_ms, answers,
    score, total_questions, status, completed_at, duration_ms
"""


def _json_arg(value: Any) -> str:
    """
    asyncpg does not encode Python objects for jsonb parameters.
    We pass JSON as a string and cast to jsonb in SQL.
    """
    return json.dumps(value, ensure_ascii=True)


def _json_value(value: Any) -> Any:
    # jsonb comes back as text unless a type codec is registered.
    if isinstance(value, str):
        return json.loads(value)
    return value


def _question_row(row: dict | None) -> dict | None:
    if row is None:
        return None
    row["options"] = list(_json_value(row["options"]) or [])
    return row


def _session_row(row: dict | None) -> dict | None:
    if row is None:
        return None
    row["answers"] = list(_json_value(row["answers"]) or [])
    return row


# -------- Questions --------

async def count_questions() -> int:
    return int(await db.fetch_value("SELECT count(*) FROM questions"))


async def insert_questions(questions: tuple[SeedQuestion, ...] | list[SeedQuestion]) -> None:
    await db.execute_many(
        """
        INSERT INTO questions (question, options, correct_answer, is_active)
        VALUES ($1, $2::jsonb, $3, true)
        """,
        [(q.question, _json_arg(list(q.options)), q.correct_answer) for q in questions],
    )


async def list_active_questions() -> list[dict]:
    rows = await db.fetch_all(
        """
        SELECT id, question, options, correct_answer, is_active
        FROM questions
        WHERE is_active = true
        ORDER BY id ASC
        """
    )
    return [_question_row(row) for row in rows]


async def get_questions_by_ids(question_ids: list[int]) -> dict[int, dict]:
    if not question_ids:
        return {}
    rows = await db.fetch_all(
        """
        SELECT id, question, options, correct_answer, is_active
        FROM questions
        WHERE id = ANY($1::bigint[])
        """,
        question_ids,
    )
    return {int(row["id"]): _question_row(row) for row in rows}


# -------- Sessions --------

async def get_session(session_id: int) -> dict | None:
    row = await db.fetch_one(
        f"""
        SELECT {_SESSION_COLUMNS}
        FROM quiz_sessions
        WHERE id = $1
        """,
        session_id,
    )
    return _session_row(row)


async def get_session_by_phone(phone_number: str) -> dict | None:
    row = await db.fetch_one(
        f"""
        SELECT {_SESSION_COLUMNS}
        FROM quiz_sessions
        WHERE phone_number = $1
        """,
        phone_number,
    )
    return _session_row(row)


async def create_session(
    *,
    phone_number: str,
    full_name: str,
    email: str | None,
    time_allowed_ms: int,
    answers: list[dict],
) -> dict | None:
    """
    Insert a new active session.

    Returns None when a session for this phone number already exists
    (unique index on phone_number), e.g. after losing a concurrent start.
    """
    row = await db.fetch_one(
        f"""
        INSERT INTO quiz_sessions (phone_number, full_name, email, time_allowed_ms, answers)
        VALUES ($1, $2, $3, $4, $5::jsonb)
        ON CONFLICT (phone_number) DO NOTHING
        RETURNING {_SESSION_COLUMNS}
        """,
        phone_number,
        full_name,
        email,
        time_allowed_ms,
        _json_arg(answers),
    )
    return _session_row(row)


async def record_answer(session_id: int, *, position: int, entry: dict) -> dict | None:
    """
    Overwrite the answers element at `position` and leave the rest of the
    array as stored. Returns None if
    the session is gone, no longer active, or the element at `position` is
    not the entry's question.
    """
    row = await db.fetch_one(
        f"""
        UPDATE quiz_sessions
        SET answers = jsonb_set(answers, ARRAY[($2::int)::text], $3::jsonb)
        WHERE id = $1
          AND status = 'active'
          AND (answers -> $2::int ->> 'question_id')::bigint = $4
        RETURNING {_SESSION_COLUMNS}
        """,
        session_id,
        position,
        _json_arg(entry),
        int(entry["question_id"]),
    )
    return _session_row(row)


async def finalize_session(
    session_id: int,
    *,
    status: str,
    score: int,
    total_questions: int,
    completed_at: datetime,
    duration_ms: int,
) -> dict | None:
    """
    Move an active session to a terminal status. Returns None if it was
    already terminal.
    """
    row = await db.fetch_one(
        f"""
        UPDATE quiz_sessions
        SET status = $2,
            score = $3,
            total_questions = $4,
            completed_at = $5,
            duration_ms = $6
        WHERE id = $1
          AND status = 'active'
        RETURNING {_SESSION_COLUMNS}
        """,
        session_id,
        status,
        score,
        total_questions,
        completed_at,
        duration_ms,
    )
    return _session_row(row)


async def list_finished_sessions() -> list[dict]:
    rows = await db.fetch_all(
        f"""
        SELECT {_SESSION_COLUMNS}
        FROM quiz_sessions
        WHERE status IN ('completed', 'timeout')
        ORDER BY score DESC, duration_ms ASC NULLS LAST, id ASC
        """
    )
    return [_session_row(row) for row in rows]
