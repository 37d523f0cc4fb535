"""
Email audit log persistence (raw SQL).
"""

from __future__ import annotations

import json
from typing import Any

from core import db

_COLUMNS = "id, subject, body, recipients, total, success_count, failure_count, sent_at"


def _json_arg(value: Any) -> str:
    return json.dumps(value, ensure_ascii=True)


def _log_row(row: dict | None) -> dict | None:
    if row is None:
        return None
    recipients = row["recipients"]
    if isinstance(recipients, str):
        recipients = json.loads(recipients)
    row["recipients"] = list(recipients or [])
    return row


async def insert_email_log(
    *,
    subject: str,
    body: str,
    recipients: list[dict],
    success_count: int,
    failure_count: int,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO email_logs (subject, body, recipients, total, success_count, failure_count)
        VALUES ($1, $2, $3::jsonb, $4, $5, $6)
        RETURNING {_COLUMNS}
        """,
        subject,
        body,
        _json_arg(recipients),
        len(recipients),
        success_count,
        failure_count,
    )
    if row is None:
        raise RuntimeError("Failed to insert email log.")
    return _log_row(row)


async def list_email_logs(*, limit: int = 50, offset: int = 0) -> list[dict]:
    rows = await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM email_logs
        ORDER BY sent_at DESC, id DESC
        LIMIT $1
        OFFSET $2
        """,
        limit,
        offset,
    )
    return [_log_row(row) for row in rows]
