"""
Bulk-email business logic.

Messages go out one recipient at a time. A failed recipient is recorded and
skipped; nothing is retried. Every run is stored as one `email_logs` row.
"""

from __future__ import annotations

import html
import logging

from fastapi import HTTPException, status

from core import mailer
from core.errors import ServerError
from registrations import service as registrations_service

from . import repository, schemas

DEFAULT_GREETING_NAME = "Participant"

logger = logging.getLogger(__name__)


def render_text(*, name: str | None, message: str, signature: str) -> str:
    return f"Dear {name or DEFAULT_GREETING_NAME},\n\n{message}\n\n{signature}\n"


def render_html(*, name: str | None, message: str, signature: str) -> str:
    paragraphs = [p.strip() for p in message.split("\n\n") if p.strip()]
    body = "\n".join(
        "<p>" + html.escape(p).replace("\n", "<br>") + "</p>" for p in paragraphs
    )
    return (
        f"<p>Dear {html.escape(name or DEFAULT_GREETING_NAME)},</p>\n"
        f"{body}\n"
        f"<p>{html.escape(signature)}</p>\n"
    )


def dedupe_recipients(recipients: list[schemas.Recipient]) -> list[schemas.Recipient]:
    seen: set[str] = set()
    unique: list[schemas.Recipient] = []
    for recipient in recipients:
        key = recipient.email.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(recipient)
    return unique


async def collect_recipients(payload: schemas.BulkEmailRequest) -> list[schemas.Recipient]:
    if payload.recipients is not None:
        return dedupe_recipients(payload.recipients)

    # Stored rows were validated on write; they are not re-validated here.
    contacts = await registrations_service.list_email_contacts()
    return dedupe_recipients(
        [schemas.Recipient.model_construct(email=row["email"], name=row.get("full_name")) for row in contacts]
    )


def _require_configured() -> mailer.SmtpSettings:
    settings = mailer.smtp_settings()
    if not settings.configured:
        raise ServerError(
            "Email service is not configured",
            error="SMTP_HOST and MAIL_FROM (or SMTP_USERNAME) must be set.",
        )
    return settings


async def send_bulk_email(payload: schemas.BulkEmailRequest) -> schemas.BulkEmailResult:
    recipients = await collect_recipients(payload)
    if not recipients:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No recipients to send to")

    settings = _require_configured()

    outcomes: list[schemas.RecipientOutcome] = []
    for recipient in recipients:
        try:
            message = mailer.build_message(
                settings=settings,
                to_email=recipient.email,
                to_name=recipient.name,
                subject=payload.subject,
                text_body=render_text(name=recipient.name, message=payload.message, signature=settings.sender_name),
                html_body=render_html(name=recipient.name, message=payload.message, signature=settings.sender_name),
            )
            message_id = await mailer.send_message(message, settings=settings)
        except mailer.MailerError as exc:
            logger.warning("bulk_email_recipient_failed email=%s error=%s", recipient.email, exc)
            outcomes.append(
                schemas.RecipientOutcome(email=recipient.email, name=recipient.name, status="failed", error=str(exc))
            )
            continue
        outcomes.append(
            schemas.RecipientOutcome(email=recipient.email, name=recipient.name, status="sent", message_id=message_id)
        )

    success_count = sum(1 for o in outcomes if o.status == "sent")
    failure_count = len(outcomes) - success_count
    log_row = await repository.insert_email_log(
        subject=payload.subject,
        body=payload.message,
        recipients=[o.model_dump() for o in outcomes],
        success_count=success_count,
        failure_count=failure_count,
    )
    logger.info(
        "bulk_email_complete log_id=%s sent=%s failed=%s",
        log_row["id"],
        success_count,
        failure_count,
    )
    return schemas.BulkEmailResult(
        log_id=int(log_row["id"]),
        total=len(outcomes),
        success_count=success_count,
        failure_count=failure_count,
        results=outcomes,
    )


def to_email_log_response(row: dict) -> schemas.EmailLogResponse:
    return schemas.EmailLogResponse(
        id=int(row["id"]),
        subject=str(row["subject"]),
        body=str(row["body"]),
        recipients=[schemas.RecipientOutcome(**item) for item in row["recipients"]],
        total=int(row["total"]),
        success_count=int(row["success_count"]),
        failure_count=int(row["failure_count"]),
        sent_at=row["sent_at"],
    )


async def list_email_logs(*, limit: int, offset: int) -> list[schemas.EmailLogResponse]:
    rows = await repository.list_email_logs(limit=limit, offset=offset)
    return [to_email_log_response(row) for row in rows]


async def test_email_config() -> schemas.EmailConfigResponse:
    settings = _require_configured()
    try:
        await mailer.verify_connection(settings)
    except mailer.MailerError as exc:
        raise ServerError("Email configuration test failed", error=str(exc)) from exc
    logger.info("smtp_config_verified host=%s port=%s", settings.host, settings.port)
    return schemas.EmailConfigResponse(
        host=settings.host,
        port=settings.port,
        sender=settings.sender,
        use_tls=settings.use_tls,
    )
