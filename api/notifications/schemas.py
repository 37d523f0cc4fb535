"""
Bulk-email API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from core.schemas import CamelModel, strip_or_none

MAX_RECIPIENTS = 1000


class Recipient(CamelModel):
    email: str
    name: Annotated[str, Field(max_length=200)] | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value: object) -> str:
        text = value.strip() if isinstance(value, str) else ""
        try:
            validate_email(text, check_deliverability=False)
        except EmailNotValidError as exc:
            raise PydanticCustomError("email", "Invalid email format") from exc
        return text.lower()

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: object) -> object:
        return strip_or_none(value)


class BulkEmailRequest(CamelModel):
    subject: str = Field(..., max_length=300)
    message: str = Field(..., max_length=50_000)
    # Omitted means "every registration with an email address".
    recipients: Annotated[list[Recipient], Field(max_length=MAX_RECIPIENTS)] | None = None

    @field_validator("subject", "message", mode="before")
    @classmethod
    def _required(cls, value: object, info: ValidationInfo) -> str:
        text = value.strip() if isinstance(value, str) else ""
        if not text:
            raise PydanticCustomError("required", "{field} is required", {"field": info.field_name.capitalize()})
        return text

    @field_validator("subject")
    @classmethod
    def _single_line_subject(cls, value: str) -> str:
        if "\r" in value or "\n" in value:
            raise PydanticCustomError("single_line", "Subject must be a single line")
        return value


class RecipientOutcome(CamelModel):
    email: str
    name: str | None = None
    status: Literal["sent", "failed"]
    error: str | None = None
    message_id: str | None = None


class BulkEmailResult(CamelModel):
    log_id: int
    total: int
    success_count: int
    failure_count: int
    results: list[RecipientOutcome]


class EmailLogResponse(CamelModel):
    id: int
    subject: str
    body: str
    recipients: list[RecipientOutcome]
    total: int
    success_count: int
    failure_count: int
    sent_at: datetime


class EmailConfigResponse(CamelModel):
    host: str
    port: int
    sender: str
    use_tls: bool
