"""
Registration API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from core.schemas import CamelModel, strip_or_none

MIN_AGE = 13
MAX_NAME_LENGTH = 200
GENDERS = ("Male", "Female")


def _required_text(value: object, message: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise PydanticCustomError("required", message)
    return text


class RegistrationRequest(CamelModel):
    full_name: str = Field(..., max_length=MAX_NAME_LENGTH)
    age: int | None = None
    gender: str
    phone_number: str
    email: str | None = None
    church_name: Annotated[str, Field(max_length=200)] | None = None
    available_all_stages: bool
    reason_to_join: Annotated[str, Field(max_length=2000)] | None = None
    terms_accepted: bool

    @field_validator("full_name", mode="before")
    @classmethod
    def _full_name(cls, value: object) -> str:
        name = _required_text(value, "Full name is required")
        if "\r" in name or "\n" in name:
            raise PydanticCustomError("single_line", "Full name must be a single line")
        return name

    @field_validator("phone_number", mode="before")
    @classmethod
    def _phone_number(cls, value: object) -> str:
        return _required_text(value, "Phone number is required")

    @field_validator("age")
    @classmethod
    def _age(cls, value: int | None) -> int | None:
        if value is not None and value < MIN_AGE:
            raise PydanticCustomError("age", "Age must be at least {min_age}", {"min_age": MIN_AGE})
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def _gender(cls, value: object) -> str:
        if value not in GENDERS:
            raise PydanticCustomError("gender", "Invalid gender")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value: object) -> str | None:
        value = strip_or_none(value)
        if value is None:
            return None
        try:
            validate_email(str(value), check_deliverability=False)
        except EmailNotValidError as exc:
            raise PydanticCustomError("email", "Invalid email format") from exc
        return str(value).lower()

    @field_validator("church_name", "reason_to_join", mode="before")
    @classmethod
    def _optional_text(cls, value: object) -> object:
        return strip_or_none(value)

    @field_validator("terms_accepted")
    @classmethod
    def _terms(cls, value: bool) -> bool:
        if value is not True:
            raise PydanticCustomError("terms", "Terms must be accepted")
        return value


class LoginRequest(CamelModel):
    phone_number: str

    @field_validator("phone_number", mode="before")
    @classmethod
    def _phone_number(cls, value: object) -> str:
        return _required_text(value, "Phone number is required")


class RegistrationResponse(CamelModel):
    id: int
    full_name: str
    age: int | None
    gender: Literal["Male", "Female"]
    phone_number: str
    email: str | None
    church_name: str | None
    available_all_stages: bool
    reason_to_join: str | None
    terms_accepted: bool
    registration_date: datetime
