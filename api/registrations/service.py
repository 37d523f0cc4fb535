"""
Registration business logic.

The only rule beyond field validation is phone-number uniqueness, checked
before insert and before an update that moves a registration to another
phone number.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)

NOT_FOUND = "Registration not found"
PHONE_NOT_FOUND = "Registration not found for this phone number"
PHONE_TAKEN = "Phone number already registered"


def to_registration_response(row: dict) -> schemas.RegistrationResponse:
    return schemas.RegistrationResponse(
        id=int(row["id"]),
        full_name=str(row["full_name"]),
        age=row.get("age"),
        gender=row["gender"],
        phone_number=str(row["phone_number"]),
        email=row.get("email"),
        church_name=row.get("church_name"),
        available_all_stages=bool(row["available_all_stages"]),
        reason_to_join=row.get("reason_to_join"),
        terms_accepted=bool(row["terms_accepted"]),
        registration_date=row["registration_date"],
    )


async def list_registrations() -> list[schemas.RegistrationResponse]:
    rows = await repository.list_registrations()
    return [to_registration_response(row) for row in rows]


async def get_registration(registration_id: int) -> schemas.RegistrationResponse:
    row = await repository.get_registration(registration_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return to_registration_response(row)


async def list_email_contacts() -> list[dict]:
    """
    Registrations that left an email address, oldest first.
    """
    return await repository.list_registrations_with_email()


async def get_registration_row_by_phone(phone_number: str) -> dict:
    row = await repository.get_registration_by_phone(phone_number.strip())
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PHONE_NOT_FOUND)
    return row


async def login(payload: schemas.LoginRequest) -> schemas.RegistrationResponse:
    row = await get_registration_row_by_phone(payload.phone_number)
    return to_registration_response(row)


async def create_registration(payload: schemas.RegistrationRequest) -> schemas.RegistrationResponse:
    existing = await repository.get_registration_by_phone(payload.phone_number)
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=PHONE_TAKEN)

    row = await repository.create_registration(payload.model_dump())
    logger.info("registration_created id=%s", row["id"])
    return to_registration_response(row)


async def update_registration(
    registration_id: int,
    payload: schemas.RegistrationRequest,
) -> schemas.RegistrationResponse:
    current = await repository.get_registration(registration_id)
    if current is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    if payload.phone_number != current["phone_number"]:
        other = await repository.get_registration_by_phone(payload.phone_number)
        if other is not None and int(other["id"]) != registration_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=PHONE_TAKEN)

    row = await repository.update_registration(registration_id, payload.model_dump())
    if row is None:
        # Deleted between the read and the update.
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return to_registration_response(row)


async def delete_registration(registration_id: int) -> None:
    deleted = await repository.delete_registration(registration_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    logger.info("registration_deleted id=%s", registration_id)
