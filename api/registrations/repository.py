"""
Registration persistence (raw SQL).
"""

from __future__ import annotations

from core import db

_COLUMNS = """
    id, full_name, age, gender, phone_number, email, church_name,
    available_all_stages, reason_to_join, terms_accepted, registration_date
"""


async def list_registrations() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM registrations
        ORDER BY registration_date DESC, id DESC
        """
    )


async def list_registrations_with_email() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM registrations
        WHERE email IS NOT NULL
          AND email <> ''
        ORDER BY registration_date ASC, id ASC
        """
    )


async def get_registration(registration_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM registrations
        WHERE id = $1
        """,
        registration_id,
    )


async def get_registration_by_phone(phone_number: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM registrations
        WHERE phone_number = $1
        ORDER BY id ASC
        LIMIT 1
        """,
        phone_number,
    )


async def create_registration(fields: dict) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO registrations (
            full_name, age, gender, phone_number, email, church_name,
            available_all_stages, reason_to_join, terms_accepted
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
        RETURNING {_COLUMNS}
        """,
        fields["full_name"],
        fields["age"],
        fields["gender"],
        fields["phone_number"],
        fields["email"],
        fields["church_name"],
        fields["available_all_stages"],
        fields["reason_to_join"],
        fields["terms_accepted"],
    )
    if row is None:
        raise RuntimeError("Failed to create registration.")
    return row


async def update_registration(registration_id: int, fields: dict) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE registrations
        SET full_name = $2,
            age = $3,
            gender = $4,
            phone_number = $5,
            email = $6,
            church_name = $7,
            available_all_stages = $8,
            reason_to_join = $9,
            terms_accepted = $10
        WHERE id = $1
        RETURNING {_COLUMNS}
        """,
        registration_id,
        fields["full_name"],
        fields["age"],
        fields["gender"],
        fields["phone_number"],
        fields["email"],
        fields["church_name"],
        fields["available_all_stages"],
        fields["reason_to_join"],
        fields["terms_accepted"],
    )


async def delete_registration(registration_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM registrations
        WHERE id = $1
        RETURNING id
        """,
        registration_id,
    )
    return row is not None
