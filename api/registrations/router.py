"""
Registration and login API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from core.errors import server_errors

from . import schemas, service

router = APIRouter()


@router.get("/api/registrations")
async def list_registrations() -> dict:
    with server_errors("Error fetching registrations"):
        registrations = await service.list_registrations()
    return {"success": True, "count": len(registrations), "data": registrations}


@router.get("/api/registrations/{registration_id}")
async def get_registration(registration_id: int) -> dict:
    with server_errors("Error fetching registration"):
        registration = await service.get_registration(registration_id)
    return {"success": True, "data": registration}


@router.post("/api/registrations", status_code=status.HTTP_201_CREATED)
async def create_registration(payload: schemas.RegistrationRequest) -> dict:
    with server_errors("Error creating registration"):
        registration = await service.create_registration(payload)
    return {"success": True, "message": "Registration successful!", "data": registration}


@router.put("/api/registrations/{registration_id}")
async def update_registration(registration_id: int, payload: schemas.RegistrationRequest) -> dict:
    with server_errors("Error updating registration"):
        registration = await service.update_registration(registration_id, payload)
    return {"success": True, "message": "Registration updated successfully", "data": registration}


@router.delete("/api/registrations/{registration_id}")
async def delete_registration(registration_id: int) -> dict:
    with server_errors("Error deleting registration"):
        await service.delete_registration(registration_id)
    return {"success": True, "message": "Registration deleted successfully"}


@router.post("/api/login")
async def login(payload: schemas.LoginRequest) -> dict:
    with server_errors("Error logging in"):
        registration = await service.login(payload)
    return {"success": True, "message": "Login successful", "data": registration}
