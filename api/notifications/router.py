"""
Bulk-email and email-log API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from core.errors import server_errors

from . import schemas, service

router = APIRouter()


@router.post("/api/send-bulk-email")
async def send_bulk_email(payload: schemas.BulkEmailRequest) -> dict:
    with server_errors("Error sending bulk email"):
        result = await service.send_bulk_email(payload)
    return {
        "success": True,
        "message": f"Bulk email completed: {result.success_count} sent, {result.failure_count} failed",
        "data": result,
    }


@router.get("/api/email-logs")
async def list_email_logs(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> dict:
    with server_errors("Error fetching email logs"):
        logs = await service.list_email_logs(limit=limit, offset=offset)
    return {"success": True, "count": len(logs), "data": logs}


@router.get("/api/test-email-config")
async def test_email_config() -> dict:
    with server_errors("Email configuration test failed"):
        config = await service.test_email_config()
    return {"success": True, "message": "Email configuration is valid", "data": config}
