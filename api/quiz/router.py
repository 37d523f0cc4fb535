"""
Quiz API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from core.errors import server_errors

from . import schemas, service

router = APIRouter()


@router.post("/api/quiz/start")
async def start_quiz(payload: schemas.StartQuizRequest, response: Response) -> dict:
    with server_errors("Error starting quiz"):
        created, session = await service.start_quiz(payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
        message = "Quiz session started"
    else:
        message = "Resuming existing quiz session"
    return {"success": True, "message": message, "session": session}


@router.get("/api/quiz/session/{phone_number}")
async def get_session(phone_number: str) -> dict:
    with server_errors("Error fetching quiz session"):
        session = await service.get_session_for_phone(phone_number)
    return {"success": True, "session": session}


@router.get("/api/quiz/questions/{session_id}")
async def get_questions(session_id: int) -> dict:
    with server_errors("Error fetching quiz questions"):
        session, questions = await service.get_session_questions(session_id)
    return {"success": True, "session": session, "questions": questions}


@router.post("/api/quiz/answer")
async def submit_answer(payload: schemas.SubmitAnswerRequest) -> dict:
    with server_errors("Error submitting answer"):
        result = await service.submit_answer(payload)
    return {"success": True, "message": "Answer recorded", "data": result}


@router.post("/api/quiz/submit")
async def submit_quiz(payload: schemas.SubmitQuizRequest) -> dict:
    with server_errors("Error submitting quiz"):
        result = await service.submit_quiz(payload)
    return {"success": True, "message": "Quiz submitted successfully", "data": result}


@router.get("/api/quiz/results")
async def list_results() -> dict:
    with server_errors("Error fetching quiz results"):
        results = await service.list_results()
    return {"success": True, "count": len(results), "data": results}


@router.get("/api/quiz/result/{phone_number}")
async def get_user_result(phone_number: str) -> dict:
    with server_errors("Error fetching quiz result"):
        result = await service.get_user_result(phone_number)
    return {"success": True, "data": result}
