import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config, db
from core.errors import ServerError
from core.log import configure_logging
from notifications import router as notifications_router
from quiz import router as quiz_router
from quiz import service as quiz_service
from registrations import router as registrations_router

configure_logging()
logger = logging.getLogger(__name__)

_REQUEST_LOCATIONS = {"body", "path", "query", "header", "cookie"}


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process, then make sure tables and the
    # question set exist.
    await db.init_pool()
    try:
        await db.ensure_schema()
        await quiz_service.seed_questions_if_needed()
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Event Registration & Quiz API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "")} for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": jsonable_encoder(errors)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(ServerError)
async def server_error_handler(_: Request, exc: ServerError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": exc.message, "error": exc.error},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error", "error": str(exc)},
    )


app.include_router(registrations_router.router, tags=["registrations"])
app.include_router(quiz_router.router, tags=["quiz"])
app.include_router(notifications_router.router, tags=["notifications"])


@app.get("/health")
async def health() -> dict:
    database = "unavailable"
    if db.is_ready():
        try:
            await db.fetch_value("SELECT 1")
            database = "connected"
        except Exception as exc:
            logger.warning("health_db_check_failed error=%s", exc)
    return {"success": True, "status": "Server is running!", "database": database}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.env_int("PORT", 3000))
