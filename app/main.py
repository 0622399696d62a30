import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import (
    CORS_ORIGINS,
    DEFAULT_USER_EMAIL,
    DEFAULT_USER_ID,
    DEFAULT_USER_PASSWORD_HASH,
    LOG_LEVEL,
)
from app.database import Base, SessionLocal, engine
from app.exceptions import AppError, ValidationError
from app.logging_setup import setup_logging
from app.models import User
from app.routers import tasks, users

logger = logging.getLogger(__name__)


def advance_user_id_sequence(db: Session) -> bool:
    """Move the users id sequence past rows inserted with an explicit id.

    sqlite picks max(id)+1 on its own; sequence-backed stores do not.
    """
    if db.get_bind().dialect.name != "postgresql":
        return False
    db.execute(
        text(
            "SELECT setval(pg_get_serial_sequence('users', 'id'), "
            "(SELECT MAX(id) FROM users))"
        )
    )
    db.commit()
    return True


def ensure_default_owner(db: Session) -> User:
    """Create the user that owns tasks created without a caller identity."""
    user = db.get(User, DEFAULT_USER_ID)
    if user is None:
        user = User(
            id=DEFAULT_USER_ID,
            email=DEFAULT_USER_EMAIL,
            password_hash=DEFAULT_USER_PASSWORD_HASH,
        )
        db.add(user)
        db.commit()
        advance_user_id_sequence(db)
        logger.info("Seeded default task owner (id=%s)", DEFAULT_USER_ID)
    return user


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_default_owner(db)
    finally:
        db.close()
    yield


app = FastAPI(title="Task Manager", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(tasks.router)
app.include_router(users.router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # bad input is a 400 with per-field messages, not FastAPI's default 422
    err = ValidationError.from_pydantic(exc.errors())
    return JSONResponse(status_code=err.status_code, content=err.body())


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"message": "Conflict with existing data"})


# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
