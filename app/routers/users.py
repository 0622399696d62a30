import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.exceptions import (
    EmailAlreadyExistsError,
    EmailInUseError,
    UserNotFoundError,
    ValidationError,
)
from app.models.user import User
from app.schemas.user import UserOut, UserWrite

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _users_with_tasks(db: Session):
    return db.query(User).options(selectinload(User.tasks))


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = _users_with_tasks(db).filter(User.id == user_id).first()
    if user is None:
        logger.warning("User %s not found", user_id)
        raise UserNotFoundError(user_id)
    return user


@router.get("", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    return _users_with_tasks(db).order_by(User.id).all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return _get_user_or_404(db, user_id)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(user: UserWrite, response: Response, db: Session = Depends(get_db)):
    exists = db.query(User).filter(User.email == user.email).first()
    if exists:
        logger.warning("Rejected duplicate email on create")
        raise EmailAlreadyExistsError()

    new_user = User(email=user.email, password_hash=user.password_hash)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    response.headers["Location"] = f"/users/{new_user.id}"
    logger.info("Created user %s", new_user.id)
    return new_user


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    # lookup comes first: an unknown id is a 404 even when the body is missing or invalid
    user = _get_user_or_404(db, user_id)
    try:
        changes = UserWrite.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e.errors())

    conflict = (
        db.query(User.id)
        .filter(User.email == changes.email, User.id != user_id)
        .first()
    )
    if conflict:
        logger.warning("Rejected email change for user %s: in use", user_id)
        raise EmailInUseError()

    user.email = changes.email
    user.password_hash = changes.password_hash
    db.commit()
    db.refresh(user)
    logger.info("Updated user %s", user_id)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s and its tasks", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
