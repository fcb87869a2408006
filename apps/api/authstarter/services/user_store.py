from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from authstarter.models import User
from authstarter.services.error_codes import ErrorCode
from authstarter.services.exceptions import ConflictError

_IMMUTABLE_FIELDS = {"id", "created_at"}


def find_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email))


def find_by_google_id(db: Session, google_id: str) -> User | None:
    return db.scalar(select(User).where(User.google_id == google_id))


def get(db: Session, user_id: uuid.UUID) -> User | None:
    return db.get(User, user_id)


def insert(db: Session, user: User) -> uuid.UUID:
    """Flush a new user row; the unique index on email is the real guard."""
    db.add(user)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(
            ErrorCode.DUPLICATE_EMAIL.value, "An account with this email already exists"
        ) from exc
    return user.id


def patch(db: Session, user_id: uuid.UUID, **fields: Any) -> None:
    if not fields:
        return
    columns = set(User.__table__.columns.keys())
    unknown = set(fields) - columns
    if unknown:
        raise ValueError(f"unknown user fields: {sorted(unknown)}")
    frozen = set(fields) & _IMMUTABLE_FIELDS
    if frozen:
        raise ValueError(f"immutable user fields: {sorted(frozen)}")
    db.execute(update(User).where(User.id == user_id).values(**fields))
