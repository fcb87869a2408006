from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel

from authstarter.auth.codes import now_utc
from authstarter.auth.deps import DBSession, Mailer
from authstarter.auth.validators import validate_email
from authstarter.core.config import settings
from authstarter.models import User
from authstarter.models.user import AuthProvider
from authstarter.services import user_store

SEED_USERS = (
    ("admin@example.com", "Admin User", "admin"),
    ("test@example.com", "Test User", "test"),
)


def require_dev_key(x_dev_api_key: str | None = Header(default=None)) -> None:
    if settings.dev_api_key and x_dev_api_key != settings.dev_api_key:
        raise HTTPException(status_code=401, detail="invalid dev api key")


router = APIRouter(prefix="/dev", tags=["dev"], dependencies=[Depends(require_dev_key)])


@router.post("/seed/minimal")
def seed_minimal(db: DBSession):
    created: list[str] = []
    for email, name, _role in SEED_USERS:
        if user_store.find_by_email(db, email) is not None:
            continue
        now = now_utc()
        user_store.insert(
            db,
            User(
                email=email,
                name=name,
                provider=AuthProvider.EMAIL,
                is_email_verified=True,
                created_at=now,
                updated_at=now,
                last_seen_at=now,
            ),
        )
        created.append(email)
    db.commit()
    return {
        "success": True,
        "message": "Minimal seed data created",
        "data": {
            "created": created,
            "users": [{"email": email, "role": role} for email, _name, role in SEED_USERS],
        },
    }


class TestEmailIn(BaseModel):
    to: str


@router.post("/email/test")
def send_test_email(payload: TestEmailIn, mailer: Mailer):
    to = validate_email(payload.to)
    message_id = mailer.send_test(to)
    return {
        "success": True,
        "message": f"Email sent successfully! Check your inbox at {to}",
        "data": {"email_id": message_id},
    }
