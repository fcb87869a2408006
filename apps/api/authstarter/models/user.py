from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from authstarter.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class AuthProvider(str, enum.Enum):
    EMAIL = "email"
    GOOGLE = "google"


@dataclass(frozen=True)
class Verified:
    pass


@dataclass(frozen=True)
class PendingVerification:
    code: str | None
    expires_at: datetime | None
    sent_at: datetime | None


@dataclass(frozen=True)
class PendingReset:
    code: str
    expires_at: datetime | None


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_google_id", "google_id", unique=True),
        sa.CheckConstraint(
            "provider != 'google' OR (google_id IS NOT NULL AND is_email_verified)",
            name="ck_users_google_verified",
        ),
        sa.CheckConstraint(
            "NOT (is_email_verified AND email_verification_code IS NOT NULL)",
            name="ck_users_verified_without_code",
        ),
    )

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    last_seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    is_email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_verification_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    email_verification_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    email_verification_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    password_reset_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    password_reset_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    provider: Mapped[AuthProvider] = mapped_column(
        sa.Enum(
            AuthProvider,
            name="auth_provider",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=AuthProvider.EMAIL,
    )
    google_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def verification_state(self) -> Verified | PendingVerification:
        if self.is_email_verified:
            return Verified()
        return PendingVerification(
            code=self.email_verification_code,
            expires_at=self.email_verification_expires,
            sent_at=self.email_verification_sent_at,
        )

    @property
    def reset_state(self) -> PendingReset | None:
        if not self.password_reset_code:
            return None
        return PendingReset(code=self.password_reset_code, expires_at=self.password_reset_expires)
