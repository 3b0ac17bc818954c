from __future__ import annotations

from datetime import datetime
from typing import Literal

from sqlalchemy import DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from referral_api.db import Base


REFERRAL_STATUS_PENDING: Literal["pending"] = "pending"
REFERRAL_STATUS_CONTACTED: Literal["contacted"] = "contacted"
REFERRAL_STATUS_ENROLLED: Literal["enrolled"] = "enrolled"
REFERRAL_STATUS_COMPLETED: Literal["completed"] = "completed"

ReferralStatus = Literal["pending", "contacted", "enrolled", "completed"]

REFERRAL_STATUSES: tuple[str, ...] = (
    REFERRAL_STATUS_PENDING,
    REFERRAL_STATUS_CONTACTED,
    REFERRAL_STATUS_ENROLLED,
    REFERRAL_STATUS_COMPLETED,
)


class Referral(Base):
    __tablename__ = "referrals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    referrer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    referrer_email: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )
    referrer_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    referee_name: Mapped[str] = mapped_column(String(100), nullable=False)
    referee_email: Mapped[str] = mapped_column(String(100), nullable=False)
    referee_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    course: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(
            *REFERRAL_STATUSES,
            name="referral_status",
            create_constraint=True,
            validate_strings=True,
        ),
        nullable=False,
        default=REFERRAL_STATUS_PENDING,
        server_default=REFERRAL_STATUS_PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
