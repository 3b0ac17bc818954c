from __future__ import annotations

import contextlib
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Iterator

from sqlalchemy import case, desc, func, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from referral_api.db import Base, make_session_factory
from referral_api.errors import StorageError
from referral_api.logs import error_text, log_event
from referral_api.models import (
    REFERRAL_STATUS_COMPLETED,
    REFERRAL_STATUS_CONTACTED,
    REFERRAL_STATUS_ENROLLED,
    REFERRAL_STATUS_PENDING,
    Referral,
)


MSG_FETCH_FAILED = "Failed to fetch referrals"
MSG_CREATE_FAILED = "Failed to create referral"
MSG_UPDATE_FAILED = "Failed to update referral status"
MSG_STATS_FAILED = "Failed to fetch statistics"
MSG_UNAVAILABLE = "Storage unavailable"


@dataclass(frozen=True, slots=True)
class ContactInfo:
    name: str
    email: str
    phone: str


ReferrerInfo = ContactInfo
RefereeInfo = ContactInfo


@dataclass(frozen=True, slots=True)
class ReferralStats:
    total: int
    pending: int
    contacted: int
    enrolled: int
    completed: int


@dataclass(frozen=True, slots=True)
class SchemaResult:
    ok: bool
    error: str | None = None


@contextlib.contextmanager
def _storage_errors(
    operation: str, message: str, **context: object
) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        log_event(
            "error",
            "storage_error",
            operation=operation,
            error=error_text(exc),
            **context,
        )
        raise StorageError(message, operation=operation) from exc


class ReferralStore:
    """Durable persistence for referral records.

    One instance is owned by the app and handed to request handlers. Each
    call opens its own short-lived session and runs a single statement;
    nothing is retried and concurrent updates of the same row resolve as
    last-write-wins at the backend.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = make_session_factory(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def ensure_schema(self) -> SchemaResult:
        try:
            Base.metadata.create_all(self._engine, tables=[Referral.__table__])
        except SQLAlchemyError as exc:
            err = error_text(exc)
            log_event("error", "schema_ensure_failed", error=err)
            return SchemaResult(ok=False, error=err)
        log_event("info", "schema_ready", table=Referral.__tablename__)
        return SchemaResult(ok=True)

    def ping(self) -> None:
        with _storage_errors("ping", MSG_UNAVAILABLE):
            with self._session_factory() as session:
                session.execute(text("SELECT 1"))

    def insert(
        self,
        referrer: ReferrerInfo,
        referee: RefereeInfo,
        course: str,
        *,
        now: datetime | None = None,
    ) -> int:
        now_dt = now or datetime.now(UTC)
        with _storage_errors("insert", MSG_CREATE_FAILED):
            with self._session_factory() as session:
                row = Referral(
                    referrer_name=referrer.name,
                    referrer_email=referrer.email,
                    referrer_phone=referrer.phone,
                    referee_name=referee.name,
                    referee_email=referee.email,
                    referee_phone=referee.phone,
                    course=course,
                    status=REFERRAL_STATUS_PENDING,
                    created_at=now_dt,
                    updated_at=now_dt,
                )
                session.add(row)
                session.flush()
                new_id = int(row.id)
                session.commit()
        return new_id

    def list_all(self) -> list[Referral]:
        with _storage_errors("list_all", MSG_FETCH_FAILED):
            with self._session_factory() as session:
                rows = session.scalars(
                    select(Referral).order_by(
                        desc(Referral.created_at), desc(Referral.id)
                    )
                ).all()
        return list(rows)

    def list_by_referrer_email(self, email: str) -> list[Referral]:
        if not email:
            return []
        with _storage_errors(
            "list_by_referrer_email", MSG_FETCH_FAILED, referrer_email=email
        ):
            with self._session_factory() as session:
                rows = session.scalars(
                    select(Referral)
                    .where(Referral.referrer_email == email)
                    .order_by(desc(Referral.created_at), desc(Referral.id))
                ).all()
        return list(rows)

    def update_status(
        self, referral_id: int, status: str, *, now: datetime | None = None
    ) -> int:
        now_dt = now or datetime.now(UTC)
        with _storage_errors(
            "update_status",
            MSG_UPDATE_FAILED,
            referral_id=referral_id,
            status=status,
        ):
            with self._session_factory() as session:
                result = session.execute(
                    update(Referral)
                    .where(Referral.id == int(referral_id))
                    .values(status=status, updated_at=now_dt)
                )
                affected = int(result.rowcount or 0)
                session.commit()
        return affected

    def aggregate_statistics(self) -> ReferralStats:
        def _count_status(status: str):
            return func.sum(case((Referral.status == status, 1), else_=0))

        stmt = select(
            func.count(),
            _count_status(REFERRAL_STATUS_PENDING),
            _count_status(REFERRAL_STATUS_CONTACTED),
            _count_status(REFERRAL_STATUS_ENROLLED),
            _count_status(REFERRAL_STATUS_COMPLETED),
        ).select_from(Referral)

        with _storage_errors("aggregate_statistics", MSG_STATS_FAILED):
            with self._session_factory() as session:
                row = session.execute(stmt).one()

        # SUM over an empty table is NULL.
        total, pending, contacted, enrolled, completed = (int(v or 0) for v in row)
        return ReferralStats(
            total=total,
            pending=pending,
            contacted=contacted,
            enrolled=enrolled,
            completed=completed,
        )
