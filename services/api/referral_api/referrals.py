from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from referral_api.errors import NotFoundError, ValidationError
from referral_api.models import REFERRAL_STATUSES, Referral, ReferralStatus
from referral_api.store import (
    ContactInfo,
    RefereeInfo,
    ReferralStats,
    ReferralStore,
    ReferrerInfo,
)


MSG_ALL_FIELDS_REQUIRED = "All fields are required"
MSG_INVALID_EMAIL = "Invalid email format"
MSG_INVALID_PHONE = "Phone number must be 10 digits"
MSG_INVALID_STATUS = "Valid status is required"
MSG_NOT_FOUND = "Referral not found"
MSG_CREATED = "Referral created successfully"
MSG_STATUS_UPDATED = "Referral status updated successfully"

REQUIRED_FIELDS: tuple[str, ...] = (
    "referrerName",
    "referrerEmail",
    "referrerPhone",
    "refereeName",
    "refereeEmail",
    "refereePhone",
    "course",
)

# Matches anything shaped like local@domain.tld somewhere in the value.
_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_PHONE_RE = re.compile(r"[0-9]{10}")

_MAX_REFERRAL_ID = 2**63 - 1


@dataclass(frozen=True, slots=True)
class NewReferral:
    referrer: ReferrerInfo
    referee: RefereeInfo
    course: str


def is_valid_email(value: str) -> bool:
    return _EMAIL_RE.search(value) is not None


def is_valid_phone(value: str) -> bool:
    return _PHONE_RE.fullmatch(value) is not None


def validate_referral_input(payload: Mapping[str, Any]) -> NewReferral:
    """Check a create payload; the first failing rule decides the error."""
    values: dict[str, str] = {}
    for field in REQUIRED_FIELDS:
        raw = payload.get(field)
        if not isinstance(raw, str) or not raw:
            raise ValidationError(MSG_ALL_FIELDS_REQUIRED)
        values[field] = raw

    if not is_valid_email(values["referrerEmail"]) or not is_valid_email(
        values["refereeEmail"]
    ):
        raise ValidationError(MSG_INVALID_EMAIL)

    if not is_valid_phone(values["referrerPhone"]) or not is_valid_phone(
        values["refereePhone"]
    ):
        raise ValidationError(MSG_INVALID_PHONE)

    return NewReferral(
        referrer=ContactInfo(
            name=values["referrerName"],
            email=values["referrerEmail"],
            phone=values["referrerPhone"],
        ),
        referee=ContactInfo(
            name=values["refereeName"],
            email=values["refereeEmail"],
            phone=values["refereePhone"],
        ),
        course=values["course"],
    )


def parse_status(value: object) -> ReferralStatus:
    """Single gate for status changes.

    Any of the four statuses may be set from any current status; there is no
    transition table.
    """
    if not isinstance(value, str) or value not in REFERRAL_STATUSES:
        raise ValidationError(MSG_INVALID_STATUS)
    return value  # type: ignore[return-value]


def _parse_referral_id(value: object) -> int | None:
    raw = str(value).strip()
    if not raw.isascii() or not raw.isdigit():
        return None
    rid = int(raw)
    if rid > _MAX_REFERRAL_ID:
        return None
    return rid


def create_referral(store: ReferralStore, payload: Mapping[str, Any]) -> dict[str, Any]:
    new = validate_referral_input(payload)
    referral_id = store.insert(new.referrer, new.referee, new.course)
    return {"id": referral_id, "message": MSG_CREATED}


def list_referrals(store: ReferralStore) -> list[Referral]:
    return store.list_all()


def list_referrals_by_referrer(store: ReferralStore, email: str) -> list[Referral]:
    return store.list_by_referrer_email(email)


def update_referral_status(
    store: ReferralStore, referral_id: object, status: object
) -> dict[str, str]:
    new_status = parse_status(status)
    rid = _parse_referral_id(referral_id)
    # Non-numeric ids can never match a row.
    if rid is None:
        raise NotFoundError(MSG_NOT_FOUND)
    if store.update_status(rid, new_status) == 0:
        raise NotFoundError(MSG_NOT_FOUND)
    return {"message": MSG_STATUS_UPDATED}


def get_statistics(store: ReferralStore) -> ReferralStats:
    return store.aggregate_statistics()
