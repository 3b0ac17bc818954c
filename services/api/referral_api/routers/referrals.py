from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from referral_api import referrals as service
from referral_api.deps import Store
from referral_api.store import ReferralStore

router = APIRouter(prefix="/api/referrals", tags=["referrals"])


class ReferralOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    referrer_name: str
    referrer_email: str
    referrer_phone: str
    referee_name: str
    referee_email: str
    referee_phone: str
    course: str
    status: str
    created_at: datetime
    updated_at: datetime


class ReferralCreateRequest(BaseModel):
    # Left untyped: presence, type and format are all judged by the service.
    referrerName: Any = None
    referrerEmail: Any = None
    referrerPhone: Any = None
    refereeName: Any = None
    refereeEmail: Any = None
    refereePhone: Any = None
    course: Any = None


class ReferralCreateResponse(BaseModel):
    id: int
    message: str


class StatusUpdateRequest(BaseModel):
    status: Any = None


class MessageResponse(BaseModel):
    message: str


@router.get("", response_model=list[ReferralOut])
def list_referrals(store: ReferralStore = Store) -> list[ReferralOut]:
    rows = service.list_referrals(store)
    return [ReferralOut.model_validate(r) for r in rows]


@router.get("/referrer/{email}", response_model=list[ReferralOut])
def list_referrals_by_referrer(
    email: str, store: ReferralStore = Store
) -> list[ReferralOut]:
    rows = service.list_referrals_by_referrer(store, email)
    return [ReferralOut.model_validate(r) for r in rows]


@router.post("", response_model=ReferralCreateResponse, status_code=201)
def create_referral(
    req: ReferralCreateRequest | None = None, store: ReferralStore = Store
) -> ReferralCreateResponse:
    payload = req.model_dump() if req is not None else {}
    out = service.create_referral(store, payload)
    return ReferralCreateResponse(**out)


@router.patch("/{referral_id}", response_model=MessageResponse)
def update_referral_status(
    referral_id: str,
    req: StatusUpdateRequest | None = None,
    store: ReferralStore = Store,
) -> MessageResponse:
    status = req.status if req is not None else None
    out = service.update_referral_status(store, referral_id, status)
    return MessageResponse(**out)
