from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from referral_api import referrals as service
from referral_api.deps import Store
from referral_api.store import ReferralStore

router = APIRouter(prefix="/api/statistics", tags=["statistics"])


class StatisticsOut(BaseModel):
    total_referrals: int
    pending_referrals: int
    contacted_referrals: int
    enrolled_referrals: int
    completed_referrals: int


@router.get("", response_model=StatisticsOut)
def get_statistics(store: ReferralStore = Store) -> StatisticsOut:
    stats = service.get_statistics(store)
    return StatisticsOut(
        total_referrals=stats.total,
        pending_referrals=stats.pending,
        contacted_referrals=stats.contacted,
        enrolled_referrals=stats.enrolled,
        completed_referrals=stats.completed,
    )
