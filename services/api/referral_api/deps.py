from __future__ import annotations

from fastapi import Depends, Request

from referral_api.store import ReferralStore


def get_store(request: Request) -> ReferralStore:
    return request.app.state.store


Store = Depends(get_store)
