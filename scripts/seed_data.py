from __future__ import annotations

import argparse

from referral_api.core.config import Settings
from referral_api.db import make_engine
from referral_api.logs import log_event
from referral_api.seed import seed_demo_referrals
from referral_api.store import ReferralStore


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--count", type=int, default=8, help="Number of demo referrals to insert."
    )
    args = parser.parse_args()

    settings = Settings()
    store = ReferralStore(make_engine(settings))

    result = store.ensure_schema()
    if not result.ok:
        raise SystemExit(f"schema setup failed: {result.error}")

    ids = seed_demo_referrals(store, count=int(args.count))
    log_event("info", "seed_done", inserted=len(ids), ids=ids)


if __name__ == "__main__":
    main()
