from __future__ import annotations

from referral_api.models import REFERRAL_STATUS_PENDING, REFERRAL_STATUSES
from referral_api.store import ContactInfo, ReferralStore


DEMO_COURSES: tuple[str, ...] = (
    "Product Management",
    "Data Science",
    "Full Stack Development",
    "Digital Marketing",
)


def seed_demo_referrals(store: ReferralStore, *, count: int = 8) -> list[int]:
    """Insert ``count`` demo referrals when the table is empty.

    Statuses cycle through the lifecycle so /api/statistics has something to
    show. Returns the new ids (empty when data already exists).
    """
    if store.aggregate_statistics().total > 0:
        return []

    ids: list[int] = []
    for i in range(max(0, int(count))):
        referrer_idx = i % 3
        referrer = ContactInfo(
            name=f"Referrer {referrer_idx + 1}",
            email=f"referrer{referrer_idx + 1}@example.com",
            phone=f"98765{referrer_idx:05d}",
        )
        referee = ContactInfo(
            name=f"Referee {i + 1}",
            email=f"referee{i + 1}@example.com",
            phone=f"91234{i:05d}",
        )
        new_id = store.insert(referrer, referee, DEMO_COURSES[i % len(DEMO_COURSES)])
        status = REFERRAL_STATUSES[i % len(REFERRAL_STATUSES)]
        if status != REFERRAL_STATUS_PENDING:
            store.update_status(new_id, status)
        ids.append(new_id)
    return ids
