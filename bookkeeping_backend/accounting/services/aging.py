# accounting/services/aging.py

"""
AGING BUCKETS

Pure bucketing of open obligations by days past due.

- days = max(0, as_of - due_date); missing due date falls back to the
  issue / creation date
- buckets: 0-30, 31-60, 61+
- closed items (remaining <= 0) are skipped
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from accounting.money import ZERO, q2

BUCKET_0_30 = "0-30"
BUCKET_31_60 = "31-60"
BUCKET_61_PLUS = "61+"

BUCKETS = (BUCKET_0_30, BUCKET_31_60, BUCKET_61_PLUS)


@dataclass(frozen=True)
class AgingItem:
    remaining: Decimal
    due_date: date | None = None
    fallback_date: date | datetime | None = None

    @classmethod
    def from_obligation(cls, obligation) -> "AgingItem":
        return cls(
            remaining=obligation.remaining,
            due_date=obligation.due_date,
            fallback_date=obligation.date or obligation.created_at,
        )

    @property
    def reference_date(self) -> date | None:
        if self.due_date is not None:
            return self.due_date
        if isinstance(self.fallback_date, datetime):
            return self.fallback_date.date()
        return self.fallback_date


def days_overdue(item: AgingItem, as_of: date) -> int:
    ref = item.reference_date
    if ref is None:
        return 0
    return max(0, (as_of - ref).days)


def bucket_for(days: int) -> str:
    if days <= 30:
        return BUCKET_0_30
    if days <= 60:
        return BUCKET_31_60
    return BUCKET_61_PLUS


def build_aging(items: Iterable[AgingItem], as_of: date) -> dict:
    totals = {name: [ZERO, 0] for name in BUCKETS}

    for item in items:
        amount = q2(item.remaining)
        if amount <= ZERO:
            continue
        slot = totals[bucket_for(days_overdue(item, as_of))]
        slot[0] += amount
        slot[1] += 1

    return {
        "as_of": str(as_of),
        "buckets": [
            {"bucket": name, "amount": str(totals[name][0]), "count": totals[name][1]}
            for name in BUCKETS
        ],
        "total": str(sum((v[0] for v in totals.values()), ZERO)),
        "total_count": sum(v[1] for v in totals.values()),
    }
