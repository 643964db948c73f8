# accounting/services/report_service.py

"""
======================================================
PATH: accounting/services/report_service.py
======================================================
REPORTING AGGREGATOR

Read-only queries over transactions, receivables and payables.

- get_report_snapshot    : overview, category summary, per-business summary,
                           monthly trend (6 or 12 months)
- get_aging_report       : receivable + payable aging as of a date
- get_settlement_history : transactions posted against one document

Contract:
- Money is returned as 2dp strings
- No writes, no balance assignment
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone

from accounting.models.transaction import Transaction
from accounting.money import BUSINESSES, STATUS_PAID, ZERO, parse_date, q2, require_business
from accounting.services.aging import AgingItem, build_aging
from accounting.services.cashbook_service import serialize_transaction
from accounting.services.exceptions import LedgerValidationError

TREND_WINDOWS = {"6m": 6, "12m": 12}


def _business_filter(business) -> str | None:
    if business in (None, "", "all"):
        return None
    return require_business(business)


def _month_start(d: date, months_back: int = 0) -> date:
    index = d.year * 12 + (d.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


# ============================================================
# SNAPSHOT
# ============================================================


def _category_rows(qs, txn_type: str) -> list[dict]:
    rows = (
        qs.filter(type=txn_type)
        .values("category")
        .annotate(amount=Sum("amount"), count=Count("id"))
        .order_by("-amount", "category")
    )
    return [
        {"category": r["category"], "amount": str(q2(r["amount"])), "count": r["count"]}
        for r in rows
    ]


def _monthly_trend(*, date_to: date, months: int, business: str | None) -> list[dict]:
    start = _month_start(date_to, months - 1)
    qs = Transaction.objects.filter(date__gte=start, date__lte=date_to)
    if business:
        qs = qs.filter(business=business)

    rows = (
        qs.annotate(month=TruncMonth("date"))
        .values("month")
        .annotate(
            income=Sum("amount", filter=Q(type=Transaction.INCOME)),
            expense=Sum("amount", filter=Q(type=Transaction.EXPENSE)),
        )
    )
    by_month = {}
    for r in rows:
        m = r["month"]
        key = (m.year, m.month)
        by_month[key] = (q2(r["income"]), q2(r["expense"]))

    trend = []
    for offset in range(months - 1, -1, -1):
        m = _month_start(date_to, offset)
        income, expense = by_month.get((m.year, m.month), (ZERO, ZERO))
        trend.append(
            {
                "month": f"{m.year:04d}-{m.month:02d}",
                "income": str(income),
                "expense": str(expense),
                "net": str(income - expense),
            }
        )
    return trend


def get_report_snapshot(*, date_from=None, date_to=None, business=None, trend_window="6m") -> dict:
    """
    Income / expense picture for [date_from, date_to].

    Defaults: date_from = first day of the current month, date_to = today.
    """
    today = timezone.localdate()
    start = parse_date(date_from, field="date_from") if date_from else _month_start(today)
    end = parse_date(date_to, field="date_to") if date_to else today
    if start > end:
        raise LedgerValidationError("date_from must be on or before date_to")

    months = TREND_WINDOWS.get(trend_window)
    if months is None:
        raise LedgerValidationError("Trend window must be 6m or 12m")

    biz = _business_filter(business)

    qs = Transaction.objects.filter(date__gte=start, date__lte=end)
    if biz:
        qs = qs.filter(business=biz)

    totals = qs.aggregate(
        income=Sum("amount", filter=Q(type=Transaction.INCOME)),
        expense=Sum("amount", filter=Q(type=Transaction.EXPENSE)),
        count=Count("id"),
    )
    income = q2(totals["income"])
    expense = q2(totals["expense"])

    per_business = {
        r["business"]: r
        for r in qs.values("business").annotate(
            income=Sum("amount", filter=Q(type=Transaction.INCOME)),
            expense=Sum("amount", filter=Q(type=Transaction.EXPENSE)),
            count=Count("id"),
        )
    }
    business_summary = []
    for code, _label in BUSINESSES:
        if biz and code != biz:
            continue
        row = per_business.get(code, {})
        b_income = q2(row.get("income"))
        b_expense = q2(row.get("expense"))
        business_summary.append(
            {
                "business": code,
                "income": str(b_income),
                "expense": str(b_expense),
                "net": str(b_income - b_expense),
                "count": row.get("count", 0),
            }
        )

    return {
        "filters": {
            "date_from": str(start),
            "date_to": str(end),
            "business": biz or "all",
            "trend_window": trend_window,
        },
        "overview": {
            "total_income": str(income),
            "total_expense": str(expense),
            "net_profit": str(income - expense),
            "transaction_count": totals["count"],
        },
        "category_summary": {
            "income": _category_rows(qs, Transaction.INCOME),
            "expense": _category_rows(qs, Transaction.EXPENSE),
        },
        "business_summary": business_summary,
        "monthly_trend": _monthly_trend(date_to=end, months=months, business=biz),
    }


# ============================================================
# AGING
# ============================================================


def _open_items(model, business):
    qs = model.objects.exclude(status=STATUS_PAID)
    if business:
        qs = qs.filter(business=business)
    qs = qs.only("amount", "paid_amount", "due_date", "date", "created_at")
    return [AgingItem.from_obligation(o) for o in qs]


def get_aging_report(*, as_of=None, business=None) -> dict:
    from customers.models import Receivable
    from vendors.models import Payable

    as_of_date = parse_date(as_of, field="as_of")
    biz = _business_filter(business)

    return {
        "as_of": str(as_of_date),
        "business": biz or "all",
        "receivable": build_aging(_open_items(Receivable, biz), as_of_date),
        "payable": build_aging(_open_items(Payable, biz), as_of_date),
    }


# ============================================================
# SETTLEMENT HISTORY
# ============================================================


def get_settlement_history(*, reference_model, reference_id) -> dict:
    """
    Every transaction posted against one receivable / payable / salary.
    Works after the document itself was deleted.
    """
    valid = {code for code, _ in Transaction.REFERENCE_MODELS}
    if reference_model not in valid:
        raise LedgerValidationError(
            f"reference_model must be one of: {', '.join(sorted(valid))}"
        )
    if reference_id in (None, ""):
        raise LedgerValidationError("reference_id is required")

    entries = list(
        Transaction.objects.filter(
            reference_model=reference_model, reference_id=str(reference_id)
        ).order_by("date", "created_at", "id")
    )
    total: Decimal = sum((q2(t.amount) for t in entries), ZERO)

    return {
        "reference_model": reference_model,
        "reference_id": str(reference_id),
        "transactions": [serialize_transaction(t) for t in entries],
        "total": str(total),
        "count": len(entries),
    }
