from typing import Any, Iterable, List

import pandas as pd

from ..records import ExpenseRecord, IncomeRecord
from ..schemas import MonthlyTrend, TrendPoint
from ..temporal.normalizer import normalize
from .aggregator import coerce_amount, income_total


def _month_rows(records, kind: str, amount_of) -> tuple:
    rows, skipped = [], 0
    for record in records:
        day = normalize(record.date).calendar_date
        if day is None:
            skipped += 1
            continue
        rows.append({"month": pd.Period(day.isoformat(), freq="M"), "kind": kind, "amount": amount_of(record) or 0.0})
    return rows, skipped


def monthly_trend(
    expenses: Iterable[ExpenseRecord],
    income: Iterable[IncomeRecord],
    now: Any,
    months: int = 6,
) -> MonthlyTrend:
    """Income and expense totals per calendar month, oldest month first.

    Covers the ``months`` months ending with the month of ``now``; months with
    no records appear with zero totals. Records whose date does not normalize
    are left out and counted in ``skipped``.
    """
    if expenses is None or income is None:
        raise TypeError("expenses and income must be collections, not None")
    today = normalize(now).calendar_date
    if today is None:
        raise ValueError(f"now must be a date or datetime, got {now!r}")

    expense_rows, skipped_expenses = _month_rows(expenses, "expense", lambda e: coerce_amount(e.amount))
    income_rows, skipped_income = _month_rows(income, "income", income_total)

    window = pd.period_range(end=pd.Period(today.isoformat(), freq="M"), periods=max(months, 1), freq="M")
    frame = pd.DataFrame(expense_rows + income_rows, columns=["month", "kind", "amount"])
    if frame.empty:
        table = pd.DataFrame(0.0, index=window, columns=["income", "expense"])
    else:
        table = (
            frame.groupby(["month", "kind"])["amount"].sum()
            .unstack("kind")
            .reindex(index=window, columns=["income", "expense"])
            .fillna(0.0)
        )

    points: List[TrendPoint] = [
        TrendPoint(
            month=str(period),
            label=period.strftime("%b"),
            income=float(row["income"]),
            expenses=float(row["expense"]),
        )
        for period, row in table.iterrows()
    ]
    return MonthlyTrend(points=points, skipped=skipped_expenses + skipped_income)
