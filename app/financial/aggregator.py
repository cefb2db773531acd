import logging
import math
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from ..records import CropRecord, ExpenseRecord, FarmRecord, IncomeRecord
from ..scheduling.crops import crop_label
from ..schemas import (
    AggregateAnomalies,
    CategoryBreakdown,
    CropBreakdown,
    FarmBreakdown,
    FinancialSummary,
)

logger = logging.getLogger(__name__)

GENERAL_KEY = "general"
GENERAL_LABEL = "General"
UNKNOWN_FARM = "Unknown Farm"
UNCATEGORIZED = "Uncategorized"


def coerce_amount(value: Any) -> Optional[float]:
    """Numeric value of a money/quantity field, or ``None`` if it has none.

    Accepts ints, floats, Decimals and numeric strings. Booleans, NaN,
    infinities and negative numbers are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number) or number < 0:
        return None
    return number


def _product(quantity: Any, price_per_unit: Any) -> Optional[float]:
    qty = coerce_amount(quantity)
    price = coerce_amount(price_per_unit)
    if qty is None or price is None:
        return None
    return qty * price


def compute_income_total(quantity: Any, price_per_unit: Any) -> float:
    """Derived income total. The only place ``total_amount`` comes from."""
    return _product(quantity, price_per_unit) or 0.0


def income_total(record: IncomeRecord) -> Optional[float]:
    """Recomputed total of one income record, ``None`` if it cannot be computed."""
    return _product(record.quantity, record.price_per_unit)


def aggregate(
    expenses: Iterable[ExpenseRecord],
    income: Iterable[IncomeRecord],
    farms: Optional[Iterable[FarmRecord]] = None,
    crops: Optional[Iterable[CropRecord]] = None,
) -> FinancialSummary:
    """
    Totals and breakdowns for one snapshot of expenses and income.

    Net Profit = Total Income - Total Expenses

    Income totals are always recomputed as quantity * price_per_unit.
    Values that fail numeric coercion count as zero and are reported in
    ``anomalies``. Each collection is walked once, in input order, so the
    floating-point totals are reproducible.
    """
    if expenses is None or income is None:
        raise TypeError("expenses and income must be collections, not None")

    farm_names = {farm.id: farm.name for farm in (farms or [])}
    crop_index = {crop.id: crop for crop in (crops or [])}
    anomalies = AggregateAnomalies()

    total_expenses = 0.0
    by_farm: Dict[Any, FarmBreakdown] = {}
    by_category: Dict[str, CategoryBreakdown] = {}

    for expense in expenses:
        amount = coerce_amount(expense.amount)
        if amount is None:
            anomalies.non_numeric_amounts += 1
            anomalies.expense_ids.append(expense.id)
            amount = 0.0
        total_expenses += amount

        if expense.farm_id is None:
            key, name = GENERAL_KEY, GENERAL_LABEL
        else:
            key, name = str(expense.farm_id), farm_names.get(expense.farm_id, UNKNOWN_FARM)
        farm_entry = by_farm.get(key)
        if farm_entry is None:
            farm_entry = by_farm[key] = FarmBreakdown(key=key, farm_id=expense.farm_id, name=name)
        farm_entry.total += amount
        farm_entry.count += 1

        category = expense.category or UNCATEGORIZED
        category_entry = by_category.get(category)
        if category_entry is None:
            category_entry = by_category[category] = CategoryBreakdown(category=category)
        category_entry.total += amount
        category_entry.count += 1

    total_income = 0.0
    by_crop: Dict[Any, CropBreakdown] = {}

    for record in income:
        amount = income_total(record)
        if amount is None:
            anomalies.non_numeric_income += 1
            anomalies.income_ids.append(record.id)
            amount = 0.0
        total_income += amount

        crop_entry = by_crop.get(record.crop_id)
        if crop_entry is None:
            crop_entry = by_crop[record.crop_id] = CropBreakdown(
                crop_id=record.crop_id,
                name=crop_label(crop_index.get(record.crop_id)),
            )
        crop_entry.total += amount
        crop_entry.count += 1

    if anomalies.count:
        logger.warning(
            "Aggregated with %d non-numeric expense amount(s) and %d income record(s) "
            "with non-numeric quantity/price; they were counted as 0",
            anomalies.non_numeric_amounts, anomalies.non_numeric_income,
        )

    net_profit = total_income - total_expenses

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=net_profit,
        profit_margin=(net_profit / total_income * 100) if total_income > 0 else 0,
        by_farm=list(by_farm.values()),
        by_crop=list(by_crop.values()),
        by_category=list(by_category.values()),
        anomalies=anomalies,
    )
