import csv
import io
from datetime import datetime
from typing import Any, Iterable, List, Optional

from config import config
from ..records import CropRecord, ExpenseRecord, FarmRecord, IncomeRecord
from ..temporal.normalizer import format_date
from .aggregator import coerce_amount, income_total

HEADERS = ["Type", "Date", "Category", "Description", "Amount", "Farm", "Crop"]
INCOME_CATEGORY = "Harvest"


def format_number(value: Any) -> str:
    """Render a number the way a spreadsheet user expects: ``200`` not ``200.0``."""
    number = coerce_amount(value)
    if number is None:
        return "0"
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _expense_row(expense: ExpenseRecord, farm_names: dict) -> List[str]:
    return [
        "Expense",
        format_date(expense.date),
        _text(expense.category),
        _text(expense.description),
        format_number(expense.amount),
        farm_names.get(expense.farm_id, "") if expense.farm_id is not None else "",
        "",
    ]


def _income_row(record: IncomeRecord, farm_names: dict, crop_index: dict) -> List[str]:
    crop: Optional[CropRecord] = crop_index.get(record.crop_id)
    farm_id = record.farm_id if record.farm_id is not None else (crop.farm_id if crop else None)
    return [
        "Income",
        format_date(record.date),
        INCOME_CATEGORY,
        f"{format_number(record.quantity)} units @ ${format_number(record.price_per_unit)}/unit",
        format_number(income_total(record)),
        farm_names.get(farm_id, "") if farm_id is not None else "",
        (crop.crop_name or "") if crop else "",
    ]


def serialize(
    expenses: Iterable[ExpenseRecord],
    income: Iterable[IncomeRecord],
    farms: Optional[Iterable[FarmRecord]] = None,
    crops: Optional[Iterable[CropRecord]] = None,
) -> str:
    """Flatten expenses and income into one CSV document.

    Expenses come first, then income, each in input order. The header line
    is written bare; every data field is quoted with embedded quotes doubled.
    Lines are separated by ``\\n`` with no trailing newline.
    """
    if expenses is None or income is None:
        raise TypeError("expenses and income must be collections, not None")

    farm_names = {farm.id: farm.name for farm in (farms or [])}
    crop_index = {crop.id: crop for crop in (crops or [])}

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for expense in expenses:
        writer.writerow(_expense_row(expense, farm_names))
    for record in income:
        writer.writerow(_income_row(record, farm_names, crop_index))

    body = output.getvalue()
    if not body:
        return ",".join(HEADERS)
    return ",".join(HEADERS) + "\n" + body[:-1]


def export_filename(now: datetime) -> str:
    return f"{config.EXPORT_FILENAME_PREFIX}-{now.strftime('%Y-%m-%d-%H%M%S')}.csv"
