"""Canonical record shapes consumed by the derived-state engine.

Date and numeric fields are deliberately loose (``Any``): whatever the store
returned is carried through untouched so that the temporal normalizer and the
aggregator can classify bad values instead of failing at construction time.
Text fields accept any scalar and keep its string form. Farm and crop
references are integer ids, or the raw text of a reference that is not an
id, which never resolves and so reads as unknown downstream.
"""

from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


Text = Annotated[Optional[str], BeforeValidator(_as_text)]
Reference = Optional[Union[int, str]]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class FarmRecord(_Record):
    id: Optional[int] = None
    name: Text = ""
    location: Text = ""
    total_area: Any = 0
    unit: Text = "acres"
    notes: Text = None
    created_at: Any = None


class CropRecord(_Record):
    id: Optional[int] = None
    farm_id: Reference = None
    crop_name: Text = ""
    variety: Text = ""
    planting_date: Any = None
    expected_harvest_date: Any = None
    area_planted: Any = 0
    status: Text = "growing"
    notes: Text = None


class TaskRecord(_Record):
    id: Optional[int] = None
    title: Text = ""
    description: Text = None
    farm_id: Reference = None
    crop_id: Reference = None
    due_date: Any = None
    priority: Text = "medium"
    completed: bool = False
    completed_at: Any = None


class ExpenseRecord(_Record):
    id: Optional[int] = None
    date: Any = None
    category: Text = None
    amount: Any = None
    description: Text = None
    farm_id: Reference = None


class IncomeRecord(_Record):
    id: Optional[int] = None
    date: Any = None
    crop_id: Reference = None
    quantity: Any = None
    price_per_unit: Any = None
    buyer: Text = None
    # Stored value only; never trusted by the aggregator or the exporter
    total_amount: Any = None
    farm_id: Reference = None
