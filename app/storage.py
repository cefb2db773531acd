"""Persistence collaborator and the adapter into canonical records.

Rows from the database (or plain dicts imported from older exports, which
use camelCase keys such as ``Id``, ``dueDate`` or ``pricePerUnit``) are turned
into the records in :mod:`app.records` here and nowhere else.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from fastapi import Depends
from sqlalchemy.orm import Session

from . import models
from .database import get_db
from .financial.aggregator import compute_income_total
from .records import CropRecord, ExpenseRecord, FarmRecord, IncomeRecord, TaskRecord
from .schemas import CropCreate, ExpenseCreate, FarmCreate, IncomeCreate, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

# legacy key -> canonical field
_ALIASES = {
    "Id": "id",
    "farmId": "farm_id",
    "cropId": "crop_id",
    "totalArea": "total_area",
    "createdAt": "created_at",
    "cropName": "crop_name",
    "plantingDate": "planting_date",
    "expectedHarvestDate": "expected_harvest_date",
    "areaPlanted": "area_planted",
    "dueDate": "due_date",
    "completedAt": "completed_at",
    "pricePerUnit": "price_per_unit",
    "totalAmount": "total_amount",
}

_REFERENCE_FIELDS = ("farm_id", "crop_id")

_TRUE_TEXT = {"true", "1", "yes", "y", "t"}
_FALSE_TEXT = {"false", "0", "no", "n", "f", ""}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _coerce_id(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    number = _as_int(value)
    if number is None:
        logger.warning("Dropping non-integer record id %r", value)
    return number


def _coerce_reference(value: Any) -> Union[int, str, None]:
    """Integer id, or the raw text of a reference that can never resolve."""
    if value is None or value == "":
        return None
    number = _as_int(value)
    if number is None:
        logger.warning("Reference %r is not an integer id; it will resolve as unknown", value)
        return str(value)
    return number


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text not in _FALSE_TEXT:
            logger.warning("Unrecognised completion flag %r; treating the task as open", value)
        return False
    return bool(value)


def _canonical_fields(row: Any, names) -> Dict[str, Any]:
    if isinstance(row, Mapping):
        data = {_ALIASES.get(key, key): value for key, value in row.items()}
    else:
        data = {name: getattr(row, name) for name in names if hasattr(row, name)}
    data = {key: value for key, value in data.items() if key in names}
    if "id" in data:
        data["id"] = _coerce_id(data["id"])
    for key in _REFERENCE_FIELDS:
        if key in data:
            data[key] = _coerce_reference(data[key])
    return data


def to_farm_record(row: Any) -> FarmRecord:
    return FarmRecord(**_canonical_fields(row, FarmRecord.model_fields))


def to_crop_record(row: Any) -> CropRecord:
    if isinstance(row, Mapping) and "crop_name" not in row and "cropName" not in row and "name" in row:
        # some callers store the crop name as plain "name"
        row = {**row, "crop_name": row["name"]}
    return CropRecord(**_canonical_fields(row, CropRecord.model_fields))


def to_task_record(row: Any) -> TaskRecord:
    data = _canonical_fields(row, TaskRecord.model_fields)
    data["completed"] = _coerce_flag(data.get("completed"))
    return TaskRecord(**data)


def to_expense_record(row: Any) -> ExpenseRecord:
    return ExpenseRecord(**_canonical_fields(row, ExpenseRecord.model_fields))


def to_income_record(row: Any) -> IncomeRecord:
    return IncomeRecord(**_canonical_fields(row, IncomeRecord.model_fields))


class FarmStore:
    """CRUD over every entity plus ``list_*`` snapshots in canonical form."""

    def __init__(self, db: Session):
        self.db = db

    # --- snapshots for the derived-state engine ---
    def list_farms(self) -> List[FarmRecord]:
        return [to_farm_record(r) for r in self.db.query(models.Farm).order_by(models.Farm.id)]

    def list_crops(self) -> List[CropRecord]:
        return [to_crop_record(r) for r in self.db.query(models.Crop).order_by(models.Crop.id)]

    def list_tasks(self) -> List[TaskRecord]:
        return [to_task_record(r) for r in self.db.query(models.Task).order_by(models.Task.id)]

    def list_expenses(self) -> List[ExpenseRecord]:
        return [to_expense_record(r) for r in self.db.query(models.Expense).order_by(models.Expense.id)]

    def list_income(self) -> List[IncomeRecord]:
        return [to_income_record(r) for r in self.db.query(models.Income).order_by(models.Income.id)]

    # --- generic helpers ---
    def _get(self, model, record_id: int):
        return self.db.query(model).filter(model.id == record_id).first()

    def _save(self, row):
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def _apply(self, row, values: Dict[str, Any]):
        for key, value in values.items():
            setattr(row, key, value)
        return self._save(row)

    def _delete(self, model, record_id: int) -> bool:
        row = self._get(model, record_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    # --- farms ---
    def get_farm(self, farm_id: int) -> Optional[models.Farm]:
        return self._get(models.Farm, farm_id)

    def all_farms(self) -> List[models.Farm]:
        return self.db.query(models.Farm).order_by(models.Farm.id).all()

    def create_farm(self, data: FarmCreate) -> models.Farm:
        return self._save(models.Farm(**data.model_dump(mode="json")))

    def update_farm(self, farm_id: int, data: FarmCreate) -> Optional[models.Farm]:
        row = self.get_farm(farm_id)
        return self._apply(row, data.model_dump(mode="json")) if row else None

    def delete_farm(self, farm_id: int) -> bool:
        # crops, tasks and finances keep their farm_id and render as unknown
        return self._delete(models.Farm, farm_id)

    # --- crops ---
    def get_crop(self, crop_id: int) -> Optional[models.Crop]:
        return self._get(models.Crop, crop_id)

    def query_crops(self, farm_id: Optional[int] = None, status: Optional[str] = None) -> List[models.Crop]:
        query = self.db.query(models.Crop)
        if farm_id is not None:
            query = query.filter(models.Crop.farm_id == farm_id)
        if status:
            query = query.filter(models.Crop.status == status)
        return query.order_by(models.Crop.id).all()

    def create_crop(self, data: CropCreate) -> models.Crop:
        return self._save(models.Crop(**data.model_dump(mode="json")))

    def update_crop(self, crop_id: int, data: CropCreate) -> Optional[models.Crop]:
        row = self.get_crop(crop_id)
        return self._apply(row, data.model_dump(mode="json")) if row else None

    def delete_crop(self, crop_id: int) -> bool:
        return self._delete(models.Crop, crop_id)

    # --- tasks ---
    def get_task(self, task_id: int) -> Optional[models.Task]:
        return self._get(models.Task, task_id)

    def all_tasks(self) -> List[models.Task]:
        return self.db.query(models.Task).order_by(models.Task.id).all()

    def create_task(self, data: TaskCreate) -> models.Task:
        # New tasks always start open
        return self._save(models.Task(**data.model_dump(mode="json"), completed=False, completed_at=None))

    def update_task(self, task_id: int, data: TaskUpdate) -> Optional[models.Task]:
        row = self.get_task(task_id)
        if row is None:
            return None
        # Only touch the fields the caller actually sent
        values = data.model_dump(mode="json", exclude_unset=True)
        if "completed" in values:
            completed = bool(values["completed"])
            values["completed"] = completed
            if completed and not row.completed:
                values["completed_at"] = datetime.utcnow().isoformat()
            elif not completed:
                values["completed_at"] = None
        return self._apply(row, values)

    def toggle_task(self, task_id: int) -> Optional[models.Task]:
        row = self.get_task(task_id)
        if row is None:
            return None
        completed = not row.completed
        return self._apply(row, {
            "completed": completed,
            "completed_at": datetime.utcnow().isoformat() if completed else None,
        })

    def delete_task(self, task_id: int) -> bool:
        return self._delete(models.Task, task_id)

    # --- expenses ---
    def get_expense(self, expense_id: int) -> Optional[models.Expense]:
        return self._get(models.Expense, expense_id)

    def all_expenses(self) -> List[models.Expense]:
        return self.db.query(models.Expense).order_by(models.Expense.id).all()

    def create_expense(self, data: ExpenseCreate) -> models.Expense:
        return self._save(models.Expense(**data.model_dump(mode="json")))

    def update_expense(self, expense_id: int, data: ExpenseCreate) -> Optional[models.Expense]:
        row = self.get_expense(expense_id)
        return self._apply(row, data.model_dump(mode="json")) if row else None

    def delete_expense(self, expense_id: int) -> bool:
        return self._delete(models.Expense, expense_id)

    # --- income ---
    def get_income(self, income_id: int) -> Optional[models.Income]:
        return self._get(models.Income, income_id)

    def all_income(self) -> List[models.Income]:
        return self.db.query(models.Income).order_by(models.Income.id).all()

    def _income_values(self, data: IncomeCreate) -> Dict[str, Any]:
        values = data.model_dump(mode="json", exclude={"total_amount"})
        values["total_amount"] = compute_income_total(values["quantity"], values["price_per_unit"])
        return values

    def create_income(self, data: IncomeCreate) -> models.Income:
        return self._save(models.Income(**self._income_values(data)))

    def update_income(self, income_id: int, data: IncomeCreate) -> Optional[models.Income]:
        row = self.get_income(income_id)
        return self._apply(row, self._income_values(data)) if row else None

    def delete_income(self, income_id: int) -> bool:
        return self._delete(models.Income, income_id)


def get_store(db: Session = Depends(get_db)) -> FarmStore:
    """FastAPI dependency: a store bound to the request's session"""
    return FarmStore(db)
