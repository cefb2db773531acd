from pydantic import BaseModel, Field as PyField, ConfigDict, computed_field, field_validator
from typing import Optional, List, Dict, Any, Union
from datetime import date, datetime
from enum import Enum

class AreaUnitEnum(str, Enum):
    acres = "acres"
    hectares = "hectares"
    square_feet = "square-feet"
    square_meters = "square-meters"

class CropStatusEnum(str, Enum):
    growing = "growing"
    flowering = "flowering"
    harvested = "harvested"
    failed = "failed"

class PriorityEnum(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

# --- Farm Schemas ---
class FarmBase(BaseModel):
    name: str = PyField(..., min_length=1)
    location: str = ""
    total_area: float = PyField(default=0, ge=0)
    unit: AreaUnitEnum = AreaUnitEnum.acres
    notes: Optional[str] = None

class FarmCreate(FarmBase):
    pass

class Farm(FarmBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# --- Crop Schemas ---
class CropBase(BaseModel):
    farm_id: int
    crop_name: str = PyField(..., min_length=1)
    variety: str = ""
    planting_date: date
    expected_harvest_date: Optional[date] = None
    area_planted: float = PyField(default=0, ge=0)
    status: CropStatusEnum = CropStatusEnum.growing
    notes: Optional[str] = None

class CropCreate(CropBase):
    pass

class Crop(BaseModel):
    # Read model: dates come back exactly as stored
    id: int
    farm_id: Optional[int] = None
    crop_name: str
    variety: Optional[str] = ""
    planting_date: Optional[str] = None
    expected_harvest_date: Optional[str] = None
    area_planted: Optional[float] = None
    status: str
    notes: Optional[str] = None
    farm_name: Optional[str] = None
    days_to_harvest: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

# --- Task Schemas ---
class TaskBase(BaseModel):
    title: str = PyField(..., min_length=1)
    description: Optional[str] = None
    farm_id: Optional[int] = None
    crop_id: Optional[int] = None
    due_date: date
    priority: PriorityEnum = PriorityEnum.medium

class TaskCreate(TaskBase):
    pass

class TaskUpdate(BaseModel):
    # Omitted fields are left alone; explicit nulls are only accepted where the column allows them
    title: Optional[str] = PyField(default=None, min_length=1)
    description: Optional[str] = None
    farm_id: Optional[int] = None
    crop_id: Optional[int] = None
    due_date: Optional[date] = None
    priority: Optional[PriorityEnum] = None
    completed: Optional[bool] = None

    @field_validator("title", "due_date", "priority", "completed", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

class Task(BaseModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    farm_id: Optional[Union[int, str]] = None
    crop_id: Optional[Union[int, str]] = None
    due_date: Optional[str] = None
    priority: Optional[str] = None
    completed: bool
    completed_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class TaskBucketsView(BaseModel):
    reference_date: date
    today: List[Task]
    overdue: List[Task]
    upcoming: List[Task]
    completed: List[Task]
    invalid: List[Task]
    counts: Dict[str, int]

# --- Expense Schemas ---
class ExpenseBase(BaseModel):
    date: date
    category: str = PyField(..., min_length=1)
    amount: float = PyField(..., ge=0)
    description: str = ""
    farm_id: Optional[int] = None

class ExpenseCreate(ExpenseBase):
    pass

class Expense(BaseModel):
    id: int
    date: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    farm_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

# --- Income Schemas ---
class IncomeBase(BaseModel):
    date: date
    crop_id: int
    quantity: float = PyField(..., ge=0)
    price_per_unit: float = PyField(..., ge=0)
    buyer: str = ""

class IncomeCreate(IncomeBase):
    # Accepted for compatibility with older clients, always recomputed
    total_amount: Optional[float] = None

class Income(BaseModel):
    id: int
    date: Optional[str] = None
    crop_id: Optional[int] = None
    quantity: Optional[float] = None
    price_per_unit: Optional[float] = None
    buyer: Optional[str] = None
    total_amount: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)

# --- Financial Summary Schemas ---
class AggregateAnomalies(BaseModel):
    non_numeric_amounts: int = 0
    non_numeric_income: int = 0
    expense_ids: List[Optional[int]] = []
    income_ids: List[Optional[int]] = []

    @computed_field
    @property
    def count(self) -> int:
        return self.non_numeric_amounts + self.non_numeric_income

class FarmBreakdown(BaseModel):
    key: str  # farm id as text, or "general"
    farm_id: Optional[Union[int, str]] = None
    name: str
    total: float = 0.0
    count: int = 0

class CropBreakdown(BaseModel):
    crop_id: Optional[Union[int, str]] = None
    name: str
    total: float = 0.0
    count: int = 0

class CategoryBreakdown(BaseModel):
    category: str
    total: float = 0.0
    count: int = 0

class FinancialSummary(BaseModel):
    total_income: float
    total_expenses: float
    net_profit: float
    profit_margin: float
    by_farm: List[FarmBreakdown]
    by_crop: List[CropBreakdown]
    by_category: List[CategoryBreakdown]
    anomalies: AggregateAnomalies

class TrendPoint(BaseModel):
    month: str  # YYYY-MM
    label: str  # Jan, Feb, ...
    income: float
    expenses: float

class MonthlyTrend(BaseModel):
    points: List[TrendPoint]
    skipped: int = 0

# --- Dashboard Schemas ---
class DashboardStats(BaseModel):
    farm_count: int
    active_crop_count: int
    crop_count: int
    tasks_due_today: int
    overdue_tasks: int
    net_profit: float
    is_profitable: bool
    profit_status: str

class Dashboard(BaseModel):
    stats: DashboardStats
    today_tasks: List[Task]
    upcoming_tasks: List[Task]
    total_income: float
    total_expenses: float

# --- Weather Schemas ---
class WeatherDay(BaseModel):
    date: str
    weather_code: Optional[int] = None
    temperature_2m_max: Optional[float] = None
    temperature_2m_min: Optional[float] = None
    precipitation_sum: Optional[float] = None
    relative_humidity_2m_mean: Optional[float] = None
    wind_speed_10m_max: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)

class WeatherForecastResponse(BaseModel):
    latitude: float
    longitude: float
    days: List[WeatherDay]
    retrieved_at: datetime
    is_offline_data: bool = False

class WeatherCurrentResponse(WeatherDay):
    current: bool = True
    is_offline_data: bool = False
