from app.database import Base
from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, Text
from datetime import datetime
import enum


class AreaUnit(str, enum.Enum):
    ACRES = "acres"
    HECTARES = "hectares"
    SQUARE_FEET = "square-feet"
    SQUARE_METERS = "square-meters"

class CropStatus(str, enum.Enum):
    GROWING = "growing"
    FLOWERING = "flowering"
    HARVESTED = "harvested"
    FAILED = "failed"

class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Date columns are stored as text on purpose: rows written by older clients
# may hold any representation, and only the temporal normalizer interprets them.
# farm_id / crop_id columns are plain integers, not foreign keys, so deleting
# a farm or crop leaves the records that mention it untouched.

class Farm(Base):
    __tablename__ = "farms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, default="")
    total_area = Column(Float, default=0)
    unit = Column(String, default=AreaUnit.ACRES.value)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

class Crop(Base):
    __tablename__ = "crops"

    id = Column(Integer, primary_key=True, index=True)
    farm_id = Column(Integer, index=True)
    crop_name = Column(String, nullable=False)
    variety = Column(String, default="")
    planting_date = Column(String)
    expected_harvest_date = Column(String)
    area_planted = Column(Float, default=0)
    status = Column(String, default=CropStatus.GROWING.value)
    notes = Column(Text)

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    farm_id = Column(Integer, index=True, nullable=True)
    crop_id = Column(Integer, index=True, nullable=True)
    due_date = Column(String)
    priority = Column(String, default=TaskPriority.MEDIUM.value)
    completed = Column(Boolean, default=False)
    completed_at = Column(String, nullable=True)

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String)
    category = Column(String)  # Seeds, Fertilizer, Labor, etc.
    amount = Column(Float)
    description = Column(Text)
    farm_id = Column(Integer, index=True, nullable=True)

class Income(Base):
    __tablename__ = "income"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String)
    crop_id = Column(Integer, index=True)
    quantity = Column(Float)
    price_per_unit = Column(Float)
    buyer = Column(String)
    total_amount = Column(Float)  # always quantity * price_per_unit
    farm_id = Column(Integer, nullable=True)

class WeatherRecord(Base):
    __tablename__ = "weather_records"

    id = Column(Integer, primary_key=True, index=True)
    location_lat = Column(Float, nullable=False)
    location_lon = Column(Float, nullable=False)
    date = Column(String, nullable=False)
    weather_code = Column(Integer)
    temperature_2m_max = Column(Float)
    temperature_2m_min = Column(Float)
    precipitation_sum = Column(Float)
    relative_humidity_2m_mean = Column(Float)
    wind_speed_10m_max = Column(Float)
    retrieved_at = Column(DateTime, default=datetime.utcnow)
