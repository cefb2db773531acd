from fastapi import APIRouter, Depends
from typing import Optional
from datetime import date, datetime

from ..dashboard import build_dashboard
from ..schemas import Dashboard
from ..storage import FarmStore, get_store

router = APIRouter()

@router.get("/dashboard", response_model=Dashboard)
def get_dashboard(on: Optional[date] = None, store: FarmStore = Depends(get_store)):
    return build_dashboard(
        farms=store.list_farms(),
        crops=store.list_crops(),
        tasks=store.list_tasks(),
        expenses=store.list_expenses(),
        income=store.list_income(),
        now=on or datetime.now(),
    )
