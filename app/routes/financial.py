from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from typing import List, Optional
from datetime import date, datetime

from ..schemas import (
    ExpenseCreate, Expense as ExpenseSchema,
    IncomeCreate, Income as IncomeSchema,
    FinancialSummary, MonthlyTrend,
)
from ..financial.aggregator import aggregate
from ..financial.export import export_filename, serialize
from ..financial.trend import monthly_trend
from ..storage import FarmStore, get_store

router = APIRouter()

# --- EXPENSES ---

@router.post("/expenses", response_model=ExpenseSchema, status_code=status.HTTP_201_CREATED)
def create_expense(expense: ExpenseCreate, store: FarmStore = Depends(get_store)):
    return store.create_expense(expense)

@router.get("/expenses", response_model=List[ExpenseSchema])
def get_expenses(store: FarmStore = Depends(get_store)):
    return store.all_expenses()

@router.put("/expenses/{expense_id}", response_model=ExpenseSchema)
def update_expense(expense_id: int, updated_data: ExpenseCreate, store: FarmStore = Depends(get_store)):
    expense = store.update_expense(expense_id, updated_data)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense

@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: int, store: FarmStore = Depends(get_store)):
    if not store.delete_expense(expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    return None

# --- INCOME ---

@router.post("/income", response_model=IncomeSchema, status_code=status.HTTP_201_CREATED)
def create_income(income: IncomeCreate, store: FarmStore = Depends(get_store)):
    # total_amount from the client is ignored; the store recomputes it
    return store.create_income(income)

@router.get("/income", response_model=List[IncomeSchema])
def get_income(store: FarmStore = Depends(get_store)):
    return store.all_income()

@router.put("/income/{income_id}", response_model=IncomeSchema)
def update_income(income_id: int, updated_data: IncomeCreate, store: FarmStore = Depends(get_store)):
    income = store.update_income(income_id, updated_data)
    if not income:
        raise HTTPException(status_code=404, detail="Income record not found")
    return income

@router.delete("/income/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_income(income_id: int, store: FarmStore = Depends(get_store)):
    if not store.delete_income(income_id):
        raise HTTPException(status_code=404, detail="Income record not found")
    return None

# --- DERIVED VIEWS ---

@router.get("/financial/summary", response_model=FinancialSummary)
def get_financial_summary(store: FarmStore = Depends(get_store)):
    return aggregate(store.list_expenses(), store.list_income(), store.list_farms(), store.list_crops())

@router.get("/financial/trend", response_model=MonthlyTrend)
def get_financial_trend(
    months: int = Query(default=6, ge=1, le=24),
    on: Optional[date] = None,
    store: FarmStore = Depends(get_store)
):
    return monthly_trend(store.list_expenses(), store.list_income(), on or datetime.now(), months)

@router.get("/financial/export")
def export_financial_csv(store: FarmStore = Depends(get_store)):
    payload = serialize(store.list_expenses(), store.list_income(), store.list_farms(), store.list_crops())
    filename = export_filename(datetime.now())
    return Response(
        content=payload.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
