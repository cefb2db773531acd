from typing import Any, Optional, Sequence

from config import config
from .financial.aggregator import aggregate
from .records import CropRecord, ExpenseRecord, FarmRecord, IncomeRecord, TaskRecord
from .scheduling.classifier import classify, soonest
from .scheduling.crops import active_crops
from .schemas import Dashboard, DashboardStats, Task


def _as_text(value: Any):
    if value is None or isinstance(value, str):
        return value
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


def task_view(task: TaskRecord) -> Task:
    """Response shape of a canonical task; dates are echoed as text."""
    data = task.model_dump()
    data["due_date"] = _as_text(data["due_date"])
    data["completed_at"] = _as_text(data["completed_at"])
    return Task.model_validate(data)


def build_dashboard(
    farms: Sequence[FarmRecord],
    crops: Sequence[CropRecord],
    tasks: Sequence[TaskRecord],
    expenses: Sequence[ExpenseRecord],
    income: Sequence[IncomeRecord],
    now: Any,
    upcoming_limit: Optional[int] = None,
) -> Dashboard:
    """Headline numbers and task lists for the landing page."""
    limit = config.UPCOMING_PREVIEW_LIMIT if upcoming_limit is None else upcoming_limit
    buckets = classify(tasks, now)
    summary = aggregate(expenses, income, farms, crops)

    upcoming = soonest(buckets.upcoming, limit)
    is_profitable = summary.net_profit >= 0

    stats = DashboardStats(
        farm_count=len(farms),
        active_crop_count=len(active_crops(crops)),
        crop_count=len(crops),
        tasks_due_today=len(buckets.today),
        overdue_tasks=len(buckets.overdue),
        net_profit=summary.net_profit,
        is_profitable=is_profitable,
        profit_status="Profitable" if is_profitable else "Loss",
    )
    return Dashboard(
        stats=stats,
        today_tasks=[task_view(t) for t in buckets.today],
        upcoming_tasks=[task_view(t) for t in upcoming],
        total_income=summary.total_income,
        total_expenses=summary.total_expenses,
    )
