"""Tests for the dashboard summary."""

from datetime import date

from app.dashboard import build_dashboard, task_view
from app.records import CropRecord, ExpenseRecord, FarmRecord, IncomeRecord, TaskRecord

NOW = date(2024, 6, 15)


def _task(id, due_date, completed=False):
    return TaskRecord(id=id, title=f"Task {id}", due_date=due_date, completed=completed)


def test_dashboard_stats_and_lists():
    tasks = [
        _task(1, "2024-06-15"),
        _task(2, "2024-06-01"),
        _task(3, "2024-07-30"),
        _task(4, "2024-06-20"),
        _task(5, "2024-06-18"),
        _task(6, "2024-06-25"),
        _task(7, "bad"),
        _task(8, "2024-06-15", completed=True),
    ]
    dashboard = build_dashboard(
        farms=[FarmRecord(id=1, name="A"), FarmRecord(id=2, name="B")],
        crops=[
            CropRecord(id=1, farm_id=1, crop_name="Corn", status="growing"),
            CropRecord(id=2, farm_id=1, crop_name="Wheat", status="harvested"),
        ],
        tasks=tasks,
        expenses=[ExpenseRecord(id=1, amount=300)],
        income=[IncomeRecord(id=1, quantity=10, price_per_unit=20)],
        now=NOW,
    )

    assert dashboard.stats.farm_count == 2
    assert dashboard.stats.active_crop_count == 1
    assert dashboard.stats.crop_count == 2
    assert dashboard.stats.tasks_due_today == 1
    assert dashboard.stats.overdue_tasks == 1
    assert dashboard.stats.net_profit == -100
    assert dashboard.stats.profit_status == "Loss"
    assert [t.id for t in dashboard.today_tasks] == [1]
    assert [t.id for t in dashboard.upcoming_tasks] == [5, 4, 6]


def test_dashboard_upcoming_limit():
    tasks = [_task(1, "2024-06-20"), _task(2, "2024-06-19")]
    dashboard = build_dashboard([], [], tasks, [], [], NOW, upcoming_limit=1)
    assert [t.id for t in dashboard.upcoming_tasks] == [2]
    assert dashboard.stats.profit_status == "Profitable"


def test_task_view_renders_native_dates_as_text():
    view = task_view(TaskRecord(id=1, title="x", due_date=date(2024, 6, 15)))
    assert view.due_date == "2024-06-15"
