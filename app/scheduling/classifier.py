from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..records import TaskRecord
from ..temporal.normalizer import normalize

BUCKETS = ("today", "overdue", "upcoming", "completed", "invalid")


@dataclass
class TaskBuckets:
    """Mutually exclusive views over one task snapshot."""
    today: List[TaskRecord] = field(default_factory=list)
    overdue: List[TaskRecord] = field(default_factory=list)
    upcoming: List[TaskRecord] = field(default_factory=list)
    completed: List[TaskRecord] = field(default_factory=list)
    invalid: List[TaskRecord] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in BUCKETS}

    @property
    def total(self) -> int:
        return sum(self.counts().values())


def _reference_date(now: Any) -> date:
    verdict = normalize(now)
    if not verdict.valid:
        raise ValueError(f"now must be a date or datetime, got {now!r}")
    return verdict.calendar_date


def bucket_for(task: TaskRecord, today: date) -> str:
    """Name of the bucket ``task`` belongs to relative to ``today``."""
    if task.completed:
        return "completed"

    due = normalize(task.due_date).calendar_date
    if due is None:
        return "invalid"
    if due == today:
        return "today"
    return "overdue" if due < today else "upcoming"


def classify(
    tasks: Iterable[TaskRecord],
    now: Any,
    key: Optional[Callable[[TaskRecord], Any]] = None,
) -> TaskBuckets:
    """Partition ``tasks`` into today / overdue / upcoming / completed / invalid.

    Comparison is by calendar date only, so a task due at 23:59 today is still
    ``today``. Completion wins over any due date. Tasks whose due date does not
    normalize land in ``invalid`` rather than being dropped.

    Within a bucket the input order is kept unless ``key`` is given, in which
    case each bucket is sorted by it (stable).
    """
    if tasks is None:
        raise TypeError("tasks must be a collection, not None")

    today = _reference_date(now)
    buckets = TaskBuckets()
    for task in tasks:
        getattr(buckets, bucket_for(task, today)).append(task)

    if key is not None:
        for name in BUCKETS:
            getattr(buckets, name).sort(key=key)
    return buckets


def due_date_key(task: TaskRecord):
    """Sort key by ascending due date; undated tasks sort last."""
    verdict = normalize(task.due_date)
    if not verdict.valid:
        return (1, date.max)
    return (0, verdict.calendar_date)


def soonest(tasks: Iterable[TaskRecord], limit: int) -> List[TaskRecord]:
    """First ``limit`` tasks by due date; ties keep input order."""
    return sorted(tasks, key=due_date_key)[:max(limit, 0)]


def upcoming_preview(tasks: Iterable[TaskRecord], now: Any, limit: int = 3) -> List[TaskRecord]:
    """The next ``limit`` upcoming tasks, earliest due date first.

    Sorting happens before truncation so the preview is always the soonest
    tasks rather than whichever happened to be stored first.
    """
    return soonest(classify(tasks, now).upcoming, limit)
