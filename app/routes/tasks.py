from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional
from datetime import date, datetime

from ..dashboard import task_view
from ..schemas import TaskCreate, TaskUpdate, Task as TaskSchema, TaskBucketsView
from ..scheduling.classifier import BUCKETS, classify
from ..storage import FarmStore, get_store

router = APIRouter()

@router.post("/tasks", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, store: FarmStore = Depends(get_store)):
    return store.create_task(task)

@router.get("/tasks", response_model=List[TaskSchema])
def get_tasks(store: FarmStore = Depends(get_store)):
    return store.all_tasks()

@router.get("/tasks/buckets", response_model=TaskBucketsView)
def get_task_buckets(on: Optional[date] = None, store: FarmStore = Depends(get_store)):
    """Tasks split into today / overdue / upcoming / completed / invalid.

    ``on`` pins the reference day; it defaults to the server's local date.
    """
    reference = on or datetime.now().date()
    buckets = classify(store.list_tasks(), reference)
    return TaskBucketsView(
        reference_date=reference,
        counts=buckets.counts(),
        **{name: [task_view(t) for t in getattr(buckets, name)] for name in BUCKETS},
    )

@router.get("/tasks/{task_id}", response_model=TaskSchema)
def get_task(task_id: int, store: FarmStore = Depends(get_store)):
    task = store.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task

@router.patch("/tasks/{task_id}", response_model=TaskSchema)
def update_task(task_id: int, task_update: TaskUpdate, store: FarmStore = Depends(get_store)):
    task = store.update_task(task_id, task_update)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task

@router.post("/tasks/{task_id}/toggle", response_model=TaskSchema)
def toggle_task(task_id: int, store: FarmStore = Depends(get_store)):
    task = store.toggle_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task

@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, store: FarmStore = Depends(get_store)):
    if not store.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return None
