"""
Board view helpers: overdue checks, ordering, grouping, filtering and
dashboard counters.

Everything here is a pure function over already-fetched tasks. Nothing is
cached: "overdue" depends on the current time, so callers re-evaluate on
every request.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Union

from app.schemas.task import (
    Task,
    TaskCreate,
    TaskFilter,
    TaskPriority,
    TaskStats,
    TaskStatus,
)
from app.utils.time import parse_instant, utc_now

PRIORITY_RANK: Dict[TaskPriority, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    """True when the task has a valid deadline in the past and is not Done."""
    if task.status == TaskStatus.DONE:
        return False
    deadline = parse_instant(task.deadline)
    if deadline is None:
        return False
    return deadline < (now or utc_now())


def sort_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[Task]:
    """
    Return a new list ordered for display.

    Overdue tasks come first; within the same overdue state higher priority
    wins. The sort is stable, so ties keep their input order. The input is
    left untouched.
    """
    now = now or utc_now()
    return sorted(
        tasks,
        key=lambda task: (not is_overdue(task, now), -PRIORITY_RANK.get(task.priority, 0)),
    )


def group_by_status(tasks: Iterable[Task], now: Optional[datetime] = None) -> Dict[TaskStatus, List[Task]]:
    """Split tasks into the three board columns, each sorted."""
    now = now or utc_now()
    columns: Dict[TaskStatus, List[Task]] = {status: [] for status in TaskStatus}
    for task in tasks:
        columns[task.status].append(task)
    return {status: sort_tasks(column, now) for status, column in columns.items()}


def filter_tasks(tasks: Iterable[Task], criteria: Optional[TaskFilter] = None) -> List[Task]:
    """Keep tasks matching every criterion that is set."""
    tasks = list(tasks)
    if criteria is None or criteria.is_empty():
        return tasks

    def matches(task: Task) -> bool:
        if criteria.tag is not None and criteria.tag not in task.tags:
            return False
        if criteria.status is not None and task.status != criteria.status:
            return False
        if criteria.priority is not None and task.priority != criteria.priority:
            return False
        if criteria.assigned_to is not None and task.assigned_to != criteria.assigned_to:
            return False
        return True

    return [task for task in tasks if matches(task)]


def completion_message(rate: int) -> str:
    if rate < 30:
        return "Just getting started. Keep going!"
    if rate < 70:
        return "Making good progress!"
    return "Almost there! Great job!"


def compute_task_stats(
    tasks: Iterable[Task],
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TaskStats:
    """Dashboard counters over the full task list."""
    now = now or utc_now()
    tasks = list(tasks)
    total = len(tasks)
    done = sum(1 for task in tasks if task.status == TaskStatus.DONE)
    # Half-up rounding, so 12.5% shows as 13%
    rate = int(done * 100 / total + 0.5) if total else 0

    return TaskStats(
        total=total,
        todo=sum(1 for task in tasks if task.status == TaskStatus.TODO),
        in_progress=sum(1 for task in tasks if task.status == TaskStatus.IN_PROGRESS),
        done=done,
        high_priority=sum(1 for task in tasks if task.priority == TaskPriority.HIGH),
        overdue=sum(1 for task in tasks if is_overdue(task, now)),
        assigned_to_me=sum(1 for task in tasks if user_id and task.assigned_to == user_id),
        completion_rate=rate,
        completion_message=completion_message(rate),
    )


def validate_task_form(data: Union[TaskCreate, dict]) -> Dict[str, str]:
    """
    Check a create/update payload before it reaches the store.

    Returns a mapping of field name to message; empty when valid.
    """
    if isinstance(data, dict):
        title = data.get("title")
        priority = data.get("priority")
    else:
        title = data.title
        priority = data.priority

    errors: Dict[str, str] = {}
    if not title or not str(title).strip():
        errors["title"] = "Title is required"
    if not priority:
        errors["priority"] = "Priority is required"
    return errors
