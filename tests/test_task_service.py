"""Task service tests: per-operation errors and re-read after write."""

import asyncio

import pytest

from app.errors import TaskOperationError
from app.repositories.task_repository import TaskRepository
from app.schemas.task import TaskCreate, TaskFilter, TaskStatus, TaskUpdate
from app.services.task_service import TaskService
from tests.conftest import TEST_USER_ID

pytestmark = pytest.mark.unit


def make_service(store):
    return TaskService(TaskRepository(store))


def column_ids(board, status):
    return [task.id for task in board.columns[status]]


def test_board_groups_filters_and_sorts(store):
    board = asyncio.run(make_service(store).board(TEST_USER_ID))

    assert column_ids(board, TaskStatus.TODO) == ["1", "3"]
    assert column_ids(board, TaskStatus.IN_PROGRESS) == []
    assert column_ids(board, TaskStatus.DONE) == ["2"]
    assert [user.name for user in board.users] == ["Ada", "Grace"]
    assert board.tags == ["backend", "ui"]
    assert board.errors == {}


def test_board_with_filter(store):
    board = asyncio.run(make_service(store).board(TEST_USER_ID, TaskFilter(tag="ui")))
    assert column_ids(board, TaskStatus.TODO) == ["3"]
    assert column_ids(board, TaskStatus.DONE) == []


def test_board_reports_partial_failures(store):
    store.fail("users", "select")
    board = asyncio.run(make_service(store).board(TEST_USER_ID))

    assert board.users == []
    assert "users" in board.errors
    assert column_ids(board, TaskStatus.TODO) == ["1", "3"]


def test_create_refetches_afterwards(store):
    service = make_service(store)
    result = asyncio.run(service.create_task(TaskCreate(title="New", priority="High"), TEST_USER_ID))

    assert result.created[0].assigned_to == TEST_USER_ID
    todo = result.board.columns[TaskStatus.TODO]
    assert result.created[0].id in [task.id for task in todo]
    assert result.board.users and result.board.tags
    assert store.calls[0] == ("tasks", "insert")
    assert ("tasks", "select") in store.calls[1:]
    assert len(service.loader.state.tasks) == 4


def test_status_change_returns_fresh_board(store):
    board = asyncio.run(make_service(store).update_task_status("3", TaskStatus.IN_PROGRESS))
    assert column_ids(board, TaskStatus.IN_PROGRESS) == ["3"]
    assert column_ids(board, TaskStatus.TODO) == ["1"]


def test_update_returns_fresh_board(store):
    data = TaskUpdate(title="Polish header and footer", priority="High", tags=["ui"])
    board = asyncio.run(make_service(store).update_task("3", data))

    todo = board.columns[TaskStatus.TODO]
    assert [task.title for task in todo if task.id == "3"] == ["Polish header and footer"]


def test_delete_returns_fresh_board(store):
    board = asyncio.run(make_service(store).delete_task("1"))
    assert column_ids(board, TaskStatus.TODO) == ["3"]


@pytest.mark.parametrize(
    "op,call,message",
    [
        ("insert", lambda s: s.create_task(TaskCreate(title="x", priority="Low"), TEST_USER_ID), "Failed to create task"),
        ("update", lambda s: s.update_task("1", TaskUpdate(title="x", priority="Low")), "Failed to update task"),
        ("update", lambda s: s.update_task_status("1", TaskStatus.DONE), "Failed to update task status"),
        ("delete", lambda s: s.delete_task("1"), "Failed to delete task"),
    ],
)
def test_each_mutation_has_its_own_error(store, op, call, message):
    store.fail("tasks", op)
    service = make_service(store)

    with pytest.raises(TaskOperationError) as exc_info:
        asyncio.run(call(service))

    assert exc_info.value.message == message
    assert exc_info.value.status_code == 502
    # No refetch after a failed write
    assert ("tasks", "select") not in store.calls


def test_list_tasks_sorted_and_filtered(store):
    service = make_service(store)
    tasks = asyncio.run(service.list_tasks())
    assert [task.id for task in tasks] == ["1", "2", "3"]

    todo = asyncio.run(service.list_tasks(TaskFilter(status=TaskStatus.TODO)))
    assert [task.id for task in todo] == ["1", "3"]


def test_stats_for_signed_in_user(store):
    stats = asyncio.run(make_service(store).stats(TEST_USER_ID))

    assert stats.total == 3
    assert stats.todo == 2
    assert stats.done == 1
    assert stats.high_priority == 2
    assert stats.overdue == 1
    assert stats.assigned_to_me == 1
    assert stats.completion_rate == 33
