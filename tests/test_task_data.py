"""Task data loader tests: partial failures, refetch and stale results."""

import asyncio

import pytest

from app.errors import StoreError
from app.repositories.task_repository import TaskRepository
from app.services.task_data import LoadPhase, TaskDataLoader
from tests.conftest import TEST_USER_ID

pytestmark = pytest.mark.unit


class GatedRepository:
    """Repository whose get_tasks waits on an event chosen per call."""

    def __init__(self):
        self.calls = []
        self.next_call = 0

    def add_call(self, result):
        gate = asyncio.Event()
        self.calls.append((gate, result))
        return gate

    async def get_tasks(self):
        gate, result = self.calls[self.next_call]
        self.next_call += 1
        await gate.wait()
        return result

    async def get_users(self):
        return []

    async def get_tags(self):
        return []


def test_no_session_stays_idle(store):
    loader = TaskDataLoader(TaskRepository(store))
    state = asyncio.run(loader.set_session(None))

    assert state.phase == LoadPhase.IDLE
    assert state.tasks == [] and state.users == [] and state.tags == []
    assert store.calls == []


def test_session_loads_all_collections(store):
    loader = TaskDataLoader(TaskRepository(store))
    state = asyncio.run(loader.set_session(TEST_USER_ID))

    assert state.phase == LoadPhase.READY
    assert not state.is_loading
    assert len(state.tasks) == 3
    assert len(state.users) == 2
    assert state.tags == ["backend", "ui"]
    assert state.errors == {}


def test_tag_failure_only_empties_tags(store):
    store.fail("tags", "select", "permission denied")
    state = asyncio.run(TaskDataLoader(TaskRepository(store)).set_session(TEST_USER_ID))

    assert state.phase == LoadPhase.READY_WITH_ERRORS
    assert state.tags == []
    assert len(state.tasks) == 3
    assert len(state.users) == 2
    assert state.errors == {"tags": "TagError: tags: permission denied"}


def test_each_failure_is_reported_separately(store):
    store.fail("tasks", "select", "a")
    store.fail("users", "select", "b")
    state = asyncio.run(TaskDataLoader(TaskRepository(store)).set_session(TEST_USER_ID))

    assert state.tasks == [] and state.users == []
    assert state.tags == ["backend", "ui"]
    assert state.errors["tasks"].startswith("TaskError: ")
    assert state.errors["users"].startswith("UserError: ")
    assert "tags" not in state.errors


def test_refetch_sees_writes(store):
    async def scenario():
        repository = TaskRepository(store)
        loader = TaskDataLoader(repository)
        await loader.set_session(TEST_USER_ID)
        await repository.delete_task("1")
        # Local state is not patched until the next refetch
        assert len(loader.state.tasks) == 3
        return await loader.refetch()

    state = asyncio.run(scenario())
    assert sorted(task.id for task in state.tasks) == ["2", "3"]


def test_errors_clear_after_successful_refetch(store):
    async def scenario():
        loader = TaskDataLoader(TaskRepository(store))
        store.fail("users", "select")
        first = await loader.set_session(TEST_USER_ID)
        assert "users" in first.errors
        store.failures.clear()
        return await loader.refetch()

    state = asyncio.run(scenario())
    assert state.errors == {}
    assert state.phase == LoadPhase.READY


def test_older_fetch_finishing_last_is_discarded(store):
    repository = TaskRepository(store)

    async def scenario():
        slow_tasks = await repository.get_tasks()
        fast_tasks = slow_tasks[:1]

        gated = GatedRepository()
        slow_gate = gated.add_call(slow_tasks)
        fast_gate = gated.add_call(fast_tasks)
        loader = TaskDataLoader(gated)

        first = asyncio.create_task(loader.refetch())
        await asyncio.sleep(0)
        second = asyncio.create_task(loader.refetch())
        await asyncio.sleep(0)

        fast_gate.set()
        await second
        assert [task.id for task in loader.state.tasks] == [fast_tasks[0].id]

        slow_gate.set()
        await first
        return loader.state

    state = asyncio.run(scenario())
    assert len(state.tasks) == 1


def test_closed_loader_ignores_late_results(store):
    async def scenario():
        gated = GatedRepository()
        gate = gated.add_call(await TaskRepository(store).get_tasks())
        loader = TaskDataLoader(gated)

        pending = asyncio.create_task(loader.refetch())
        await asyncio.sleep(0)
        loader.close()
        gate.set()
        await pending
        return loader

    loader = asyncio.run(scenario())
    assert loader.state.tasks == []


def test_signing_out_discards_in_flight_fetch(store):
    async def scenario():
        gated = GatedRepository()
        gate = gated.add_call(await TaskRepository(store).get_tasks())
        loader = TaskDataLoader(gated)

        pending = asyncio.create_task(loader.set_session(TEST_USER_ID))
        await asyncio.sleep(0)
        await loader.set_session(None)
        gate.set()
        await pending
        return loader.state

    state = asyncio.run(scenario())
    assert state.phase == LoadPhase.IDLE
    assert state.tasks == []


def test_unexpected_repository_errors_are_isolated():
    class BrokenTags:
        async def get_tasks(self):
            return []

        async def get_users(self):
            return []

        async def get_tags(self):
            raise StoreError("catalog offline", "tags")

    state = asyncio.run(TaskDataLoader(BrokenTags()).refetch())
    assert state.errors == {"tags": "TagError: tags: catalog offline"}
