"""TaskRepository 单元测试

测试内容：
1. 按用户命名空间读写
2. 缺少 user_id 时不访问存储
3. 存储异常包装为 RemoteFailure，保留原始消息
"""

import pytest
from taskdeck.exceptions import (
    ErrorKind,
    RemoteFailure,
    TaskNotFoundError,
    TaskValidationError,
    UnauthenticatedError,
)
from taskdeck.models import Priority, TaskFields, TaskPatch
from taskdeck.repository import TaskRepository
from taskdeck.store import StoreError


class TestRepositoryCrud:
    """读写流程测试"""

    async def test_create_then_load(self, repository):
        created = await repository.create(
            "user-a",
            TaskFields(title="Buy milk", priority="high", category="home"),
        )
        tasks = await repository.load("user-a")

        assert [t.id for t in tasks] == [created.id]
        assert tasks[0].title == "Buy milk"
        assert tasks[0].priority == Priority.HIGH
        assert tasks[0].completed is False
        assert tasks[0].created_at is not None

    async def test_tasks_scoped_per_user(self, repository):
        await repository.create("user-a", TaskFields(title="mine"))
        await repository.create("user-b", TaskFields(title="theirs"))

        assert [t.title for t in await repository.load("user-a")] == ["mine"]
        assert [t.title for t in await repository.load("user-b")] == ["theirs"]

    async def test_get(self, repository):
        created = await repository.create("user-a", TaskFields(title="x"))
        fetched = await repository.get("user-a", created.id)
        assert fetched.id == created.id

    async def test_get_missing_raises_not_found(self, repository):
        with pytest.raises(TaskNotFoundError) as exc_info:
            await repository.get("user-a", "missing")
        assert exc_info.value.task_id == "missing"
        assert exc_info.value.kind == ErrorKind.REMOTE

    async def test_update_partial(self, repository):
        created = await repository.create("user-a", TaskFields(title="x", note="keep"))
        await repository.update("user-a", created.id, TaskPatch(completed=True))

        fetched = await repository.get("user-a", created.id)
        assert fetched.completed is True
        assert fetched.note == "keep"

    async def test_update_missing_is_remote_failure(self, repository):
        with pytest.raises(RemoteFailure):
            await repository.update("user-a", "missing", TaskPatch(title="x"))

    async def test_remove(self, repository):
        created = await repository.create("user-a", TaskFields(title="x"))
        await repository.remove("user-a", created.id)
        assert await repository.load("user-a") == []

    async def test_remove_twice_succeeds_with_bundled_store(self, repository):
        created = await repository.create("user-a", TaskFields(title="x"))
        await repository.remove("user-a", created.id)
        await repository.remove("user-a", created.id)

    async def test_create_blank_title_rejected(self, repository, memory_store):
        with pytest.raises(TaskValidationError):
            await repository.create("user-a", TaskFields(title="  "))
        assert memory_store.calls == []


class TestRepositoryErrors:
    """错误映射测试"""

    @pytest.mark.parametrize("user_id", [None, ""])
    async def test_unauthenticated_before_store_call(self, repository, memory_store, user_id):
        with pytest.raises(UnauthenticatedError):
            await repository.load(user_id)
        with pytest.raises(UnauthenticatedError):
            await repository.create(user_id, TaskFields(title="x"))
        with pytest.raises(UnauthenticatedError):
            await repository.update(user_id, "t1", TaskPatch(completed=True))
        with pytest.raises(UnauthenticatedError):
            await repository.remove(user_id, "t1")
        assert memory_store.calls == []

    async def test_store_error_wrapped(self, repository, memory_store):
        memory_store.fail_next(StoreError("permission denied"))

        with pytest.raises(RemoteFailure) as exc_info:
            await repository.load("user-a")

        assert str(exc_info.value) == "permission denied"
        assert isinstance(exc_info.value.original_error, StoreError)

    async def test_unexpected_error_wrapped(self, repository, memory_store):
        memory_store.fail_next(ConnectionError("network down"))

        with pytest.raises(RemoteFailure) as exc_info:
            await repository.create("user-a", TaskFields(title="x"))
        assert "network down" in str(exc_info.value)

    async def test_no_retry(self, memory_store):
        repository = TaskRepository(memory_store)
        memory_store.fail_next()

        with pytest.raises(RemoteFailure):
            await repository.load("user-a")
        assert memory_store.calls == [("list", "users/user-a/tasks")]


class TestMalformedDocuments:
    """存储端不合法文档测试"""

    async def test_unknown_priority_reads_as_normal(self, repository, memory_store):
        doc = await memory_store.add_document(
            "users/user-a/tasks", {"title": "x", "priority": "urgent"}
        )

        tasks = await repository.load("user-a")

        assert [t.id for t in tasks] == [doc.id]
        assert tasks[0].priority == Priority.NORMAL

    @pytest.mark.parametrize(
        "data",
        [
            {"note": "no title"},
            {"title": ""},
            {"title": "x", "completed": "maybe"},
        ],
    )
    async def test_invalid_document_is_remote_failure(self, repository, memory_store, data):
        doc = await memory_store.add_document("users/user-a/tasks", data)

        with pytest.raises(RemoteFailure) as exc_info:
            await repository.load("user-a")
        assert doc.id in str(exc_info.value)

        with pytest.raises(RemoteFailure):
            await repository.get("user-a", doc.id)
