"""TaskRepository -- 按用户命名空间读写任务文档

把任务操作翻译为 users/{user_id}/tasks 集合上的存储调用：
1. 缺少 user_id 时在访问存储前抛出 UnauthenticatedError
2. 存储层的任何异常、以及字段不合法的文档统一包装为 RemoteFailure
3. 不做重试
"""

from collections.abc import Awaitable
from typing import TypeVar

import structlog
from pydantic import ValidationError

from .config import tasks_collection_path
from .exceptions import RemoteFailure, TaskNotFoundError, UnauthenticatedError
from .models import Task, TaskFields, TaskPatch, normalize_title
from .store.protocols import DocumentNotFoundError, DocumentStore, StoredDocument

log = structlog.get_logger()

T = TypeVar("T")


def _require_user(user_id: str | None) -> str:
    if not user_id:
        raise UnauthenticatedError()
    return user_id


class TaskRepository:
    """任务仓储"""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def load(self, user_id: str | None) -> list[Task]:
        """读取用户全部任务，保持存储端迭代顺序"""
        uid = _require_user(user_id)
        docs = await self._call(
            "load",
            uid,
            self._store.list_documents(tasks_collection_path(uid)),
        )
        tasks = [self._to_task("load", uid, doc) for doc in docs]
        await log.ainfo("task_repository_loaded", user_id=uid, count=len(tasks))
        return tasks

    async def get(self, user_id: str | None, task_id: str) -> Task:
        """点查单个任务

        Raises:
            TaskNotFoundError: 任务不存在
        """
        uid = _require_user(user_id)
        doc = await self._call(
            "get",
            uid,
            self._store.get_document(tasks_collection_path(uid), task_id),
        )
        if doc is None:
            raise TaskNotFoundError(task_id)
        return self._to_task("get", uid, doc)

    async def create(self, user_id: str | None, fields: TaskFields) -> Task:
        """新建任务，completed 固定为 False，createdAt 由存储端写入

        调用方负责去除首尾空白；此处仅校验标题非空。
        """
        uid = _require_user(user_id)
        normalize_title(fields.title)
        doc = await self._call(
            "create",
            uid,
            self._store.add_document(tasks_collection_path(uid), fields.to_document()),
        )
        task = self._to_task("create", uid, doc)
        await log.ainfo("task_repository_created", user_id=uid, task_id=task.id)
        return task

    async def update(self, user_id: str | None, task_id: str, patch: TaskPatch) -> None:
        """部分更新任务"""
        uid = _require_user(user_id)
        await self._call(
            "update",
            uid,
            self._store.update_document(
                tasks_collection_path(uid),
                task_id,
                patch.to_document(),
            ),
            task_id=task_id,
        )
        await log.ainfo(
            "task_repository_updated",
            user_id=uid,
            task_id=task_id,
            fields=sorted(patch.changes()),
        )

    async def remove(self, user_id: str | None, task_id: str) -> None:
        """删除任务；重复删除是否报错取决于存储实现"""
        uid = _require_user(user_id)
        await self._call(
            "remove",
            uid,
            self._store.delete_document(tasks_collection_path(uid), task_id),
            task_id=task_id,
        )
        await log.ainfo("task_repository_removed", user_id=uid, task_id=task_id)

    async def _call(
        self,
        op: str,
        user_id: str,
        awaitable: Awaitable[T],
        task_id: str | None = None,
    ) -> T:
        """等待存储调用，把存储层异常包装为 RemoteFailure"""
        try:
            return await awaitable
        except DocumentNotFoundError as e:
            await log.awarning(
                "task_repository_not_found",
                op=op,
                user_id=user_id,
                task_id=task_id,
            )
            raise TaskNotFoundError(task_id or e.doc_id, original_error=e) from e
        except Exception as e:
            await log.aerror(
                "task_repository_failed",
                op=op,
                user_id=user_id,
                task_id=task_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise RemoteFailure(str(e), original_error=e) from e

    @staticmethod
    def _to_task(op: str, user_id: str, doc: StoredDocument) -> Task:
        """文档转换为 Task，字段不合法时包装为 RemoteFailure"""
        try:
            return Task.from_document(doc.id, doc.data)
        except ValidationError as e:
            log.error(
                "task_repository_malformed_document",
                op=op,
                user_id=user_id,
                task_id=doc.id,
                error=str(e),
            )
            raise RemoteFailure(
                f"Malformed task document {doc.id}: {e}",
                original_error=e,
            ) from e
