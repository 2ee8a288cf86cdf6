"""TaskEngine -- 任务同步与列表筛选引擎

对展示层暴露的完整接口：refresh / filter / view / get_stats /
create / open_draft / save_draft / edit / delete / toggle_completion。
引擎不发出事件，调用方在每次变更后重新获取列表与统计。

变更流程：
1. 校验输入（标题非空），失败时不访问存储
2. 要求当前已登录，否则抛出 UnauthenticatedError
3. 调用仓储写入，成功后同步缓存
变更操作通过 asyncio.Lock 串行执行；若执行期间会话已变化，结果不写入缓存。
"""

import asyncio
from typing import Any

import structlog
from pydantic import ValidationError

from .cache import TaskCache
from .config import EngineConfig
from .exceptions import TaskValidationError, UnauthenticatedError
from .filtering import apply_selection, filter_tasks
from .models import (
    FilterSelection,
    Priority,
    StatusFilter,
    Task,
    TaskDraft,
    TaskFields,
    TaskStats,
)
from .repository import TaskRepository
from .session import SessionContext
from .stats import compute_stats
from .store.protocols import DocumentStore

log = structlog.get_logger()


def _validation_error(e: ValidationError) -> TaskValidationError:
    """把 pydantic 校验错误转换为 TaskValidationError"""
    first = e.errors()[0] if e.errors() else {}
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else None
    return TaskValidationError(first.get("msg", str(e)), field=field)


class TaskEngine:
    """任务引擎"""

    def __init__(
        self,
        repository: TaskRepository,
        session: SessionContext,
        cache: TaskCache | None = None,
        write_through: bool = False,
    ) -> None:
        self._repository = repository
        self._session = session
        if cache is None:
            cache = TaskCache(repository, session, write_through=write_through)
        self._cache = cache
        self._lock = asyncio.Lock()

    @classmethod
    def from_store(
        cls,
        store: DocumentStore,
        session: SessionContext,
        config: EngineConfig | None = None,
    ) -> "TaskEngine":
        """基于文档存储组装仓储、缓存与引擎"""
        write_through = config.toggle_write_through if config else False
        return cls(TaskRepository(store), session, write_through=write_through)

    @property
    def cache(self) -> TaskCache:
        return self._cache

    @property
    def tasks(self) -> list[Task]:
        return self._cache.tasks

    # ---- 读取与派生视图 ----

    async def refresh(self) -> list[Task]:
        """从存储全量刷新缓存"""
        return await self._cache.refresh()

    def filter(
        self,
        query: str = "",
        status_filter: str | StatusFilter = StatusFilter.ALL,
    ) -> list[Task]:
        return filter_tasks(self._cache.tasks, query, status_filter)

    def view(self, selection: FilterSelection) -> list[Task]:
        return apply_selection(self._cache.tasks, selection)

    def get_stats(self) -> TaskStats:
        return compute_stats(self._cache.tasks)

    # ---- 变更流程 ----

    async def create(
        self,
        title: str,
        note: str = "",
        priority: str | Priority = Priority.NORMAL,
        category: str | None = None,
    ) -> Task:
        """新建任务

        Raises:
            TaskValidationError: 标题为空或优先级非法（不访问存储）
            UnauthenticatedError: 当前未登录
            RemoteFailure: 存储写入失败
        """
        try:
            fields = TaskFields(
                title=title,
                note=note,
                priority=priority,
                category=category,
            ).normalized()
        except ValidationError as e:
            raise _validation_error(e) from e
        user_id = self._require_user()

        async with self._lock:
            generation = self._cache.generation
            task = await self._repository.create(user_id, fields)
            if generation == self._cache.generation:
                self._cache.apply_create(task)

        await log.ainfo("task_created", user_id=user_id, task_id=task.id)
        return task

    async def open_draft(self, task_id: str) -> TaskDraft:
        """点查存储（不读缓存）并生成编辑草稿

        Raises:
            TaskNotFoundError: 任务不存在
        """
        user_id = self._require_user()
        task = await self._repository.get(user_id, task_id)
        return TaskDraft.from_task(task)

    async def save_draft(self, draft: TaskDraft) -> Task:
        """保存草稿：重新校验标题，去除空白，写入全部字段（含 completed）"""
        patch = draft.to_patch()
        user_id = self._require_user()

        async with self._lock:
            generation = self._cache.generation
            await self._repository.update(user_id, draft.id, patch)
            saved = draft.to_task()
            if generation == self._cache.generation:
                updated = self._cache.apply_update(draft.id, patch)
                if updated is None:
                    # 缓存尚未加载该任务
                    self._cache.apply_create(saved)
                else:
                    saved = updated

        await log.ainfo("task_saved", user_id=user_id, task_id=draft.id)
        return saved

    async def edit(self, task_id: str, **changes: Any) -> Task:
        """打开草稿、应用修改并保存"""
        draft = await self.open_draft(task_id)
        for name, value in changes.items():
            if name not in TaskDraft.EDITABLE_FIELDS:
                raise TaskValidationError(f"Unknown task field: {name}", field=name)
            try:
                setattr(draft, name, value)
            except ValidationError as e:
                raise _validation_error(e) from e
        return await self.save_draft(draft)

    async def delete(self, task_id: str) -> list[Task]:
        """删除任务并刷新缓存（确认操作由调用方负责）

        Returns:
            刷新后的任务列表
        """
        user_id = self._require_user()

        async with self._lock:
            generation = self._cache.generation
            await self._repository.remove(user_id, task_id)
            await log.ainfo("task_deleted", user_id=user_id, task_id=task_id)
            if generation != self._cache.generation:
                return self._cache.tasks
            self._cache.apply_remove(task_id)
            # 刷新在锁内完成，避免覆盖并发变更写入的缓存
            return await self._cache.refresh()

    async def toggle_completion(self, task_id: str) -> Task:
        """切换完成状态（默认仅修改缓存，见 TaskCache.toggle_completion）"""
        self._require_user()
        async with self._lock:
            return await self._cache.toggle_completion(task_id)

    # ---- 内部辅助 ----

    def _require_user(self) -> str:
        user_id = self._session.current_user_id()
        if not user_id:
            raise UnauthenticatedError()
        return user_id
