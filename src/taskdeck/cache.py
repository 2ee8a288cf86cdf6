"""TaskCache -- 当前用户任务的内存权威副本

- refresh() 从仓储全量读取并整体替换缓存（不合并）
- apply_create / apply_update / apply_remove 在仓储调用成功后同步缓存
- toggle_completion() 默认只改本地缓存，下次 refresh() 会恢复存储端的值；
  write_through=True 时立即写回存储，失败则回滚
- 会话变化时立即清空缓存；身份变化前发出的 load 结果到达后丢弃
"""

import structlog

from .exceptions import TaskNotFoundError, UnauthenticatedError
from .models import Task, TaskPatch
from .repository import TaskRepository
from .session import SessionContext

log = structlog.get_logger()


class TaskCache:
    """任务内存缓存（同一 id 只保留一份）"""

    def __init__(
        self,
        repository: TaskRepository,
        session: SessionContext,
        write_through: bool = False,
    ) -> None:
        self._repository = repository
        self._session = session
        self._write_through = write_through
        self._tasks: dict[str, Task] = {}
        # 每次会话变化递增，用于识别过期的 load 结果
        self._generation = 0
        self._unsubscribe = session.on_change(self._on_session_change)

    @property
    def tasks(self) -> list[Task]:
        """缓存快照，保持插入顺序"""
        return list(self._tasks.values())

    @property
    def generation(self) -> int:
        return self._generation

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def clear(self) -> None:
        self._tasks.clear()

    def close(self) -> None:
        """取消会话订阅"""
        self._unsubscribe()

    async def refresh(self) -> list[Task]:
        """全量读取当前用户任务并替换缓存

        Raises:
            UnauthenticatedError: 当前未登录
            RemoteFailure: 存储读取失败（缓存保持不变）
        """
        user_id = self._session.current_user_id()
        if not user_id:
            raise UnauthenticatedError()
        generation = self._generation

        tasks = await self._repository.load(user_id)

        if generation != self._generation:
            # 读取期间身份已变化，丢弃结果，避免跨用户数据残留
            await log.awarning(
                "task_cache_stale_load_discarded",
                user_id=user_id,
                count=len(tasks),
            )
            return self.tasks

        self._tasks = {task.id: task for task in tasks}
        await log.adebug("task_cache_refreshed", user_id=user_id, count=len(self._tasks))
        return self.tasks

    async def toggle_completion(self, task_id: str) -> Task:
        """切换任务完成状态

        默认只修改缓存，不写回存储；write_through=True 时立即写回，失败回滚。

        Raises:
            TaskNotFoundError: 缓存中没有该任务
            UnauthenticatedError / RemoteFailure: 仅 write_through 模式下
        """
        current = self._tasks.get(task_id)
        if current is None:
            raise TaskNotFoundError(task_id)

        toggled = current.model_copy(update={"completed": not current.completed})
        self._tasks[task_id] = toggled

        if not self._write_through:
            return toggled

        generation = self._generation
        try:
            await self._repository.update(
                self._session.current_user_id(),
                task_id,
                TaskPatch(completed=toggled.completed),
            )
        except Exception:
            # 仅在缓存仍属于同一会话且条目未被替换时回滚
            if generation == self._generation and self._tasks.get(task_id) is toggled:
                self._tasks[task_id] = current
            raise
        return toggled

    def apply_create(self, task: Task) -> None:
        """插入新任务；同 id 已存在时原位替换"""
        self._tasks[task.id] = task

    def apply_update(self, task_id: str, patch: TaskPatch) -> Task | None:
        """合并部分更新，缓存中没有该任务时返回 None"""
        current = self._tasks.get(task_id)
        if current is None:
            return None
        updated = current.merged(patch)
        self._tasks[task_id] = updated
        return updated

    def apply_remove(self, task_id: str) -> None:
        self._tasks.pop(task_id, None)

    def _on_session_change(self, user_id: str | None) -> None:
        self._generation += 1
        dropped = len(self._tasks)
        self._tasks = {}
        log.info("task_cache_cleared", user_id=user_id, dropped=dropped)
