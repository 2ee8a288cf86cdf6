"""taskdeck -- 个人任务同步与列表筛选引擎

公开接口导出。
"""

from .cache import TaskCache
from .config import EngineConfig, load_engine_config
from .exceptions import (
    ErrorKind,
    RemoteFailure,
    TaskError,
    TaskNotFoundError,
    TaskValidationError,
    UnauthenticatedError,
)
from .filtering import filter_tasks
from .models import (
    FilterSelection,
    Priority,
    StatusFilter,
    Task,
    TaskDraft,
    TaskFields,
    TaskPatch,
    TaskStats,
)
from .repository import TaskRepository
from .service import TaskEngine
from .session import SessionContext
from .stats import compute_stats

__all__ = [
    # 引擎
    "TaskEngine",
    "TaskCache",
    "TaskRepository",
    "SessionContext",
    "filter_tasks",
    "compute_stats",
    # 模型
    "Task",
    "TaskFields",
    "TaskPatch",
    "TaskDraft",
    "TaskStats",
    "FilterSelection",
    "Priority",
    "StatusFilter",
    # 配置
    "EngineConfig",
    "load_engine_config",
    # 异常
    "ErrorKind",
    "TaskError",
    "UnauthenticatedError",
    "TaskValidationError",
    "RemoteFailure",
    "TaskNotFoundError",
]
