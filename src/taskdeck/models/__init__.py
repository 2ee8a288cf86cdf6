"""taskdeck Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import Priority, StatusFilter
from .task import (
    Task,
    TaskDraft,
    TaskFields,
    TaskPatch,
    normalize_category,
    normalize_title,
)
from .view import FilterSelection, TaskStats

__all__ = [
    # 枚举
    "Priority",
    "StatusFilter",
    # Task
    "Task",
    "TaskFields",
    "TaskPatch",
    "TaskDraft",
    "normalize_title",
    "normalize_category",
    # 视图
    "FilterSelection",
    "TaskStats",
]
