"""枚举定义

包含任务优先级 Priority、列表状态筛选 StatusFilter。
"""

from enum import StrEnum


class Priority(StrEnum):
    """任务优先级"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NORMAL = "normal"


class StatusFilter(StrEnum):
    """列表状态筛选"""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    # 仅高优先级
    PRIORITY = "priority"
