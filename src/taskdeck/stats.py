"""任务统计

基于完整（未筛选）缓存计算，每次调用都重新计算。
"""

import math
from collections.abc import Iterable

from .models import Priority, Task, TaskStats


def _round_half_up(value: float) -> int:
    # 与客户端显示保持一致：12.5 -> 13，不使用 round() 的银行家舍入
    return math.floor(value + 0.5)


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    """计算 total / completed / pending / high_priority / completion_rate"""
    items = list(tasks)
    total = len(items)
    completed = sum(1 for task in items if task.completed is True)
    high_priority = sum(1 for task in items if task.priority == Priority.HIGH)
    completion_rate = _round_half_up(completed / total * 100) if total > 0 else 0
    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        high_priority=high_priority,
        completion_rate=completion_rate,
    )
