"""任务列表筛选

纯函数，不修改输入，保持输入顺序：
1. query 非空时，保留 title 或 note 包含 query（不区分大小写）的任务
2. 再按状态筛选：completed / pending / priority（仅 high）/ all
两步取交集；结果为空是合法结果。
"""

from collections.abc import Callable, Iterable

from .exceptions import TaskValidationError
from .models import FilterSelection, Priority, StatusFilter, Task

_STATUS_PREDICATES: dict[StatusFilter, Callable[[Task], bool]] = {
    StatusFilter.ALL: lambda task: True,
    StatusFilter.COMPLETED: lambda task: task.completed is True,
    StatusFilter.PENDING: lambda task: task.completed is not True,
    StatusFilter.PRIORITY: lambda task: task.priority == Priority.HIGH,
}


def parse_status_filter(value: str | StatusFilter) -> StatusFilter:
    """解析状态筛选值

    Raises:
        TaskValidationError: 未知的筛选值
    """
    try:
        return StatusFilter(value)
    except ValueError as e:
        raise TaskValidationError(
            f"Unknown status filter: {value!r}",
            field="status_filter",
        ) from e


def matches_query(task: Task, query: str) -> bool:
    """title 或 note 包含 query（不区分大小写）"""
    needle = query.lower()
    return needle in task.title.lower() or needle in (task.note or "").lower()


def filter_tasks(
    tasks: Iterable[Task],
    query: str = "",
    status_filter: str | StatusFilter = StatusFilter.ALL,
) -> list[Task]:
    """按搜索词与状态筛选任务"""
    predicate = _STATUS_PREDICATES[parse_status_filter(status_filter)]
    result = list(tasks)
    if query:
        result = [task for task in result if matches_query(task, query)]
    return [task for task in result if predicate(task)]


def apply_selection(tasks: Iterable[Task], selection: FilterSelection) -> list[Task]:
    return filter_tasks(tasks, selection.query, selection.status_filter)
