"""列表视图相关模型：筛选条件与统计结果"""

from pydantic import BaseModel, Field

from .enums import StatusFilter


class FilterSelection(BaseModel):
    """当前搜索词与状态筛选（调用方持有，不持久化）"""

    query: str = Field(default="", description="搜索词，空串表示不搜索")
    status_filter: StatusFilter = Field(default=StatusFilter.ALL, description="状态筛选")


class TaskStats(BaseModel):
    """任务统计"""

    total: int = 0
    completed: int = 0
    pending: int = 0
    high_priority: int = 0
    completion_rate: int = Field(default=0, description="完成率百分比（四舍五入）")
