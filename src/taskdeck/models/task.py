"""Task Domain Model

任务以文档形式存放在用户命名空间 users/{user_id}/tasks 下，
文档 id 与 createdAt 由存储端分配，引擎只读不写。
"""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import TaskValidationError
from .enums import Priority

MISSING_TITLE_MESSAGE = "Please enter a task title to continue."


def normalize_title(title: str | None) -> str:
    """去除首尾空白并校验标题非空

    Raises:
        TaskValidationError: 标题为空或只有空白
    """
    cleaned = (title or "").strip()
    if not cleaned:
        raise TaskValidationError(MISSING_TITLE_MESSAGE, field="title")
    return cleaned


def normalize_category(category: str | None) -> str | None:
    """空白分类按缺省处理"""
    if category is None:
        return None
    return category.strip() or None


def _priority_or_default(value: Any) -> Any:
    # 旧文档可能没有 priority 字段
    return value or Priority.NORMAL


def _stored_priority(value: Any) -> Any:
    # 存储端未知的优先级按 normal 读取
    try:
        return Priority(value)
    except (ValueError, TypeError):
        return Priority.NORMAL


class Task(BaseModel):
    """Task 数据模型

    id 创建后不变；title 创建后不为空；每条任务只属于一个用户，
    归属关系由存储路径体现，模型本身不携带 user_id。
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="存储端分配的文档 id")
    title: str = Field(min_length=1, description="任务标题（已去除首尾空白）")
    note: str = Field(default="", description="备注")
    priority: Priority = Field(default=Priority.NORMAL, description="优先级")
    category: str | None = Field(default=None, description="分类标签，空白视为缺省")
    completed: bool = Field(default=False, description="是否已完成")
    created_at: datetime | None = Field(
        default=None,
        alias="createdAt",
        description="存储端写入的创建时间",
    )

    @field_validator("note", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("priority", mode="before")
    @classmethod
    def _default_priority(cls, value: Any) -> Any:
        return _stored_priority(value)

    @field_validator("category", mode="before")
    @classmethod
    def _blank_category(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("completed", mode="before")
    @classmethod
    def _none_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "Task":
        """从存储文档构建 Task（文档内容不含 id）"""
        return cls.model_validate({**data, "id": doc_id})

    def merged(self, patch: "TaskPatch") -> "Task":
        """返回合并部分更新后的副本，id 与 created_at 不受影响"""
        return self.model_copy(update=patch.changes())


class TaskFields(BaseModel):
    """新建任务的输入字段"""

    title: str
    note: str = ""
    priority: Priority = Priority.NORMAL
    category: str | None = None

    @field_validator("note", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("priority", mode="before")
    @classmethod
    def _default_priority(cls, value: Any) -> Any:
        return _priority_or_default(value)

    def normalized(self) -> "TaskFields":
        """去除文本首尾空白，空白分类置为缺省

        Raises:
            TaskValidationError: 标题为空
        """
        return TaskFields(
            title=normalize_title(self.title),
            note=self.note.strip(),
            priority=self.priority,
            category=normalize_category(self.category),
        )

    def to_document(self) -> dict[str, Any]:
        """新建文档内容，completed 固定为 False"""
        return {
            "title": self.title,
            "note": self.note,
            "priority": self.priority.value,
            "category": self.category,
            "completed": False,
        }


class TaskPatch(BaseModel):
    """任务部分更新

    只有显式赋值的字段会写入存储；category 可显式置为 None 以清除分类。
    """

    title: str | None = None
    note: str | None = None
    priority: Priority | None = None
    category: str | None = None
    completed: bool | None = None

    def changes(self) -> dict[str, Any]:
        """显式赋值的字段（不可为空的字段传 None 时忽略）"""
        data = {name: getattr(self, name) for name in self.model_fields_set}
        return {
            key: value
            for key, value in data.items()
            if value is not None or key == "category"
        }

    def to_document(self) -> dict[str, Any]:
        """转换为存储端部分更新内容"""
        return {
            key: value.value if isinstance(value, Priority) else value
            for key, value in self.changes().items()
        }


class TaskDraft(BaseModel):
    """编辑中的任务草稿

    从存储端点查得到的 Task 预填充，保存时重新校验。
    category 以文本形式编辑，缺省时为空串；id 与 created_at 只读。
    """

    model_config = ConfigDict(validate_assignment=True)

    EDITABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"title", "note", "priority", "category", "completed"}
    )

    id: str
    title: str = ""
    note: str = ""
    priority: Priority = Priority.NORMAL
    category: str = ""
    completed: bool = False
    created_at: datetime | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_task(cls, task: Task) -> "TaskDraft":
        return cls(
            id=task.id,
            title=task.title,
            note=task.note,
            priority=task.priority,
            category=task.category or "",
            completed=task.completed,
            created_at=task.created_at,
        )

    def to_patch(self) -> TaskPatch:
        """生成包含全部字段的更新（含 completed）

        Raises:
            TaskValidationError: 标题为空
        """
        return TaskPatch(
            title=normalize_title(self.title),
            note=self.note.strip(),
            priority=self.priority,
            category=normalize_category(self.category),
            completed=self.completed,
        )

    def to_task(self) -> Task:
        """按保存后的字段构建 Task"""
        return Task(id=self.id, created_at=self.created_at, **self.to_patch().changes())
