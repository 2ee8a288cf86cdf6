"""Domain Models 单元测试

测试内容：
1. 枚举取值
2. 从存储文档构建 Task（缺省字段兜底）
3. TaskFields 规范化与标题校验
4. TaskPatch 仅包含显式赋值的字段
5. TaskDraft 生成全字段更新
"""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError
from taskdeck.exceptions import ErrorKind, TaskValidationError
from taskdeck.models import (
    Priority,
    StatusFilter,
    Task,
    TaskDraft,
    TaskFields,
    TaskPatch,
)


class TestEnums:
    """枚举取值测试"""

    def test_priority_values(self):
        assert Priority.HIGH == "high"
        assert Priority.MEDIUM == "medium"
        assert Priority.LOW == "low"
        assert Priority.NORMAL == "normal"

    def test_status_filter_values(self):
        assert {f.value for f in StatusFilter} == {"all", "completed", "pending", "priority"}


class TestTaskFromDocument:
    """Task.from_document 测试"""

    def test_full_document(self):
        """完整文档按字段映射，createdAt 映射为 created_at"""
        now = datetime.now(UTC)
        task = Task.from_document(
            "doc-1",
            {
                "title": "Buy milk",
                "note": "2 litres",
                "priority": "high",
                "category": "home",
                "completed": True,
                "createdAt": now,
            },
        )
        assert task.id == "doc-1"
        assert task.title == "Buy milk"
        assert task.priority == Priority.HIGH
        assert task.category == "home"
        assert task.completed is True
        assert task.created_at == now

    def test_missing_fields_use_defaults(self):
        """旧文档缺少字段时使用默认值"""
        task = Task.from_document(
            "doc-2",
            {"title": "Pay rent", "priority": None, "category": None, "note": None},
        )
        assert task.note == ""
        assert task.priority == Priority.NORMAL
        assert task.category is None
        assert task.completed is False
        assert task.created_at is None

    def test_unknown_priority_reads_as_normal(self):
        task = Task.from_document("doc-5", {"title": "x", "priority": "urgent"})
        assert task.priority == Priority.NORMAL

    def test_missing_title_rejected(self):
        with pytest.raises(ValidationError):
            Task.from_document("doc-6", {"note": "n"})
        with pytest.raises(ValidationError):
            Task.from_document("doc-7", {"title": None})

    def test_blank_category_reads_as_absent(self):
        task = Task.from_document("doc-3", {"title": "x", "category": "   "})
        assert task.category is None

    def test_iso_timestamp_parsed(self):
        task = Task.from_document(
            "doc-4",
            {"title": "x", "createdAt": "2026-01-02T03:04:05+00:00"},
        )
        assert task.created_at == datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)


class TestTaskFields:
    """TaskFields 规范化测试"""

    def test_normalized_trims_text(self):
        fields = TaskFields(
            title="  Buy milk  ",
            note="  soon ",
            category="  home ",
        ).normalized()
        assert fields.title == "Buy milk"
        assert fields.note == "soon"
        assert fields.category == "home"
        assert fields.priority == Priority.NORMAL

    def test_blank_category_becomes_none(self):
        fields = TaskFields(title="x", category="   ").normalized()
        assert fields.category is None

    def test_blank_title_rejected(self):
        with pytest.raises(TaskValidationError) as exc_info:
            TaskFields(title="   ").normalized()
        assert exc_info.value.field == "title"
        assert exc_info.value.kind == ErrorKind.VALIDATION

    def test_to_document_not_completed(self):
        doc = TaskFields(title="x", priority="high").to_document()
        assert doc == {
            "title": "x",
            "note": "",
            "priority": "high",
            "category": None,
            "completed": False,
        }


class TestTaskPatch:
    """TaskPatch 部分更新测试"""

    def test_only_explicit_fields(self):
        patch = TaskPatch(completed=True)
        assert patch.to_document() == {"completed": True}

    def test_category_can_be_cleared(self):
        patch = TaskPatch(category=None)
        assert patch.to_document() == {"category": None}

    def test_none_for_required_fields_ignored(self):
        patch = TaskPatch(title=None, priority=Priority.LOW)
        assert patch.to_document() == {"priority": "low"}

    def test_merged_keeps_identity(self):
        now = datetime.now(UTC)
        task = Task(id="t1", title="old", created_at=now)
        merged = task.merged(TaskPatch(title="new", completed=True))
        assert merged.id == "t1"
        assert merged.created_at == now
        assert merged.title == "new"
        assert merged.completed is True
        assert task.title == "old"


class TestTaskDraft:
    """TaskDraft 测试"""

    def test_from_task_category_as_text(self):
        draft = TaskDraft.from_task(Task(id="t1", title="x"))
        assert draft.category == ""

    def test_to_patch_full_field_set(self):
        draft = TaskDraft(
            id="t1",
            title="  Title ",
            note=" n ",
            priority="medium",
            category="  ",
            completed=True,
        )
        patch = draft.to_patch()
        assert patch.to_document() == {
            "title": "Title",
            "note": "n",
            "priority": "medium",
            "category": None,
            "completed": True,
        }

    def test_to_patch_rejects_blank_title(self):
        draft = TaskDraft(id="t1", title="  ")
        with pytest.raises(TaskValidationError):
            draft.to_patch()

    def test_to_task(self):
        now = datetime.now(UTC)
        draft = TaskDraft(id="t1", title=" A ", category="work", created_at=now)
        task = draft.to_task()
        assert task.id == "t1"
        assert task.title == "A"
        assert task.category == "work"
        assert task.created_at == now
