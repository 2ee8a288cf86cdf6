"""DocumentStore Protocol 接口定义

远端文档存储按集合路径（如 users/{user_id}/tasks）划分命名空间，
提供 list/get/add/update/delete 五个异步原语。
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Any, Protocol

from pydantic import BaseModel, Field


class StoreError(Exception):
    """存储层错误（网络、权限等）"""


class DocumentNotFoundError(StoreError):
    """文档不存在"""

    def __init__(self, path: str, doc_id: str) -> None:
        super().__init__(f"No document to update: {path}/{doc_id}")
        self.path = path
        self.doc_id = doc_id


class StoredDocument(BaseModel):
    """存储端返回的文档：id + 字段内容（含 createdAt）"""

    id: str = Field(description="存储端分配的文档 id")
    data: dict[str, Any] = Field(default_factory=dict, description="文档字段")


class DocumentStore(Protocol):
    """文档存储接口"""

    async def list_documents(self, path: str) -> list[StoredDocument]:
        """列出集合下全部文档，按存储端迭代顺序"""
        ...

    async def get_document(self, path: str, doc_id: str) -> StoredDocument | None:
        """点查单个文档，不存在返回 None"""
        ...

    async def add_document(self, path: str, data: dict[str, Any]) -> StoredDocument:
        """新增文档，由存储端分配 id 与 createdAt"""
        ...

    async def update_document(
        self,
        path: str,
        doc_id: str,
        data: dict[str, Any],
    ) -> None:
        """部分更新文档，文档不存在时抛出 DocumentNotFoundError"""
        ...

    async def delete_document(self, path: str, doc_id: str) -> None:
        """删除文档，文档不存在时静默成功"""
        ...
