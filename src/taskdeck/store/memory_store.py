"""DocumentStore 内存实现

进程内字典存储，用于测试与本地演示。支持故障注入（fail_next），
模拟网络或权限错误；calls 记录每次调用，便于断言是否访问了存储。
"""

import copy
from datetime import UTC, datetime
from typing import Any

from ulid import ULID

from .protocols import DocumentNotFoundError, StoredDocument, StoreError


class MemoryDocumentStore:
    """DocumentStore 的内存实现"""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._pending_failures: list[Exception] = []
        self.calls: list[tuple[str, str]] = []

    def fail_next(self, error: Exception | None = None, times: int = 1) -> None:
        """让接下来的 times 次调用抛出 error（默认 StoreError）"""
        for _ in range(times):
            self._pending_failures.append(error or StoreError("Simulated store failure"))

    async def list_documents(self, path: str) -> list[StoredDocument]:
        self._enter("list", path)
        docs = self._collections.get(path, {})
        return [
            StoredDocument(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in docs.items()
        ]

    async def get_document(self, path: str, doc_id: str) -> StoredDocument | None:
        self._enter("get", path)
        data = self._collections.get(path, {}).get(doc_id)
        if data is None:
            return None
        return StoredDocument(id=doc_id, data=copy.deepcopy(data))

    async def add_document(self, path: str, data: dict[str, Any]) -> StoredDocument:
        self._enter("add", path)
        doc_id = str(ULID())
        stored = {**copy.deepcopy(data), "createdAt": datetime.now(UTC)}
        self._collections.setdefault(path, {})[doc_id] = stored
        return StoredDocument(id=doc_id, data=copy.deepcopy(stored))

    async def update_document(
        self,
        path: str,
        doc_id: str,
        data: dict[str, Any],
    ) -> None:
        self._enter("update", path)
        existing = self._collections.get(path, {}).get(doc_id)
        if existing is None:
            raise DocumentNotFoundError(path, doc_id)
        created_at = existing.get("createdAt")
        existing.update(copy.deepcopy(data))
        existing["createdAt"] = created_at

    async def delete_document(self, path: str, doc_id: str) -> None:
        self._enter("delete", path)
        self._collections.get(path, {}).pop(doc_id, None)

    def _enter(self, op: str, path: str) -> None:
        self.calls.append((op, path))
        if self._pending_failures:
            raise self._pending_failures.pop(0)
