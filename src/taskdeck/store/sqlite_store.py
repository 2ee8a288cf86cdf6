"""DocumentStore SQLite 实现

所有集合共用一张 documents 表，以 (collection, doc_id) 唯一定位文档；
文档字段以 JSON 存储，createdAt 在新增时写入且不再修改。
"""

import json
from datetime import UTC, datetime
from typing import Any

import aiosqlite
from ulid import ULID

from .protocols import DocumentNotFoundError, StoredDocument, StoreError


class SqliteDocumentStore:
    """DocumentStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    @property
    def conn(self) -> aiosqlite.Connection:
        return self._conn

    async def list_documents(self, path: str) -> list[StoredDocument]:
        """列出集合下全部文档，按插入顺序"""
        try:
            cursor = await self._conn.execute(
                "SELECT doc_id, data FROM documents WHERE collection = ? ORDER BY seq",
                (path,),
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e
        return [self._row_to_document(row) for row in rows]

    async def get_document(self, path: str, doc_id: str) -> StoredDocument | None:
        """点查单个文档"""
        try:
            row = await self._fetch_row(path, doc_id)
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e
        if row is None:
            return None
        return self._row_to_document(row)

    async def add_document(self, path: str, data: dict[str, Any]) -> StoredDocument:
        """新增文档，分配 ULID 作为 id 并写入 createdAt"""
        doc_id = str(ULID())
        created_at = datetime.now(UTC).isoformat()
        stored = {**data, "createdAt": created_at}
        try:
            await self._conn.execute(
                """
                INSERT INTO documents (collection, doc_id, data, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (path, doc_id, json.dumps(stored, ensure_ascii=False), created_at),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(str(e)) from e
        return StoredDocument(id=doc_id, data=stored)

    async def update_document(
        self,
        path: str,
        doc_id: str,
        data: dict[str, Any],
    ) -> None:
        """部分更新文档，createdAt 不可被覆盖

        Raises:
            DocumentNotFoundError: 文档不存在
        """
        try:
            row = await self._fetch_row(path, doc_id)
            if row is None:
                raise DocumentNotFoundError(path, doc_id)
            existing = json.loads(row[1])
            merged = {**existing, **data, "createdAt": existing.get("createdAt")}
            await self._conn.execute(
                "UPDATE documents SET data = ? WHERE collection = ? AND doc_id = ?",
                (json.dumps(merged, ensure_ascii=False), path, doc_id),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(str(e)) from e

    async def delete_document(self, path: str, doc_id: str) -> None:
        """删除文档，不存在时静默成功"""
        try:
            await self._conn.execute(
                "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                (path, doc_id),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(str(e)) from e

    async def _fetch_row(self, path: str, doc_id: str) -> Any:
        cursor = await self._conn.execute(
            "SELECT doc_id, data FROM documents WHERE collection = ? AND doc_id = ?",
            (path, doc_id),
        )
        return await cursor.fetchone()

    @staticmethod
    def _row_to_document(row: Any) -> StoredDocument:
        """将数据库行转换为 StoredDocument"""
        return StoredDocument(id=row[0], data=json.loads(row[1]))
