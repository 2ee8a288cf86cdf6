"""taskdeck Store -- 远端文档存储实现

提供工厂函数创建 SQLite 文档存储。
"""

from pathlib import Path

import aiosqlite
import structlog

from .memory_store import MemoryDocumentStore
from .protocols import DocumentNotFoundError, DocumentStore, StoredDocument, StoreError
from .sqlite_init import init_db, verify_wal_mode
from .sqlite_store import SqliteDocumentStore

log = structlog.get_logger()


async def create_store(db_path: str) -> SqliteDocumentStore:
    """创建 SQLite 文档存储

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        SqliteDocumentStore 实例（调用方负责关闭 store.conn）
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    if not await verify_wal_mode(conn):
        # :memory: 等数据库不支持 WAL，回退为默认日志模式
        await log.awarning("sqlite_wal_unavailable", db_path=db_path)

    return SqliteDocumentStore(conn)


__all__ = [
    "DocumentStore",
    "StoredDocument",
    "StoreError",
    "DocumentNotFoundError",
    "SqliteDocumentStore",
    "MemoryDocumentStore",
    "create_store",
    "init_db",
]
