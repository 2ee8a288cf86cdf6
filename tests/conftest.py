"""全局 pytest 配置 -- 内存存储 / 临时 SQLite 存储 / 已登录会话 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from taskdeck.repository import TaskRepository
from taskdeck.service import TaskEngine
from taskdeck.session import SessionContext
from taskdeck.store import MemoryDocumentStore, SqliteDocumentStore
from taskdeck.store.sqlite_init import init_db

USER_A = "user-a"
USER_B = "user-b"


@pytest.fixture
def memory_store() -> MemoryDocumentStore:
    """提供空的内存文档存储"""
    return MemoryDocumentStore()


@pytest.fixture
def session() -> SessionContext:
    """提供已登录 USER_A 的会话"""
    return SessionContext(USER_A)


@pytest.fixture
def repository(memory_store: MemoryDocumentStore) -> TaskRepository:
    return TaskRepository(memory_store)


@pytest.fixture
def engine(repository: TaskRepository, session: SessionContext) -> TaskEngine:
    """提供基于内存存储的引擎（toggle 仅修改缓存）"""
    return TaskEngine(repository, session)


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    conn = await aiosqlite.connect(str(tmp_path / "test.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def sqlite_store(db_conn: aiosqlite.Connection) -> SqliteDocumentStore:
    return SqliteDocumentStore(db_conn)
