"""配置模块 -- 可通过环境变量覆盖

包含数据库路径、集合路径常量，以及引擎运行配置 EngineConfig。
"""

import os
from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

# 任务文档存放在 users/{user_id}/tasks 下
USERS_COLLECTION = "users"
TASKS_COLLECTION = "tasks"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKDECK_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKDECK_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskdeck.db"),
    )


def tasks_collection_path(user_id: str) -> str:
    """用户任务集合路径"""
    return f"{USERS_COLLECTION}/{user_id}/{TASKS_COLLECTION}"


class EngineConfig(BaseModel):
    """引擎配置 -- 从环境变量加载

    环境变量:
        TASKDECK_DB_PATH: SQLite 数据库路径
        TASKDECK_LOG_FORMAT: 日志格式（dev/json）
        TASKDECK_LOG_LEVEL: 日志级别（默认 INFO）
        TASKDECK_TOGGLE_WRITE_THROUGH: 完成状态切换是否立即写回存储
    """

    db_path: str = Field(default_factory=get_db_path, description="SQLite 数据库路径")
    log_format: Literal["dev", "json"] = Field(default="dev", description="日志渲染模式")
    log_level: str = Field(default="INFO", description="日志级别")
    toggle_write_through: bool = Field(
        default=False,
        description="True 时切换完成状态立即写回存储，失败回滚；False 时仅修改本地缓存",
    )


def load_engine_config() -> EngineConfig:
    """从环境变量加载引擎配置

    非法取值记录警告并使用默认值，不阻塞启动。

    Returns:
        EngineConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKDECK_LOG_FORMAT"):
        if val in ("dev", "json"):
            kwargs["log_format"] = val
        else:
            log.warning(
                "invalid_log_format_config",
                env_var="TASKDECK_LOG_FORMAT",
                value=val,
                fallback="dev",
            )

    if val := os.environ.get("TASKDECK_LOG_LEVEL"):
        kwargs["log_level"] = val.upper()

    if val := os.environ.get("TASKDECK_TOGGLE_WRITE_THROUGH"):
        lowered = val.strip().lower()
        if lowered in _TRUE_VALUES:
            kwargs["toggle_write_through"] = True
        elif lowered in _FALSE_VALUES:
            kwargs["toggle_write_through"] = False
        else:
            log.warning(
                "invalid_toggle_write_through_config",
                env_var="TASKDECK_TOGGLE_WRITE_THROUGH",
                value=val,
                fallback=False,
            )

    return EngineConfig(**kwargs)
