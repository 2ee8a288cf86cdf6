"""taskdeck 异常体系

三类错误：未登录（UnauthenticatedError）、字段校验失败（TaskValidationError）、
远端存储失败（RemoteFailure）。错误原样抛给直接调用方，不重试、不吞掉。
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """错误类别 -- 三类错误，均不自动重试"""

    UNAUTHENTICATED = "unauthenticated"
    VALIDATION = "validation"
    REMOTE = "remote"


class TaskError(Exception):
    """taskdeck 基础异常"""

    kind: ErrorKind = ErrorKind.REMOTE

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        """
        Args:
            message: 错误描述
            kind: 错误类别，缺省取子类声明的类别
        """
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class UnauthenticatedError(TaskError):
    """当前没有登录用户，但操作需要用户命名空间"""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "No user logged in") -> None:
        super().__init__(message)


class TaskValidationError(TaskError):
    """必填字段为空或取值非法"""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None) -> None:
        """
        Args:
            message: 错误描述
            field: 校验失败的字段名
        """
        super().__init__(message)
        self.field = field


class RemoteFailure(TaskError):
    """远端存储操作失败（网络、权限、文档不存在等）

    保留底层异常，消息沿用底层错误描述。
    """

    kind = ErrorKind.REMOTE

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class TaskNotFoundError(RemoteFailure):
    """指定 id 的任务不存在"""

    def __init__(self, task_id: str, original_error: Exception | None = None) -> None:
        super().__init__(f"Task not found: {task_id}", original_error)
        self.task_id = task_id
