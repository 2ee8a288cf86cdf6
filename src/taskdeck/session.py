"""SessionContext -- 当前登录用户

身份提供方的适配层调用 sign_in / sign_out；引擎通过 current_user_id()
读取当前用户，并通过 on_change() 订阅身份变化。以对象形式注入，
不使用模块级全局状态。
"""

from collections.abc import Callable

import structlog

log = structlog.get_logger()

SessionListener = Callable[[str | None], None]


class SessionContext:
    """当前会话：已登录用户 id 或 None"""

    def __init__(self, user_id: str | None = None) -> None:
        if user_id == "":
            raise ValueError("user_id must not be empty")
        self._user_id = user_id
        self._listeners: list[SessionListener] = []

    def current_user_id(self) -> str | None:
        return self._user_id

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    def on_change(self, callback: SessionListener) -> Callable[[], None]:
        """订阅身份变化

        Returns:
            取消订阅函数
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id must not be empty")
        self._set(user_id)

    def sign_out(self) -> None:
        self._set(None)

    def _set(self, user_id: str | None) -> None:
        if user_id == self._user_id:
            return
        previous = self._user_id
        self._user_id = user_id
        log.info(
            "session_changed",
            previous_user_id=previous,
            user_id=user_id,
        )
        for listener in list(self._listeners):
            try:
                listener(user_id)
            except Exception:
                # 单个监听者失败不影响其他监听者收到通知
                log.exception("session_listener_failed", user_id=user_id)
