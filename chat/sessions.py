from __future__ import annotations

import uuid
from typing import Callable, Optional, Tuple

from cachetools import TTLCache

from chat.view import ChatView


SESSION_COOKIE = "advisor_session"


class ChatSessions:
    """In-process registry of chat views keyed by session cookie.

    Nothing is persisted. Views expire ``ttl`` seconds after their last use and
    at most ``maxsize`` are kept; the least recently used go first. ``start``
    empties the browser's view (a page reload starts an empty chat).
    """

    def __init__(
        self,
        view_factory: Callable[[], ChatView],
        maxsize: int = 1000,
        ttl: float = 3600,
    ) -> None:
        self._view_factory = view_factory
        self._views: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)

    def __len__(self) -> int:
        return len(self._views)

    @property
    def maxsize(self) -> int:
        return int(self._views.maxsize)

    def get(self, session_id: Optional[str]) -> Optional[ChatView]:
        if not session_id:
            return None
        view = self._views.get(session_id)
        if view is not None:
            # Re-insert so the expiry clock restarts on every use.
            self._views[session_id] = view
        return view

    def _create(self) -> Tuple[str, ChatView]:
        session_id = uuid.uuid4().hex
        view = self._view_factory()
        self._views[session_id] = view
        return session_id, view

    def start(self, session_id: Optional[str] = None) -> Tuple[str, ChatView]:
        view = self.get(session_id)
        if view is not None and not view.loading:
            view.reset()
            return session_id, view
        return self._create()

    def get_or_start(self, session_id: Optional[str]) -> Tuple[str, ChatView]:
        view = self.get(session_id)
        if view is not None:
            return session_id, view
        return self._create()
