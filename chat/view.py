"""Chat view state: message history, input, loading flag.

The view owns the ordered message list for one browser session. It appends
the user's message before the relay answers, appends exactly one assistant
message afterwards, and asks its scroll handle to follow the newest bubble
whenever the list changes.
"""

from __future__ import annotations

import itertools
import logging
from typing import List, Optional, Protocol, Tuple

from markupsafe import Markup

from chat.formatting import render_message
from chat.models import Message
from chat.relay_client import FALLBACK_ERROR_TEXT, RelayClientError


logger = logging.getLogger("advisor.chat")


class Relay(Protocol):
    async def ask(self, prompt: str) -> str:
        ...


class ScrollHandle(Protocol):
    """Reference to the scrollable history container."""

    def scroll_to_bottom(self) -> None:
        ...


class PageScroll:
    """Scroll handle for server-rendered pages.

    The page template reads ``pending`` and scrolls the history container to
    its bottom on load, then calls ``consume``.
    """

    def __init__(self) -> None:
        self.pending = False

    def scroll_to_bottom(self) -> None:
        self.pending = True

    def consume(self) -> bool:
        pending, self.pending = self.pending, False
        return pending


class ChatView:
    def __init__(self, relay: Relay, scroll: Optional[ScrollHandle] = None) -> None:
        self.relay = relay
        self.scroll = scroll if scroll is not None else PageScroll()
        self.input = ""
        self.loading = False
        self._messages: List[Message] = []
        self._ids = itertools.count(1)

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def set_input(self, text: str) -> None:
        self.input = text

    def can_submit(self) -> bool:
        return bool(self.input.strip()) and not self.loading

    def _append(self, text: str, is_user: bool) -> Message:
        message = Message(id=next(self._ids), text=text, is_user=is_user)
        self._messages.append(message)
        self.scroll.scroll_to_bottom()
        return message

    async def submit(self, text: Optional[str] = None) -> bool:
        """Send the current input (or ``text``) to the relay.

        Returns False without touching the history when the input is blank or
        a request is already in flight.
        """
        if self.loading:
            return False
        if text is not None:
            self.input = text
        prompt = self.input.strip()
        if not prompt:
            return False

        self._append(prompt, is_user=True)
        self.input = ""
        self.loading = True
        try:
            reply = await self.relay.ask(prompt)
        except RelayClientError as exc:
            logger.error("Relay request failed: %s", exc.text, exc_info=exc.__cause__)
            self._append(exc.text, is_user=False)
        except Exception as exc:
            logger.exception("Chat submit failed: %s", exc)
            self._append(FALLBACK_ERROR_TEXT, is_user=False)
        else:
            self._append(reply, is_user=False)
        finally:
            self.loading = False
        return True

    async def handle_key(self, key: str, shift: bool = False) -> bool:
        """Plain Enter submits, Shift+Enter adds a line break.

        The page script applies the same rule to the textarea in the browser.
        """
        if key != "Enter":
            return False
        if shift:
            self.input += "\n"
            return False
        return await self.submit()

    def render_message(self, message: Message) -> Markup:
        return render_message(message)

    def render_history(self) -> List[Markup]:
        return [self.render_message(m) for m in self._messages]

    def reset(self) -> None:
        self._messages.clear()
        self._ids = itertools.count(1)
        self.input = ""
        self.loading = False
        if isinstance(self.scroll, PageScroll):
            self.scroll.consume()
