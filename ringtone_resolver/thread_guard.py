from __future__ import annotations

import threading
from typing import Optional

from .models import WrongThreadError


class ThreadGuard:
    """Refuses blocking ringtone work on the dispatch thread.

    The dispatch thread defaults to the interpreter's main thread. A disabled
    guard never raises, which lets tests drive the resolver directly.
    """

    def __init__(
        self, *, enabled: bool = True, dispatch_thread: Optional[threading.Thread] = None
    ) -> None:
        self.enabled = enabled
        self._dispatch_thread = dispatch_thread

    @property
    def dispatch_thread(self) -> threading.Thread:
        return self._dispatch_thread or threading.main_thread()

    def on_dispatch_thread(self) -> bool:
        return threading.current_thread() is self.dispatch_thread

    def check_not_on_dispatch_thread(self, operation: str = "operation") -> None:
        if not self.enabled:
            return
        if self.on_dispatch_thread():
            raise WrongThreadError(
                f"{operation} must not be called on the dispatch thread "
                f"({self.dispatch_thread.name})"
            )
