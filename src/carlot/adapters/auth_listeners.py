from __future__ import annotations

import logging
import threading
from typing import Callable

from carlot.domain.auth import AuthEvent
from carlot.ports.auth_service import AuthListener

logger = logging.getLogger(__name__)


class AuthListenerRegistry:
    """Fan-out of auth events to subscribed listeners."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: list[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: AuthEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            # one failing listener must not stop the others from hearing the event
            try:
                listener(event)
            except Exception:
                logger.exception("Auth listener failed", extra={"event": event.type.value})
