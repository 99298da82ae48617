from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol as TypingProtocol

logger = logging.getLogger(__name__)

LocalMessage = Dict[str, Any]
LocalHandler = Callable[[LocalMessage], None]


class Platform(TypingProtocol):
    """Host capabilities the core needs: its origin and a page-local message bus."""
    def current_origin(self) -> Optional[str]: ...
    def broadcast_local(self, msg: LocalMessage) -> None: ...
    def on_local_message(self, handler: LocalHandler) -> None: ...


class LocalPlatform:
    """
    Headless platform: optional fixed origin and an in-process local bus,
    so a wallet extension can be simulated by another listener on the same bus.
    """

    def __init__(self, origin: Optional[str] = None):
        self.origin = origin
        self._handlers: List[LocalHandler] = []
        self.sent: List[LocalMessage] = []

    def current_origin(self) -> Optional[str]:
        return self.origin

    def broadcast_local(self, msg: LocalMessage) -> None:
        self.sent.append(msg)
        for h in list(self._handlers):
            try:
                h(msg)
            except Exception:
                logger.exception("hashconnect - local message handler failed")

    def on_local_message(self, handler: LocalHandler) -> None:
        self._handlers.append(handler)
