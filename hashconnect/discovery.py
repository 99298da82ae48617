from __future__ import annotations
import asyncio
import logging

from .events import Event
from .message import Metadata
from .platform import LocalMessage, Platform

logger = logging.getLogger(__name__)

QUERY_EXTENSION = "hashconnect-query-extension"
QUERY_EXTENSION_RESPONSE = "hashconnect-query-extension-response"
CONNECT_EXTENSION = "hashconnect-connect-extension"


class ExtensionDiscovery:
    """
    Finds wallet extensions on the local platform bus: broadcast a query,
    emit the metadata of every extension that answers.
    """

    def __init__(self, platform: Platform, found: Event[Metadata], delay_ms: int = 50):
        self._platform = platform
        self._found = found
        self._delay = max(0, int(delay_ms)) / 1000.0
        self._listening = False

    async def query(self) -> None:
        """Start listening (once), then broadcast one query after the configured delay."""
        if not self._listening:
            self._platform.on_local_message(self._on_local_message)
            self._listening = True
        await asyncio.sleep(self._delay)
        self._platform.broadcast_local({"type": QUERY_EXTENSION})

    def connect(self, pairing_string: str) -> None:
        self._platform.broadcast_local({"type": CONNECT_EXTENSION, "pairingString": pairing_string})

    def _on_local_message(self, msg: LocalMessage) -> None:
        if not isinstance(msg, dict) or msg.get("type") != QUERY_EXTENSION_RESPONSE:
            return
        raw = msg.get("metadata")
        if not raw:
            return
        logger.debug("hashconnect - Local wallet metadata received %s", raw)
        try:
            metadata = Metadata.from_dict(raw)
        except TypeError as ex:
            logger.warning("hashconnect - ignoring extension with bad metadata: %s", ex)
            return
        self._found.emit(metadata)
