from __future__ import annotations
import asyncio
import json
import logging
import threading
from typing import List, Optional, Tuple

from ..keys import derive_public_key
from ..transport import Transport, PayloadHandler

try:
    from zyre import Zyre, ZyreEvent
except Exception as e:
    raise RuntimeError("Zyre Python bindings are required. Error: %r" % (e,))

logger = logging.getLogger(__name__)


class ZyreRelay(Transport):
    """Relay over a Zyre gossip cluster.

    Mapping:
    - topic -> Zyre group. subscribe() JOINs it, publish() SHOUTs to it.
    - the addressed public key travels in a JSON header frame; peers drop
      frames addressed to keys they cannot decrypt.

    Frames on the wire (Zmsg):
    [0] JSON-encoded headers {"key": <recipient public key>}
    [1] envelope bytes

    The receive thread hands each payload to the event loop and waits for
    it to be handled before reading the next event.
    """

    def __init__(self, peer_id: Optional[str] = None, **kwargs):
        self.peer_id = peer_id or ""
        self.node = Zyre()
        if self.peer_id:
            self.node.set_name(self.peer_id)
        self._public_key: Optional[str] = None
        self._handlers: List[PayloadHandler] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._running = False
        self._rx_thread: Optional[threading.Thread] = None

    async def init(self) -> None:
        if self._running:
            return
        self._loop = asyncio.get_running_loop()
        self.node.start()
        self._running = True
        self._rx_thread = threading.Thread(target=self._rx_loop, daemon=True)
        self._rx_thread.start()

    async def subscribe(self, topic: str) -> None:
        self.node.join(topic)

    async def publish(self, topic: str, frame: bytes, public_key: str) -> None:
        header = json.dumps({"key": public_key}, separators=(",", ":")).encode("utf-8")
        self.node.shout(topic, [header, frame])

    def add_decryption_key(self, private_key: str) -> None:
        self._public_key = derive_public_key(private_key)

    def on_payload(self, handler: PayloadHandler) -> None:
        self._handlers.append(handler)

    async def _dispatch(self, payload: bytes) -> None:
        for handler in list(self._handlers):
            await handler(payload)

    def _rx_loop(self):
        while self._running:
            try:
                event = ZyreEvent(self.node)
            except Exception:
                logger.exception("zyre relay - failed to read event")
                continue
            if not event:
                continue
            etype = event.type()
            if isinstance(etype, bytes):
                etype = etype.decode()
            if etype != "SHOUT":
                continue

            headers, payload = self._parse_frames(event.msg())
            if self._public_key is None or headers.get("key") != self._public_key:
                continue
            future = asyncio.run_coroutine_threadsafe(self._dispatch(payload), self._loop)
            try:
                future.result()
            except Exception:
                logger.exception("zyre relay - payload handler failed")

    def _parse_frames(self, zmsg) -> Tuple[dict, bytes]:
        frames = []
        while True:
            data = zmsg.popmem()
            if not data:
                break
            frames.append(bytes(data))
        headers = {}
        if len(frames) >= 2:
            try:
                headers = json.loads(frames[0].decode("utf-8"))
            except ValueError:
                logger.warning("zyre relay - dropping frame with bad header")
            return headers, frames[1]
        return headers, b""

    def close(self):
        self._running = False
        self.node.stop()
        if self._rx_thread is not None:
            self._rx_thread.join(timeout=1.0)
            self._rx_thread = None
