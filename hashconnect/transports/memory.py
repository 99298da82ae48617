from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Set

from ..keys import derive_public_key
from ..transport import Transport, PayloadHandler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishedFrame:
    topic: str
    frame: bytes
    public_key: str
    sender: str


class MemoryHub:
    """
    In-process stand-in for the gossip network.

    Mapping:
    - subscribe -> relay joins the topic's member set
    - publish   -> frame goes to every member of the topic holding a
                   decryption key whose public key is the addressed one

    Nothing is encrypted; addressing by key is the only filter.
    """

    _default: Optional["MemoryHub"] = None

    def __init__(self):
        self.members: Dict[str, Set["MemoryRelay"]] = {}
        self.published: List[PublishedFrame] = []

    @classmethod
    def default(cls) -> "MemoryHub":
        if cls._default is None:
            cls._default = cls()
        return cls._default

    def join(self, topic: str, relay: "MemoryRelay") -> None:
        self.members.setdefault(topic, set()).add(relay)

    async def route(self, sender: "MemoryRelay", topic: str, frame: bytes, public_key: str) -> int:
        self.published.append(PublishedFrame(topic, frame, public_key, sender.name))
        delivered = 0
        # sorted for a stable delivery order across runs
        for relay in sorted(self.members.get(topic, ()), key=lambda r: r.name):
            if relay.can_decrypt(public_key):
                await relay.deliver(frame)
                delivered += 1
        if not delivered:
            logger.debug("memory hub - no recipient for %s on topic %s", public_key[:12], topic)
        return delivered

    def frames_on(self, topic: str) -> List[PublishedFrame]:
        return [p for p in self.published if p.topic == topic]


class MemoryRelay(Transport):
    def __init__(self, hub: Optional[MemoryHub] = None, name: str = "relay"):
        self.hub = hub or MemoryHub.default()
        self.name = name
        self.started = False
        self.topics: Set[str] = set()
        self._public_key: Optional[str] = None
        self._handlers: List[PayloadHandler] = []

    async def init(self) -> None:
        self.started = True

    async def subscribe(self, topic: str) -> None:
        self._require_started()
        self.topics.add(topic)
        self.hub.join(topic, self)

    async def publish(self, topic: str, frame: bytes, public_key: str) -> None:
        self._require_started()
        if not public_key:
            raise ValueError("publish requires a recipient public key")
        await self.hub.route(self, topic, frame, public_key)

    def add_decryption_key(self, private_key: str) -> None:
        # one key per session; a new key stops delivery to the old one
        self._public_key = derive_public_key(private_key)

    def on_payload(self, handler: PayloadHandler) -> None:
        self._handlers.append(handler)

    def can_decrypt(self, public_key: str) -> bool:
        return self._public_key is not None and public_key == self._public_key

    async def deliver(self, frame: bytes) -> None:
        for handler in list(self._handlers):
            await handler(frame)

    def _require_started(self) -> None:
        if not self.started:
            raise RuntimeError(f"relay {self.name!r} used before init()")
