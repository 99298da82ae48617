from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

TopicStr = str   # topic id shared by one dApp/wallet pair
KeyStr   = str   # base64 key

PayloadHandler = Callable[[bytes], Awaitable[None]]

class Transport(ABC):
    """
    Pub/sub relay the dispatcher publishes frames through.
    Implementations must deliver inbound payloads one at a time,
    awaiting the handler before handing over the next one.
    """

    @abstractmethod
    async def init(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def subscribe(self, topic: TopicStr) -> None:
        raise NotImplementedError

    @abstractmethod
    async def publish(self, topic: TopicStr, frame: bytes, public_key: KeyStr) -> None:
        """Publish one frame on `topic`, addressed to the holder of `public_key`."""
        raise NotImplementedError

    @abstractmethod
    def add_decryption_key(self, private_key: KeyStr) -> None:
        """Replace the held key; frames addressed to a previous key are no longer delivered."""
        raise NotImplementedError

    @abstractmethod
    def on_payload(self, handler: PayloadHandler) -> None:
        raise NotImplementedError
