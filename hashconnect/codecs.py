from __future__ import annotations
from typing import Any, Dict, List, Protocol as TypingProtocol

import json

import msgpack

class Codec(TypingProtocol):
    name: str
    def dumps(self, obj: Any) -> bytes: ...
    def loads(self, data: bytes) -> Any: ...

class JSONCodec:
    name = "json"

    def dumps(self, obj: Any) -> bytes:
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def loads(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))

class MsgPackCodec:
    name = "msgpack"

    # inbound frames come from untrusted peers
    MAX_FRAME = 1 << 20

    def dumps(self, obj: Any) -> bytes:
        return msgpack.packb(obj, use_bin_type=True)

    def loads(self, data: bytes) -> Any:
        if len(data) > self.MAX_FRAME:
            raise ValueError(f"msgpack frame too large ({len(data)} bytes)")
        return msgpack.unpackb(data, raw=False, strict_map_key=True)

class Codecs:
    """Name -> codec lookup used by the factory and settings."""
    _registry: Dict[str, Codec] = {"json": JSONCodec(), "msgpack": MsgPackCodec()}

    @classmethod
    def get(cls, name: str) -> Codec:
        if name not in cls._registry:
            raise ValueError(f"Unknown codec: {name} (known: {', '.join(cls.names())})")
        return cls._registry[name]

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._registry)
