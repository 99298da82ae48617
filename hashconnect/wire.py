from __future__ import annotations
from typing import Optional

from .codecs import Codec, JSONCodec
from .message import RelayMessage, RelayMessageType

_DEFAULT_CODEC = JSONCodec()

def pack_frame(msg: RelayMessage, codec: Optional[Codec] = None) -> bytes:
    env_dict = {
        "id":        msg.id,
        "type":      str(msg.type),
        "data":      msg.data,
        "origin":    msg.origin,
        "timestamp": msg.timestamp,
    }
    return (codec or _DEFAULT_CODEC).dumps(env_dict)

def unpack_frame(frame: bytes, codec: Optional[Codec] = None) -> RelayMessage:
    """Raises ValueError/KeyError/TypeError on anything that is not an envelope."""
    env = (codec or _DEFAULT_CODEC).loads(frame)
    if not isinstance(env, dict):
        raise TypeError("envelope must be an object")
    data = env.get("data", {})
    if not isinstance(data, dict):
        raise TypeError("envelope data must be an object")
    return RelayMessage(
        id=str(env["id"]),
        type=RelayMessageType(env["type"]),
        data=data,
        origin=env.get("origin"),
        timestamp=env.get("timestamp", ""),
    )
