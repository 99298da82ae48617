from __future__ import annotations
from datetime import datetime, timezone
import logging
import uuid
from typing import Optional, Dict, Any, Union

from .codecs import Codec, JSONCodec
from .errors import MessageDecodeError
from .message import RelayMessage, RelayMessageType, Payload
from .wire import pack_frame, unpack_frame

logger = logging.getLogger(__name__)


class MessageBuilder:
    """
    Builder that always produces a valid RelayMessage.
    Payload records are converted to their wire dict; a plain dict is
    taken as already being in wire form.
    """
    def __init__(self, origin: Optional[str] = None):
        self._env: Dict[str, Any] = {
            "id":        _uuid(),
            "type":      None,
            "data":      {},
            "origin":    origin,
            "timestamp": _now_iso(),
        }

    def of(self, msg_type: RelayMessageType, body: Union[Payload, Dict[str, Any]]):
        self._env["type"] = RelayMessageType(msg_type)
        self._env["data"] = body if isinstance(body, dict) else body.to_dict()
        return self

    def with_id(self, msg_id: str):
        self._env["id"] = msg_id
        return self

    def build(self) -> RelayMessage:
        if self._env["type"] is None:
            raise ValueError("RelayMessage requires a type; call .of() first")
        return RelayMessage(**self._env)


class MessageUtil:
    """
    Default message-codec collaborator: topic ids, envelope construction,
    and frame encode/decode through a pluggable Codec.
    """
    def __init__(self, codec: Optional[Codec] = None):
        self.codec = codec or JSONCodec()

    def create_random_topic_id(self) -> str:
        return str(uuid.uuid4())

    def prepare_simple_message(self, msg_type: RelayMessageType,
                               body: Union[Payload, Dict[str, Any]],
                               origin: Optional[str] = None) -> RelayMessage:
        return MessageBuilder(origin).of(msg_type, body).build()

    def encode(self, msg: RelayMessage) -> bytes:
        return pack_frame(msg, self.codec)

    def decode(self, payload: bytes) -> RelayMessage:
        try:
            msg = unpack_frame(payload, self.codec)
            # validate the body now so routing never sees a bad record
            msg.payload()
            return msg
        except Exception as ex:
            logger.warning("hashconnect - undecodable payload (%d bytes): %s", len(payload), ex)
            raise MessageDecodeError(str(ex)) from ex


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

def _uuid() -> str:
    return uuid.uuid4().hex
