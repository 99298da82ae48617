from __future__ import annotations
import base64
import binascii
import json

from .errors import MalformedPairingString
from .message import ConnectionState, Metadata, PairingData
from .sanitize import sanitize, sanitize_metadata


def encode_pairing_string(metadata: Metadata, state: ConnectionState,
                          network: str, multi_account: bool) -> str:
    """
    base64(JSON(PairingData)) for the local identity and the given topic.
    Free text is sanitized on the way out; `metadata` itself is not modified.
    """
    data = PairingData(
        metadata=sanitize_metadata(metadata),
        topic=state.topic,
        network=sanitize(network),
        multi_account=multi_account,
    )
    raw = json.dumps(data.to_dict(), separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_pairing_string(pairing_string: str) -> PairingData:
    """
    Inverse of encode_pairing_string. Free text is returned as received and
    must still be treated as untrusted.
    """
    try:
        raw = base64.b64decode(pairing_string.strip(), validate=True)
        obj = json.loads(raw.decode("utf-8"))
        return PairingData.from_dict(obj)
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError, AttributeError) as ex:
        raise MalformedPairingString(f"invalid pairing string: {ex}") from ex
