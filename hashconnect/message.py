from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Union
from enum import StrEnum

# Message type tags carried in every envelope
class RelayMessageType(StrEnum):
    TRANSACTION                 = "Transaction"
    TRANSACTION_RESPONSE        = "TransactionResponse"
    APPROVE_PAIRING             = "ApprovePairing"
    REJECTED                    = "Rejected"
    ACKNOWLEDGE                 = "Acknowledge"
    ADDITIONAL_ACCOUNT_REQUEST  = "AdditionalAccountRequest"
    ADDITIONAL_ACCOUNT_RESPONSE = "AdditionalAccountResponse"


def _field(data: Dict[str, Any], key: str, kind, *, optional: bool = False):
    if not isinstance(data, dict):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    value = data.get(key)
    if value is None and optional:
        return None
    # bool is an int subclass; keep them apart
    if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
        raise TypeError(f"field {key!r} must be {getattr(kind, '__name__', kind)}, got {type(value).__name__}")
    return value


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    items = _field(data, key, list)
    if not all(isinstance(i, str) for i in items):
        raise TypeError(f"field {key!r} must be a list of strings")
    return list(items)


@dataclass
class Metadata:
    """
    Identity of a dApp or wallet. public_key is stamped by init().
    """
    name: str
    description: str
    icon: str
    url: Optional[str] = None
    public_key: Optional[str] = None     # base64 secp256k1 point

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "description": self.description, "icon": self.icon}
        if self.url is not None:
            out["url"] = self.url
        if self.public_key is not None:
            out["publicKey"] = self.public_key
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Metadata":
        return cls(
            name=_field(data, "name", str),
            description=_field(data, "description", str),
            icon=_field(data, "icon", str),
            url=_field(data, "url", str, optional=True),
            public_key=_field(data, "publicKey", str, optional=True),
        )

# Both sides share one shape
AppMetadata = Metadata
WalletMetadata = Metadata


@dataclass(frozen=True)
class ConnectionState:
    topic: str
    expires: int = 0    # reserved, never enforced


@dataclass(frozen=True)
class InitializationData:
    priv_key: str


@dataclass(frozen=True)
class PairingData:
    metadata: Metadata
    topic: str
    network: str
    multi_account: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "topic": self.topic,
            "network": self.network,
            "multiAccount": self.multi_account,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairingData":
        return cls(
            metadata=Metadata.from_dict(_field(data, "metadata", dict)),
            topic=_field(data, "topic", str),
            network=_field(data, "network", str),
            multi_account=_field(data, "multiAccount", bool),
        )


# ---- payloads ----
# `id` is never sent; the dispatcher fills it from the envelope on receipt.

@dataclass
class ApprovePairing:
    topic: str
    metadata: Metadata
    account_ids: List[str]
    network: str
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "metadata": self.metadata.to_dict(),
            "accountIds": list(self.account_ids),
            "network": self.network,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApprovePairing":
        return cls(
            topic=_field(data, "topic", str),
            metadata=Metadata.from_dict(_field(data, "metadata", dict)),
            account_ids=_str_list(data, "accountIds"),
            network=_field(data, "network", str),
        )


@dataclass
class TransactionMetadata:
    account_to_sign: str
    return_transaction: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"accountToSign": self.account_to_sign, "returnTransaction": self.return_transaction}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionMetadata":
        return cls(
            account_to_sign=_field(data, "accountToSign", str),
            return_transaction=bool(data.get("returnTransaction", False)),
        )


@dataclass
class Transaction:
    topic: str
    byte_array: Union[bytes, str]    # bytes locally, base64 text on the wire
    metadata: TransactionMetadata
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if not isinstance(self.byte_array, str):
            raise TypeError("byte_array must be encoded to text before serialization")
        return {"topic": self.topic, "byteArray": self.byte_array, "metadata": self.metadata.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            topic=_field(data, "topic", str),
            byte_array=_field(data, "byteArray", str),
            metadata=TransactionMetadata.from_dict(_field(data, "metadata", dict)),
        )


@dataclass
class TransactionResponse:
    topic: str
    success: bool
    receipt: Optional[str] = None
    signed_transaction: Optional[str] = None
    error: Optional[str] = None
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"topic": self.topic, "success": self.success}
        if self.receipt is not None:
            out["receipt"] = self.receipt
        if self.signed_transaction is not None:
            out["signedTransaction"] = self.signed_transaction
        if self.error is not None:
            out["error"] = self.error
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionResponse":
        return cls(
            topic=_field(data, "topic", str),
            success=_field(data, "success", bool),
            receipt=_field(data, "receipt", str, optional=True),
            signed_transaction=_field(data, "signedTransaction", str, optional=True),
            error=_field(data, "error", str, optional=True),
        )


@dataclass
class Acknowledge:
    topic: str
    result: bool
    msg_id: str
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"topic": self.topic, "result": self.result, "msg_id": self.msg_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Acknowledge":
        return cls(
            topic=_field(data, "topic", str),
            result=_field(data, "result", bool),
            msg_id=_field(data, "msg_id", str),
        )


@dataclass
class Rejected:
    topic: str
    msg_id: str
    reason: Optional[str] = None
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"topic": self.topic, "msg_id": self.msg_id}
        if self.reason is not None:
            out["reason"] = self.reason
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rejected":
        return cls(
            topic=_field(data, "topic", str),
            msg_id=_field(data, "msg_id", str),
            reason=_field(data, "reason", str, optional=True),
        )


@dataclass
class AdditionalAccountRequest:
    topic: str
    network: str
    multi_account: bool = False
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"topic": self.topic, "network": self.network, "multiAccount": self.multi_account}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionalAccountRequest":
        return cls(
            topic=_field(data, "topic", str),
            network=_field(data, "network", str),
            multi_account=bool(data.get("multiAccount", False)),
        )


@dataclass
class AdditionalAccountResponse:
    topic: str
    account_ids: List[str]
    network: str
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"topic": self.topic, "accountIds": list(self.account_ids), "network": self.network}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionalAccountResponse":
        return cls(
            topic=_field(data, "topic", str),
            account_ids=_str_list(data, "accountIds"),
            network=_field(data, "network", str),
        )


Payload = Union[
    ApprovePairing, Transaction, TransactionResponse, Acknowledge,
    Rejected, AdditionalAccountRequest, AdditionalAccountResponse,
]

PAYLOAD_TYPES: Dict[RelayMessageType, type] = {
    RelayMessageType.APPROVE_PAIRING:             ApprovePairing,
    RelayMessageType.TRANSACTION:                 Transaction,
    RelayMessageType.TRANSACTION_RESPONSE:        TransactionResponse,
    RelayMessageType.ACKNOWLEDGE:                 Acknowledge,
    RelayMessageType.REJECTED:                    Rejected,
    RelayMessageType.ADDITIONAL_ACCOUNT_REQUEST:  AdditionalAccountRequest,
    RelayMessageType.ADDITIONAL_ACCOUNT_RESPONSE: AdditionalAccountResponse,
}


@dataclass(frozen=True)
class RelayMessage:
    """
    Envelope fields, 'data' is the payload's wire dict
    """
    id: str                          # message id (uuid hex), used for ack/reject correlation
    type: RelayMessageType
    data: Dict[str, Any] = field(default_factory=dict)
    origin: Optional[str] = None     # sender's origin, if the platform knows one
    timestamp: str = ""              # sender's message time (ISO-8601, UTC)

    def payload(self) -> Payload:
        """Typed payload record with `id` set to this envelope's id."""
        record = PAYLOAD_TYPES[self.type].from_dict(self.data)
        record.id = self.id
        return record
