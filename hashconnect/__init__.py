"""
Public API:
- HashConnect: pairing/session core (init, connect, pair, send_*, reject, acknowledge)
- create_hashconnect: factory wiring transport, codec, platform and settings
- Message records: Metadata, PairingData, ConnectionState, RelayMessage, payloads
- Transport: abstract relay transports must implement; MemoryHub/MemoryRelay in-process
- SessionRegistry, TopicState: topic -> counterparty key and per-topic state
- EventBus, Event: one channel per inbound message type
- sanitize, encode_pairing_string, decode_pairing_string: free-text and pairing helpers
"""

# Core runtime
from .hashconnect import HashConnect
from .factory import create_hashconnect
from .config import HashConnectSettings

# Wire types
from .message import (
    Acknowledge,
    AdditionalAccountRequest,
    AdditionalAccountResponse,
    AppMetadata,
    ApprovePairing,
    ConnectionState,
    InitializationData,
    Metadata,
    PairingData,
    Rejected,
    RelayMessage,
    RelayMessageType,
    Transaction,
    TransactionMetadata,
    TransactionResponse,
    WalletMetadata,
)
from .builder import MessageBuilder, MessageUtil

# Transport contract
from .transport import Transport
from .transports.memory import MemoryHub, MemoryRelay
from .platform import LocalPlatform, Platform

# Keys, sessions, events
from .keys import KeyManager, derive_public_key, generate_key
from .registry import SessionRegistry, TopicState
from .events import Event, EventBus

# Helpers & errors
from .sanitize import sanitize, sanitize_metadata
from .pairing import decode_pairing_string, encode_pairing_string
from .errors import (
    HashConnectError,
    InvalidTopicState,
    MalformedPairingString,
    MessageDecodeError,
    TransportFailure,
    UnregisteredCounterpartyKey,
)

__all__ = [
    "HashConnect",
    "create_hashconnect",
    "HashConnectSettings",
    "Acknowledge",
    "AdditionalAccountRequest",
    "AdditionalAccountResponse",
    "AppMetadata",
    "ApprovePairing",
    "ConnectionState",
    "InitializationData",
    "Metadata",
    "PairingData",
    "Rejected",
    "RelayMessage",
    "RelayMessageType",
    "Transaction",
    "TransactionMetadata",
    "TransactionResponse",
    "WalletMetadata",
    "MessageBuilder",
    "MessageUtil",
    "Transport",
    "MemoryHub",
    "MemoryRelay",
    "LocalPlatform",
    "Platform",
    "KeyManager",
    "derive_public_key",
    "generate_key",
    "SessionRegistry",
    "TopicState",
    "Event",
    "EventBus",
    "sanitize",
    "sanitize_metadata",
    "decode_pairing_string",
    "encode_pairing_string",
    "HashConnectError",
    "InvalidTopicState",
    "MalformedPairingString",
    "MessageDecodeError",
    "TransportFailure",
    "UnregisteredCounterpartyKey",
]

__version__ = "0.1.0"
