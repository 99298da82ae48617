from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from .message import (
    Acknowledge,
    AdditionalAccountRequest,
    AdditionalAccountResponse,
    ApprovePairing,
    Metadata,
    Rejected,
    RelayMessageType,
    Transaction,
    TransactionResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
Handler = Callable[[T], None]


class Event(Generic[T]):
    """One notification channel. No buffering: emitting with no subscribers drops the value."""

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Handler] = []

    def on(self, handler: Handler) -> Handler:
        """Subscribe; returns the handler so it can be used as a decorator."""
        self._handlers.append(handler)
        return handler

    subscribe = on

    def off(self, handler: Handler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def emit(self, value: T) -> int:
        """Deliver to a snapshot of current subscribers, in order. Returns how many were called."""
        handlers = list(self._handlers)
        for h in handlers:
            try:
                h(value)
            except Exception:
                logger.exception("hashconnect - %s handler %r failed", self.name, h)
        return len(handlers)

    def __len__(self) -> int:
        return len(self._handlers)


@dataclass
class EventBus:
    found_extension: Event[Metadata] = field(default_factory=lambda: Event("found_extension"))
    pairing: Event[ApprovePairing] = field(default_factory=lambda: Event("pairing"))
    transaction: Event[Transaction] = field(default_factory=lambda: Event("transaction"))
    transaction_response: Event[TransactionResponse] = field(default_factory=lambda: Event("transaction_response"))
    acknowledge: Event[Acknowledge] = field(default_factory=lambda: Event("acknowledge"))
    additional_account_request: Event[AdditionalAccountRequest] = field(
        default_factory=lambda: Event("additional_account_request"))
    additional_account_response: Event[AdditionalAccountResponse] = field(
        default_factory=lambda: Event("additional_account_response"))
    rejected: Event[Rejected] = field(default_factory=lambda: Event("rejected"))

    def channel_for(self, msg_type: RelayMessageType) -> Optional[Event]:
        name = _ROUTES.get(msg_type)
        return getattr(self, name) if name else None

    def channels(self) -> Dict[str, Event]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


# message type -> EventBus attribute
_ROUTES: Dict[RelayMessageType, str] = {
    RelayMessageType.APPROVE_PAIRING:             "pairing",
    RelayMessageType.TRANSACTION:                 "transaction",
    RelayMessageType.TRANSACTION_RESPONSE:        "transaction_response",
    RelayMessageType.ACKNOWLEDGE:                 "acknowledge",
    RelayMessageType.REJECTED:                    "rejected",
    RelayMessageType.ADDITIONAL_ACCOUNT_REQUEST:  "additional_account_request",
    RelayMessageType.ADDITIONAL_ACCOUNT_RESPONSE: "additional_account_response",
}
