from __future__ import annotations
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, Optional, Set
import time

from .errors import InvalidTopicState, UnregisteredCounterpartyKey
from .message import ConnectionState


class TopicState(StrEnum):
    UNCONNECTED = "unconnected"
    CONNECTED   = "connected"
    PAIRED      = "paired"
    REJECTED    = "rejected"     # terminal


# current -> states it may move to (staying put is always allowed except out of REJECTED)
_TRANSITIONS: Dict[TopicState, Set[TopicState]] = {
    TopicState.UNCONNECTED: {TopicState.CONNECTED},
    TopicState.CONNECTED:   {TopicState.PAIRED, TopicState.REJECTED},
    TopicState.PAIRED:      set(),
    TopicState.REJECTED:    set(),
}


@dataclass
class SessionRegistry:
    # topic -> counterparty public key (base64)
    keys: Dict[str, str] = field(default_factory=dict)
    # topic -> connection record handed back by connect()
    connections: Dict[str, ConnectionState] = field(default_factory=dict)

    # parallel metadata maps (flat)
    states: Dict[str, TopicState] = field(default_factory=dict)   # topic -> state
    last_seen: Dict[str, float]   = field(default_factory=dict)   # topic -> ts of last inbound

    def register_key(self, topic: str, public_key: str) -> None:
        """Idempotent upsert."""
        self.keys[topic] = public_key

    def public_key_for(self, topic: str) -> Optional[str]:
        return self.keys.get(topic)

    def require_key(self, topic: str) -> str:
        key = self.keys.get(topic)
        if not key:
            raise UnregisteredCounterpartyKey(topic)
        return key

    def state_of(self, topic: str) -> TopicState:
        return self.states.get(topic, TopicState.UNCONNECTED)

    def can_move(self, topic: str, new: TopicState) -> bool:
        current = self.state_of(topic)
        if current == TopicState.REJECTED:
            return False
        # reconnecting a paired topic keeps it paired
        return new == current or new in _TRANSITIONS[current] or (
            current == TopicState.PAIRED and new == TopicState.CONNECTED)

    def move(self, topic: str, new: TopicState) -> TopicState:
        if not self.can_move(topic, new):
            raise InvalidTopicState(topic, self.state_of(topic), new)
        current = self.state_of(topic)
        if not (current == TopicState.PAIRED and new == TopicState.CONNECTED):
            self.states[topic] = new
        return self.states[topic]

    def require_state(self, topic: str, wanted: TopicState) -> None:
        current = self.state_of(topic)
        if current != wanted:
            raise InvalidTopicState(topic, current, wanted)

    def record_connection(self, state: ConnectionState) -> ConnectionState:
        self.connections[state.topic] = state
        return state

    def touch(self, topic: str) -> None:
        self.last_seen[topic] = time.time()

    def topics(self, state: Optional[TopicState] = None) -> Set[str]:
        if state is None:
            return set(self.states)
        return {t for t, s in self.states.items() if s == state}
