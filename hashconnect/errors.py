from __future__ import annotations


class HashConnectError(Exception):
    """Base class for every error raised by this package."""


class MalformedPairingString(HashConnectError, ValueError):
    """Pairing string is not valid base64 or does not hold a PairingData record."""


class MessageDecodeError(HashConnectError, ValueError):
    """Inbound frame could not be turned into a RelayMessage."""


class TransportFailure(HashConnectError):
    """init/subscribe/publish on the transport raised."""


class UnregisteredCounterpartyKey(HashConnectError):
    def __init__(self, topic: str):
        super().__init__(f"No public key registered for topic {topic!r}")
        self.topic = topic


class InvalidTopicState(HashConnectError):
    def __init__(self, topic: str, state, wanted):
        super().__init__(f"Topic {topic!r} is {state}; cannot move to/act as {wanted}")
        self.topic = topic
        self.state = state
        self.wanted = wanted
