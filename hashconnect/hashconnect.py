from __future__ import annotations
import asyncio
import base64
import binascii
import dataclasses
import logging
from typing import Awaitable, Iterable, Optional, Union

from .builder import MessageUtil
from .config import HashConnectSettings
from .discovery import ExtensionDiscovery
from .errors import HashConnectError, InvalidTopicState, MessageDecodeError, TransportFailure
from .events import EventBus
from .keys import KeyManager
from .message import (
    Acknowledge,
    AdditionalAccountRequest,
    AdditionalAccountResponse,
    ApprovePairing,
    ConnectionState,
    InitializationData,
    Metadata,
    PairingData,
    Payload,
    Rejected,
    RelayMessage,
    RelayMessageType,
    Transaction,
    TransactionResponse,
)
from .pairing import decode_pairing_string, encode_pairing_string
from .platform import LocalPlatform, Platform
from .registry import SessionRegistry, TopicState
from .sanitize import sanitize, sanitize_metadata
from .transport import Transport

logger = logging.getLogger(__name__)


class HashConnect:

    # Notes:
    # - Every outbound message is addressed with the key registered for its topic;
    #   acknowledge() is the one exception and takes the key explicitly
    # - Sends on a topic need a registered key, then a PAIRED topic; neither failure publishes
    # - Free text is sanitized into copies at send time; local metadata is only
    #   touched by init() (public key, origin)
    # - Inbound payloads are decoded and routed one at a time; bad payloads are dropped

    def __init__(self, transport: Transport, *,
                 messages: Optional[MessageUtil] = None,
                 platform: Optional[Platform] = None,
                 settings: Optional[HashConnectSettings] = None,
                 debug: bool = False):
        self.relay = transport
        self.messages = messages or MessageUtil()
        self.platform = platform or LocalPlatform()
        self.settings = settings or HashConnectSettings()
        self.debug = debug or self.settings.debug
        if self.debug:
            logging.getLogger("hashconnect").setLevel(logging.DEBUG)

        self.keys = KeyManager()
        self.registry = SessionRegistry()
        self.events = EventBus()
        self.metadata: Optional[Metadata] = None

        self._inbound = asyncio.Lock()
        self._discovery = ExtensionDiscovery(
            self.platform, self.events.found_extension, self.settings.extension_query_delay_ms)

        logger.debug("hashconnect - Setting up events")
        self.relay.on_payload(self._on_payload)

    @property
    def public_keys(self):
        """topic -> counterparty public key"""
        return self.registry.keys

    async def init(self, metadata: Metadata, priv_key: Optional[str] = None) -> InitializationData:
        """
        Load or generate the session key, stamp its public key (and the
        platform origin, if any) into `metadata`, start the relay and
        register the key for inbound decryption.

        Pass a previously returned priv_key to resume sessions after a restart.
        """
        logger.debug("hashconnect - Initializing")
        self.metadata = metadata
        priv_key = self.keys.load(priv_key)
        self.keys.stamp(metadata)

        origin = self.platform.current_origin()
        if origin:
            metadata.url = origin

        await self._transport("init", self.relay.init())
        self.relay.add_decryption_key(priv_key)

        return InitializationData(priv_key=priv_key)

    async def connect(self, topic: Optional[str] = None,
                      metadata_to_connect: Optional[Metadata] = None) -> ConnectionState:
        """
        Subscribe to `topic` (a new one if omitted). With counterparty
        metadata the topic resumes as PAIRED under its public key.
        """
        if not topic:
            logger.debug("hashconnect - Creating new topic id")
            topic = self.messages.create_random_topic_id()

        if not self.registry.can_move(topic, TopicState.CONNECTED):
            raise InvalidTopicState(topic, self.registry.state_of(topic), TopicState.CONNECTED)

        resuming = False
        if metadata_to_connect is not None:
            if metadata_to_connect.public_key:
                self.registry.register_key(topic, metadata_to_connect.public_key)
                resuming = True
            else:
                logger.warning("hashconnect - metadata for topic %s has no public key", topic)

        state = ConnectionState(topic=topic, expires=0)
        await self._transport("subscribe", self.relay.subscribe(state.topic))

        self.registry.move(topic, TopicState.CONNECTED)
        if resuming:
            self.registry.move(topic, TopicState.PAIRED)
        return self.registry.record_connection(state)

    # ---- send functions ----

    async def send_transaction(self, topic: str, transaction: Transaction) -> str:
        if isinstance(transaction.byte_array, str):
            raise TypeError("Transaction.byte_array must be bytes")
        encoded = base64.b64encode(bytes(transaction.byte_array)).decode("ascii")
        out = dataclasses.replace(transaction, byte_array=encoded, id=None)
        return await self._send(topic, RelayMessageType.TRANSACTION, out)

    async def request_additional_accounts(self, topic: str, message: AdditionalAccountRequest) -> str:
        out = dataclasses.replace(message, network=sanitize(message.network), id=None)
        return await self._send(topic, RelayMessageType.ADDITIONAL_ACCOUNT_REQUEST, out)

    async def send_additional_accounts(self, topic: str, message: AdditionalAccountResponse) -> str:
        out = dataclasses.replace(
            message, account_ids=list(message.account_ids), network=sanitize(message.network), id=None)
        return await self._send(topic, RelayMessageType.ADDITIONAL_ACCOUNT_RESPONSE, out)

    async def send_transaction_response(self, topic: str, message: TransactionResponse) -> str:
        out = dataclasses.replace(message, id=None)
        return await self._send(topic, RelayMessageType.TRANSACTION_RESPONSE, out)

    async def pair(self, pairing_data: PairingData, accounts: Iterable[str], network: str) -> ConnectionState:
        """
        Wallet side: approve a pairing string. Subscribes to its topic,
        registers the dApp's key and publishes ApprovePairing.
        """
        local = self._require_init()
        logger.debug("hashconnect - Pairing to %s", pairing_data.metadata.name)
        topic = pairing_data.topic
        counterparty_key = pairing_data.metadata.public_key
        if not counterparty_key:
            raise ValueError(f"pairing data for topic {topic!r} carries no public key")

        state = await self.connect(topic)

        msg = ApprovePairing(
            topic=topic,
            metadata=sanitize_metadata(local),
            account_ids=list(accounts),
            network=sanitize(network),
        )
        self.registry.register_key(topic, counterparty_key)

        payload = self.messages.prepare_simple_message(RelayMessageType.APPROVE_PAIRING, msg, self._origin())
        await self._publish(topic, payload, counterparty_key)
        self.registry.move(topic, TopicState.PAIRED)

        return state

    async def reject(self, topic: str, reason: Optional[str], msg_id: str) -> str:
        """
        Reject a request by id. On a topic that is not yet paired this
        rejects the pairing itself and the topic becomes REJECTED. A topic
        that was never connected cannot be rejected.
        """
        key = self.registry.require_key(topic)
        ends_topic = self.registry.state_of(topic) != TopicState.PAIRED
        if ends_topic and not self.registry.can_move(topic, TopicState.REJECTED):
            raise InvalidTopicState(topic, self.registry.state_of(topic), TopicState.REJECTED)

        body = Rejected(topic=topic, msg_id=msg_id, reason=sanitize(reason))
        msg = self.messages.prepare_simple_message(RelayMessageType.REJECTED, body, self._origin())
        await self._publish(topic, msg, key)

        if ends_topic:
            self.registry.move(topic, TopicState.REJECTED)
        return msg.id

    async def acknowledge(self, topic: str, pub_key: str, msg_id: str) -> str:
        ack = Acknowledge(topic=topic, result=True, msg_id=msg_id)
        msg = self.messages.prepare_simple_message(RelayMessageType.ACKNOWLEDGE, ack, self._origin())
        await self._publish(topic, msg, pub_key)
        return msg.id

    # ---- helpers ----

    def generate_pairing_string(self, state: ConnectionState, network: str, multi_account: bool) -> str:
        logger.debug("hashconnect - Generating pairing string")
        return encode_pairing_string(self._require_init(), state, network, multi_account)

    def decode_pairing_string(self, pairing_string: str) -> PairingData:
        return decode_pairing_string(pairing_string)

    # ---- local wallet stuff ----

    async def find_local_wallets(self) -> None:
        logger.debug("hashconnect - Finding local wallets")
        await self._discovery.query()

    def connect_to_local_wallet(self, pairing_string: str) -> None:
        logger.debug("hashconnect - Connecting to local wallet")
        self._discovery.connect(pairing_string)

    # ---- internals ----

    async def _send(self, topic: str, msg_type: RelayMessageType, body: Payload) -> str:
        key = self.registry.require_key(topic)
        self.registry.require_state(topic, TopicState.PAIRED)
        msg = self.messages.prepare_simple_message(msg_type, body, self._origin())
        await self._publish(topic, msg, key)
        return msg.id

    async def _publish(self, topic: str, msg: RelayMessage, public_key: str) -> None:
        frame = self.messages.encode(msg)
        await self._transport("publish", self.relay.publish(topic, frame, public_key))

    async def _transport(self, what: str, call: Awaitable[None]) -> None:
        try:
            await call
        except HashConnectError:
            raise
        except Exception as ex:
            raise TransportFailure(f"transport {what} failed: {ex}") from ex

    def _origin(self) -> Optional[str]:
        return self.platform.current_origin()

    def _require_init(self) -> Metadata:
        if self.metadata is None:
            raise RuntimeError("HashConnect.init() has not been called")
        return self.metadata

    async def _on_payload(self, payload: Union[bytes, bytearray]) -> None:
        if not payload:
            return
        async with self._inbound:
            try:
                message = self.messages.decode(bytes(payload))
            except MessageDecodeError:
                return
            await self._route(message)

    async def _route(self, message: RelayMessage) -> None:
        record = message.payload()
        topic = record.topic
        self.registry.touch(topic)
        logger.debug("hashconnect - %s received on %s", message.type, topic)

        if message.type == RelayMessageType.APPROVE_PAIRING:
            # only a topic we connected and have not paired yet accepts an approval
            if self.registry.state_of(topic) != TopicState.CONNECTED:
                logger.warning("hashconnect - ignoring pairing approval for %s topic %s",
                               self.registry.state_of(topic), topic)
                return
            if record.metadata.public_key:
                self.registry.register_key(topic, record.metadata.public_key)
            self.registry.move(topic, TopicState.PAIRED)

        elif message.type == RelayMessageType.TRANSACTION:
            try:
                record.byte_array = base64.b64decode(record.byte_array, validate=True)
            except binascii.Error:
                logger.warning("hashconnect - dropping transaction %s with bad byteArray", message.id)
                return

        elif message.type == RelayMessageType.REJECTED:
            if self.registry.state_of(topic) == TopicState.CONNECTED:
                self.registry.move(topic, TopicState.REJECTED)

        self.events.channel_for(message.type).emit(record)

        if self.settings.auto_acknowledge and message.type != RelayMessageType.ACKNOWLEDGE:
            await self._auto_acknowledge(topic, message.id)

    async def _auto_acknowledge(self, topic: str, msg_id: str) -> None:
        key = self.registry.public_key_for(topic)
        if not key:
            return
        try:
            await self.acknowledge(topic, key, msg_id)
        except HashConnectError as ex:
            logger.warning("hashconnect - acknowledging %s on %s failed: %s", msg_id, topic, ex)
