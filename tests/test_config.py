import logging

import pytest
from pydantic import ValidationError

from hashconnect import HashConnect, HashConnectSettings, MemoryHub, MemoryRelay, create_hashconnect
from hashconnect.codecs import JSONCodec
from hashconnect.config import configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("DEBUG", "LOG_LEVEL", "CODEC", "TRANSPORT", "AUTO_ACKNOWLEDGE", "EXTENSION_QUERY_DELAY_MS"):
        monkeypatch.delenv(f"HASHCONNECT_{var}", raising=False)


def test_defaults():
    s = HashConnectSettings()
    assert s.debug is False
    assert s.codec == "json"
    assert s.transport == "memory"
    assert s.auto_acknowledge is True
    assert s.extension_query_delay_ms == 50


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("HASHCONNECT_CODEC", "msgpack")
    monkeypatch.setenv("HASHCONNECT_AUTO_ACKNOWLEDGE", "false")
    monkeypatch.setenv("HASHCONNECT_EXTENSION_QUERY_DELAY_MS", "0")

    s = HashConnectSettings()

    assert s.codec == "msgpack"
    assert s.auto_acknowledge is False
    assert s.extension_query_delay_ms == 0


def test_invalid_values_rejected(monkeypatch):
    monkeypatch.setenv("HASHCONNECT_TRANSPORT", "carrier-pigeon")
    with pytest.raises(ValidationError):
        HashConnectSettings()
    with pytest.raises(ValidationError):
        HashConnectSettings(transport="memory", extension_query_delay_ms=-1)


def test_configure_logging_debug_wins():
    configure_logging(HashConnectSettings(debug=True, log_level="ERROR"))
    assert logging.getLogger("hashconnect").level == logging.DEBUG
    configure_logging(HashConnectSettings(log_level="warning"))
    assert logging.getLogger("hashconnect").level == logging.WARNING


def test_factory_memory_with_labels():
    hub = MemoryHub()
    client = create_hashconnect(transport="memory", codec="msgpack", hub=hub, name="dapp")

    assert isinstance(client, HashConnect)
    assert isinstance(client.relay, MemoryRelay)
    assert client.relay.hub is hub
    assert client.relay.name == "dapp"
    assert client.messages.codec.name == "msgpack"


def test_factory_uses_settings(monkeypatch):
    monkeypatch.setenv("HASHCONNECT_CODEC", "msgpack")
    monkeypatch.setenv("HASHCONNECT_AUTO_ACKNOWLEDGE", "0")
    client = create_hashconnect(hub=MemoryHub())

    assert client.messages.codec.name == "msgpack"
    assert client.settings.auto_acknowledge is False


def test_factory_accepts_instances():
    relay = MemoryRelay(MemoryHub(), name="w")
    codec = JSONCodec()
    client = create_hashconnect(transport=relay, codec=codec, debug=True)

    assert client.relay is relay
    assert client.messages.codec is codec
    assert client.debug is True


def test_factory_unknown_labels():
    with pytest.raises(ValueError):
        create_hashconnect(transport="smoke-signals")
    with pytest.raises(ValueError):
        create_hashconnect(codec="xml", hub=MemoryHub())


@pytest.mark.asyncio
async def test_msgpack_clients_pair(dapp_metadata, wallet_metadata, pair_clients):
    hub = MemoryHub()
    dapp = create_hashconnect(codec="msgpack", hub=hub, name="dapp")
    wallet = create_hashconnect(codec="msgpack", hub=hub, name="wallet")

    topic = await pair_clients(dapp, wallet, dapp_metadata, wallet_metadata)

    assert dapp.registry.public_key_for(topic) == wallet_metadata.public_key
