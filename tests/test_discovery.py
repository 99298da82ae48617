import logging

import pytest

from hashconnect import HashConnect, LocalPlatform, MemoryRelay
from hashconnect.discovery import CONNECT_EXTENSION, QUERY_EXTENSION, QUERY_EXTENSION_RESPONSE


EXTENSION_METADATA = {
    "name": "HashPack",
    "description": "Browser wallet",
    "icon": "https://wallet.test/icon.png",
}


@pytest.fixture
def platform():
    return LocalPlatform("https://dapp.test")


@pytest.fixture
def client(hub, settings, platform):
    return HashConnect(MemoryRelay(hub, name="dapp"), platform=platform, settings=settings)


def fake_extension(platform, metadata=EXTENSION_METADATA):
    """Answers every query on the local bus like an installed wallet extension."""
    def _answer(msg):
        if msg.get("type") == QUERY_EXTENSION:
            platform.broadcast_local({"type": QUERY_EXTENSION_RESPONSE, "metadata": metadata})
    platform.on_local_message(_answer)


@pytest.mark.asyncio
async def test_find_local_wallets_emits_found_extension(client, platform):
    fake_extension(platform)
    found = []
    client.events.found_extension.on(found.append)

    await client.find_local_wallets()

    assert platform.sent[0] == {"type": QUERY_EXTENSION}
    assert [m.name for m in found] == ["HashPack"]
    assert found[0].icon == EXTENSION_METADATA["icon"]


@pytest.mark.asyncio
async def test_query_twice_listens_once(client, platform):
    fake_extension(platform)
    found = []
    client.events.found_extension.on(found.append)

    await client.find_local_wallets()
    await client.find_local_wallets()

    assert len(found) == 2


@pytest.mark.asyncio
async def test_unrelated_and_empty_messages_ignored(client, platform):
    found = []
    client.events.found_extension.on(found.append)
    await client.find_local_wallets()

    platform.broadcast_local({"type": "something-else", "metadata": EXTENSION_METADATA})
    platform.broadcast_local({"type": QUERY_EXTENSION_RESPONSE})

    assert found == []


@pytest.mark.asyncio
async def test_bad_extension_metadata_ignored(client, platform, caplog):
    fake_extension(platform, {"name": 42})
    found = []
    client.events.found_extension.on(found.append)

    with caplog.at_level(logging.WARNING, logger="hashconnect.discovery"):
        await client.find_local_wallets()

    assert found == []
    assert "bad metadata" in caplog.text


def test_connect_to_local_wallet(client, platform):
    client.connect_to_local_wallet("PAIRING")
    assert platform.sent == [{"type": CONNECT_EXTENSION, "pairingString": "PAIRING"}]


def test_platform_without_origin():
    assert LocalPlatform().current_origin() is None
