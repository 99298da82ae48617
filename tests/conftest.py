import pytest

from hashconnect import (
    HashConnect,
    HashConnectSettings,
    MemoryHub,
    MemoryRelay,
    Metadata,
    MessageUtil,
)


class FixedTopicUtil(MessageUtil):
    """MessageUtil whose topic ids are predictable."""

    def __init__(self, *topics, codec=None):
        super().__init__(codec)
        self._topics = list(topics)

    def create_random_topic_id(self) -> str:
        return self._topics.pop(0)


@pytest.fixture
def hub():
    return MemoryHub()


@pytest.fixture
def dapp_metadata():
    return Metadata(
        name="Example dApp",
        description="Swap <b>tokens</b> & more",
        icon="https://example.com/icon.png",
        url="https://example.com",
    )


@pytest.fixture
def wallet_metadata():
    return Metadata(
        name="Wallet & Co",
        description="Test wallet",
        icon="https://wallet.test/icon.png",
        url="wallet.test",
    )


@pytest.fixture
def settings():
    return HashConnectSettings(extension_query_delay_ms=0)


@pytest.fixture
def make_client(hub, settings):
    def _make(name, **kwargs):
        kwargs.setdefault("settings", settings)
        return HashConnect(MemoryRelay(hub, name=name), **kwargs)
    return _make


@pytest.fixture
def pair_clients():
    """Run the full pairing handshake; returns the shared topic."""
    async def _pair(dapp, wallet, dapp_md, wallet_md, accounts=("0.0.123",), network="testnet"):
        await dapp.init(dapp_md)
        await wallet.init(wallet_md)
        state = await dapp.connect()
        token = dapp.generate_pairing_string(state, network, False)
        pairing = wallet.decode_pairing_string(token)
        await wallet.pair(pairing, list(accounts), network)
        return state.topic
    return _pair


@pytest.fixture
def fixed_topic_util():
    return FixedTopicUtil
