"""Tests for pairing string encode/decode."""

import base64
import json
import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hashconnect import (
    ConnectionState,
    MalformedPairingString,
    Metadata,
    PairingData,
    decode_pairing_string,
    encode_pairing_string,
)


SAFE = string.ascii_letters + string.digits + "_. "

safe_text = st.text(alphabet=SAFE)

metadata_strategy = st.builds(
    Metadata,
    name=safe_text,
    description=safe_text,
    icon=st.text(),
    url=st.none() | safe_text,
    public_key=st.none() | st.text(alphabet=string.ascii_letters + string.digits + "+/=", min_size=1),
)

pairing_strategy = st.builds(
    PairingData,
    metadata=metadata_strategy,
    topic=st.text(min_size=1),
    network=safe_text,
    multi_account=st.booleans(),
)


@given(pairing_strategy)
def test_round_trip(p):
    token = encode_pairing_string(p.metadata, ConnectionState(topic=p.topic), p.network, p.multi_account)
    assert decode_pairing_string(token) == p


def test_encode_sanitizes_without_mutating():
    md = Metadata(name="A&B", description="x<y", icon="i", url="https://a.io", public_key="KEY")
    token = encode_pairing_string(md, ConnectionState(topic="t1"), "test net!", True)
    data = decode_pairing_string(token)

    assert data.metadata.name == "A&#38;B"
    assert data.metadata.description == "x&#60;y"
    assert data.metadata.url == "https&#58;&#47;&#47;a.io"
    assert data.metadata.public_key == "KEY"
    assert data.network == "test net&#33;"
    assert data.multi_account is True
    assert md.name == "A&B"


def test_token_is_base64_json():
    md = Metadata(name="n", description="d", icon="i")
    token = encode_pairing_string(md, ConnectionState(topic="t1"), "testnet", False)
    obj = json.loads(base64.b64decode(token))
    assert obj == {
        "metadata": {"name": "n", "description": "d", "icon": "i"},
        "topic": "t1",
        "network": "testnet",
        "multiAccount": False,
    }


def _b64(obj) -> str:
    return base64.b64encode(json.dumps(obj).encode()).decode()


@pytest.mark.parametrize(
    "token",
    [
        "not base64 at all!",
        base64.b64encode(b"{not json").decode(),
        base64.b64encode(b"\xff\xfe").decode(),
        _b64([1, 2, 3]),
        _b64({"topic": "t", "network": "n", "multiAccount": False}),
        _b64({"metadata": {"name": "n", "description": "d", "icon": "i"},
              "topic": "t", "network": "n", "multiAccount": "yes"}),
        _b64({"metadata": {"name": 1, "description": "d", "icon": "i"},
              "topic": "t", "network": "n", "multiAccount": False}),
        "",
    ],
)
def test_malformed_tokens(token):
    with pytest.raises(MalformedPairingString):
        decode_pairing_string(token)


def test_non_string_token():
    with pytest.raises(MalformedPairingString):
        decode_pairing_string(None)
