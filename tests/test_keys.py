import base64

import pytest

from hashconnect import KeyManager, Metadata, derive_public_key, generate_key


# secp256k1 generator point, i.e. the public key for scalar 1
G = bytes.fromhex(
    "04"
    "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)


def test_generate_key_is_32_bytes():
    raw = base64.b64decode(generate_key())
    assert len(raw) == 32


def test_generated_keys_differ():
    assert generate_key() != generate_key()


def test_derive_known_vector():
    one = base64.b64encode((1).to_bytes(32, "big")).decode()
    assert base64.b64decode(derive_public_key(one)) == G


def test_derive_is_deterministic():
    priv = generate_key()
    pub = derive_public_key(priv)
    assert derive_public_key(priv) == pub
    assert len(base64.b64decode(pub)) == 65


@pytest.mark.parametrize("bad", ["%%%not-base64", base64.b64encode(b"short").decode()])
def test_derive_rejects_malformed_key(bad):
    with pytest.raises(ValueError):
        derive_public_key(bad)


def test_key_manager_load_and_stamp():
    km = KeyManager()
    priv = generate_key()
    assert km.load(priv) == priv
    md = Metadata(name="n", description="d", icon="i")
    assert km.stamp(md) is md
    assert md.public_key == derive_public_key(priv)


def test_key_manager_generates_when_missing():
    km = KeyManager()
    priv = km.load()
    assert km.private_key == priv
    assert km.public_key == derive_public_key(priv)


def test_key_manager_reload_replaces_key():
    km = KeyManager()
    first = km.load()
    second = km.load(generate_key())
    assert second != first
    assert km.private_key == second


def test_stamp_before_load():
    with pytest.raises(RuntimeError):
        KeyManager().stamp(Metadata(name="n", description="d", icon="i"))
