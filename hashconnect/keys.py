from __future__ import annotations
import base64
import logging
from typing import Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .message import Metadata

logger = logging.getLogger(__name__)

_CURVE = ec.SECP256K1()
_KEY_LEN = 32


def generate_key() -> str:
    """Fresh secp256k1 private key, base64 of the 32-byte scalar."""
    priv = ec.generate_private_key(_CURVE)
    scalar = priv.private_numbers().private_value
    return base64.b64encode(scalar.to_bytes(_KEY_LEN, "big")).decode("ascii")


def derive_public_key(priv_key: str) -> str:
    """
    base64 of the 65-byte uncompressed SEC1 point for `priv_key`.
    Raises ValueError if the key is not a valid base64 32-byte scalar.
    """
    raw = base64.b64decode(priv_key, validate=True)
    if len(raw) != _KEY_LEN:
        raise ValueError(f"private key must be {_KEY_LEN} bytes, got {len(raw)}")
    priv = ec.derive_private_key(int.from_bytes(raw, "big"), _CURVE)
    point = priv.public_key().public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    )
    return base64.b64encode(point).decode("ascii")


class KeyManager:
    """Holds exactly one local private key per initialized session."""

    def __init__(self):
        self.private_key: Optional[str] = None
        self.public_key: Optional[str] = None

    def load(self, priv_key: Optional[str] = None) -> str:
        """Use `priv_key` (session resume) or generate one; returns the private key."""
        if priv_key is None:
            logger.debug("hashconnect - Generating new encryption key")
            priv_key = generate_key()
        public_key = derive_public_key(priv_key)
        self.private_key, self.public_key = priv_key, public_key
        return priv_key

    def stamp(self, metadata: Metadata) -> Metadata:
        """Write our public key into `metadata` (in place) and return it."""
        if self.public_key is None:
            raise RuntimeError("KeyManager has no key; call load() first")
        metadata.public_key = self.public_key
        return metadata
