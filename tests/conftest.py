"""Shared test fixtures."""

import pytest

from posenvelope.crypto.capability import DefaultCrypto
from posenvelope.message import Secrets, Stamp

# 2023-11-14T22:13:20.000 UTC
FIXED_NOW_MS = 1_700_000_000_000


class SpyCrypto:
    """DefaultCrypto that records which primitives were called, in order."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._inner = DefaultCrypto()

    def hmac_signature(self, key: bytes, data: str) -> str:
        self.calls.append("hmac")
        return self._inner.hmac_signature(key, data)

    def encrypt(self, key: bytes, plaintext: str) -> str:
        self.calls.append("encrypt")
        return self._inner.encrypt(key, plaintext)

    def decrypt(self, key: bytes, ciphertext: str) -> str:
        self.calls.append("decrypt")
        return self._inner.decrypt(key, ciphertext)


@pytest.fixture()
def secrets() -> Secrets:
    return Secrets(enc_key=bytes(range(32)), hmac_key=bytes(range(32, 64)))


@pytest.fixture()
def stamp(secrets: Secrets) -> Stamp:
    return Stamp(sender_id="pos1", secrets=secrets, server_time_delta=0)


@pytest.fixture()
def spy() -> SpyCrypto:
    return SpyCrypto()


@pytest.fixture()
def clock():
    return lambda: FIXED_NOW_MS
