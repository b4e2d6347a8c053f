# posenvelope/crypto/capability.py
from typing import Protocol

from cryptography.exceptions import UnsupportedAlgorithm

from posenvelope.crypto import aes, sign


class CryptoError(Exception):
    """A crypto primitive rejected its input (bad key, bad ciphertext...)."""


class CryptoCapability(Protocol):
    """
    What the envelope codec needs from the crypto layer.

    hmac_signature must be deterministic, and
    decrypt(key, encrypt(key, x)) == x for every x.
    """

    def hmac_signature(self, key: bytes, data: str) -> str: ...

    def encrypt(self, key: bytes, plaintext: str) -> str: ...

    def decrypt(self, key: bytes, ciphertext: str) -> str: ...


class DefaultCrypto:
    """AES-256-CBC (hex) + HMAC-SHA256 (hex) on top of `cryptography`."""

    def hmac_signature(self, key: bytes, data: str) -> str:
        try:
            return sign.hmac_signature(key, data)
        except (TypeError, ValueError, UnsupportedAlgorithm) as e:
            raise CryptoError(f"hmac failed: {e}") from e

    def encrypt(self, key: bytes, plaintext: str) -> str:
        try:
            return aes.encrypt_aes(key, plaintext)
        except (TypeError, ValueError, UnsupportedAlgorithm) as e:
            raise CryptoError(f"encryption failed: {e}") from e

    def decrypt(self, key: bytes, ciphertext: str) -> str:
        # UnicodeDecodeError is a ValueError, as is a bad hex string.
        try:
            return aes.decrypt_aes(key, ciphertext)
        except (TypeError, ValueError, UnsupportedAlgorithm) as e:
            raise CryptoError(f"decryption failed: {e}") from e


DEFAULT_CRYPTO = DefaultCrypto()
