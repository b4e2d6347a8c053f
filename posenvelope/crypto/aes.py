# posenvelope/crypto/aes.py
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives import padding

# The terminal protocol uses a fixed all-zero IV.
_IV = bytes(16)


def _pad(data: bytes, block_size: int = 128) -> bytes:
    padder = padding.PKCS7(block_size).padder()
    return padder.update(data) + padder.finalize()


def _unpad(padded: bytes, block_size: int = 128) -> bytes:
    unpadder = padding.PKCS7(block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def encrypt_aes(key: bytes, plaintext: str) -> str:
    """
    AES-256 CBC + PKCS#7 padding, zero IV
    key: 32 bytes
    returns: upper-case hex ciphertext
    """
    cipher = Cipher(algorithms.AES(key), modes.CBC(_IV))
    encryptor = cipher.encryptor()
    padded = _pad(plaintext.encode("utf-8"))
    return (encryptor.update(padded) + encryptor.finalize()).hex().upper()


def decrypt_aes(key: bytes, ciphertext: str) -> str:
    cipher = Cipher(algorithms.AES(key), modes.CBC(_IV))
    decryptor = cipher.decryptor()
    padded = decryptor.update(bytes.fromhex(ciphertext)) + decryptor.finalize()
    return _unpad(padded).decode("utf-8")
