# posenvelope/crypto/sign.py
from cryptography.hazmat.primitives import constant_time, hashes
from cryptography.hazmat.primitives import hmac


def hmac_signature(key: bytes, data: str) -> str:
    """
    HMAC-SHA256 over the UTF-8 bytes of data, hex encoded.
    """
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(data.encode("utf-8"))
    return h.finalize().hex()


def verify(expected_hex: str, claimed_hex: str) -> bool:
    """
    Case-insensitive, constant-time comparison of two hex signatures.
    """
    if not isinstance(claimed_hex, str):
        return False
    try:
        # Encode before upper-casing so only ASCII letters change case.
        expected = expected_hex.encode("ascii").upper()
        claimed = claimed_hex.encode("ascii").upper()
    except UnicodeEncodeError:
        return False
    return constant_time.bytes_eq(expected, claimed)
