# posenvelope/config.py
import os

from dotenv import load_dotenv

from posenvelope.message import Secrets, Stamp

load_dotenv()

KEY_BYTES = 32


class ConfigError(ValueError):
    pass


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"{name} is not set")
    return value


def _hex_key(name: str) -> bytes:
    raw = _require(name)
    try:
        key = bytes.fromhex(raw)
    except ValueError as e:
        raise ConfigError(f"{name} is not a hex string") from e
    if len(key) != KEY_BYTES:
        raise ConfigError(f"{name} must be {KEY_BYTES} bytes, got {len(key)}")
    return key


def load_secrets() -> Secrets:
    """
    POS_ENC_KEY / POS_HMAC_KEY: hex, 32 bytes each.
    """
    return Secrets(enc_key=_hex_key("POS_ENC_KEY"), hmac_key=_hex_key("POS_HMAC_KEY"))


def load_stamp() -> Stamp:
    """
    Secrets plus POS_SENDER_ID (required) and POS_SERVER_TIME_DELTA (ms, default 0).
    """
    raw_delta = os.getenv("POS_SERVER_TIME_DELTA", "0").strip() or "0"
    try:
        delta = int(raw_delta)
    except ValueError as e:
        raise ConfigError(f"POS_SERVER_TIME_DELTA is not an integer: {raw_delta!r}") from e

    return Stamp(
        sender_id=_require("POS_SENDER_ID"),
        secrets=load_secrets(),
        server_time_delta=delta,
    )
