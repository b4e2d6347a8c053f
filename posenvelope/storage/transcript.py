# posenvelope/storage/transcript.py
import os
from typing import Literal, TextIO

from posenvelope.common.utils import sha256_hex
from posenvelope.message import Message


def open_transcript(path: str) -> TextIO:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return open(path, "a+", encoding="utf-8")


def log_message(
    f: TextIO,
    direction: Literal["in", "out"],
    message: Message,
):
    """
    One line per message: direction|datetime|event|id|sender|hmac
    """
    if direction not in ("in", "out"):
        raise ValueError(f"direction must be 'in' or 'out', got {direction!r}")
    hmac_sig = message.incoming_hmac or "-"
    line = (
        f"{direction}|{message.datetime_stamp}|{message.event}|"
        f"{message.id}|{message.sender_id}|{hmac_sig}\n"
    )
    f.write(line)
    f.flush()


def compute_transcript_hash(path: str) -> str:
    with open(path, "rb") as f:
        data = f.read()
    return sha256_hex(data)
