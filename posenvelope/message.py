# posenvelope/message.py
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from posenvelope.common import utils
from posenvelope.common.protocol import Events, SuccessState

logger = logging.getLogger(__name__)

NO_ERROR = "NONE"


def _truthy(value: Any) -> bool:
    # Terminal payloads follow JSON/JS truthiness: empty arrays and objects count.
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


class Secrets(BaseModel):
    model_config = ConfigDict(frozen=True)

    enc_key: bytes = Field(repr=False)
    hmac_key: bytes = Field(repr=False)


class Stamp(BaseModel):
    """
    What an outgoing Message needs to become wire JSON:
    who we are, the session secrets and our offset from the peer's clock.
    """

    model_config = ConfigDict(frozen=True)

    sender_id: str
    secrets: Secrets
    server_time_delta: int = 0


class DecodeFailure(str, Enum):
    UNPARSEABLE_OUTER = "unparseable_outer"
    INVALID_SIGNATURE = "invalid_signature"
    UNPARSEABLE_INNER = "unparseable_inner"


class Message(BaseModel):
    """
    One protocol message, inbound or outbound.

    needs_encryption picks the envelope shape on encode and is never sent.
    decrypted_json holds the plaintext JSON actually used, for inspection only.
    failure is set only on the sentinel messages decode() synthesizes.
    """

    id: str
    event: str
    data: Any = None
    needs_encryption: bool = False
    datetime_stamp: str = ""
    sender_id: str = ""
    incoming_hmac: str = ""
    decrypted_json: str = ""
    failure: Optional[DecodeFailure] = None

    @field_validator("event", mode="before")
    @classmethod
    def _event_name(cls, v):
        return v.value if isinstance(v, Events) else v

    def get_success_state(self) -> SuccessState:
        if not isinstance(self.data, Mapping) or "success" not in self.data:
            return SuccessState.Unknown
        return SuccessState.Success if _truthy(self.data["success"]) else SuccessState.Failed

    def get_error(self) -> str:
        if self.data is None:
            raise ValueError(f"message {self.id} ({self.event}) has no data")
        reason = self.data.get("error_reason") if isinstance(self.data, Mapping) else None
        return reason if reason else NO_ERROR

    def get_server_time_delta(self, clock: Callable[[], int] = utils.now_ms) -> int:
        """
        Milliseconds between this message's stamped time and our clock.
        Returns 0 when the stamp cannot be parsed.
        """
        try:
            msg_time = utils.parse_timestamp(self.datetime_stamp)
        except (TypeError, ValueError, OverflowError):
            logger.warning("unparsable datetime %r on message %s", self.datetime_stamp, self.id)
            return 0
        return msg_time - clock()
