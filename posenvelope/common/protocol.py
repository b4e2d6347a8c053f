# posenvelope/common/protocol.py
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Events(str, Enum):
    """Event names carried in every message."""

    PairRequest = "pair_request"
    KeyRequest = "key_request"
    KeyResponse = "key_response"
    KeyCheck = "key_check"
    PairResponse = "pair_response"

    LoginRequest = "login_request"
    LoginResponse = "login_response"

    Ping = "ping"
    Pong = "pong"

    PurchaseRequest = "purchase"
    PurchaseResponse = "purchase_response"
    CancelTransactionRequest = "cancel_transaction"
    GetLastTransactionRequest = "get_last_transaction"
    GetLastTransactionResponse = "last_transaction"
    RefundRequest = "refund"
    RefundResponse = "refund_response"
    SignatureRequired = "signature_required"
    SignatureDeclined = "signature_decline"
    SignatureAccepted = "signature_accept"

    SettleRequest = "settle"
    SettleResponse = "settle_response"

    KeyRollRequest = "request_use_next_keys"
    KeyRollResponse = "response_use_next_keys"

    Error = "error"

    # Synthesized locally, never sent.
    InvalidHmacSignature = "_INVALID_SIGNATURE_"
    Unparseable = "unparseable"


class SuccessState(str, Enum):
    Unknown = "Unknown"
    Success = "Success"
    Failed = "Failed"


class WireMessage(BaseModel):
    """The inner "message" object. senderId is only present in plain form."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    event: str
    data: Any = None
    datetime: str = ""
    sender_id: str = Field(default="", alias="senderId")

    @field_validator("datetime", "sender_id", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return "" if v is None else v


class PlainEnvelope(BaseModel):
    message: WireMessage


class EncryptedEnvelope(BaseModel):
    # Extra keys are tolerated but a "message" key never reaches this model.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    enc: str
    # Left unchecked here: a missing or non-string hmac fails verification.
    hmac: Any = None
    sender_id: str = Field(default="", alias="senderId")
