# posenvelope/codec.py
import json
import logging
from typing import Any, Callable, Optional, Union

from posenvelope.common import utils
from posenvelope.common.protocol import (
    EncryptedEnvelope,
    Events,
    PlainEnvelope,
    WireMessage,
)
from posenvelope.crypto import sign
from posenvelope.crypto.capability import DEFAULT_CRYPTO, CryptoCapability
from posenvelope.message import DecodeFailure, Message, Secrets, Stamp

logger = logging.getLogger(__name__)

_LOG_SNIPPET = 200


def _snippet(text: str) -> str:
    return text if len(text) <= _LOG_SNIPPET else text[:_LOG_SNIPPET] + "..."


def _unparseable(text: str, failure: DecodeFailure) -> Message:
    return Message(
        id="Unknown",
        event=Events.Unparseable,
        data={"msg": text},
        failure=failure,
    )


def _invalid_signature() -> Message:
    return Message(
        id="_",
        event=Events.InvalidHmacSignature,
        data={},
        failure=DecodeFailure.INVALID_SIGNATURE,
    )


def _parse_envelope(obj: Any) -> Union[PlainEnvelope, EncryptedEnvelope]:
    """
    A top-level "message" key means plain form, whatever else is present.
    Raises ValidationError when obj fits neither shape.
    """
    if isinstance(obj, dict) and obj.get("message") is not None:
        return PlainEnvelope.model_validate(obj)
    return EncryptedEnvelope.model_validate(obj)


def decode(
    msg_json: str,
    secrets: Secrets,
    crypto: Optional[CryptoCapability] = None,
) -> Message:
    """
    Turn wire JSON into a Message.

    Malformed input never raises: it comes back as a sentinel Message
    whose `failure` says what went wrong. The HMAC over "enc" is checked
    before anything is decrypted. Errors from the crypto capability
    itself (e.g. a bad key) propagate.
    """
    crypto = crypto or DEFAULT_CRYPTO

    try:
        if isinstance(msg_json, bytes):
            msg_json = msg_json.decode("utf-8")
        envelope = _parse_envelope(json.loads(msg_json))
    except (ValueError, TypeError, RecursionError) as e:
        # ValidationError and JSONDecodeError are both ValueErrors;
        # json.loads hits RecursionError on deeply nested input.
        logger.warning("unparseable envelope: %s (%s)", _snippet(str(msg_json)), e)
        return _unparseable(str(msg_json), DecodeFailure.UNPARSEABLE_OUTER)

    if isinstance(envelope, PlainEnvelope):
        inner = envelope.message
        logger.debug("plain %s message %s", inner.event, inner.id)
        return Message(
            id=inner.id,
            event=inner.event,
            data=inner.data,
            datetime_stamp=inner.datetime,
            sender_id=inner.sender_id,
            needs_encryption=False,
            decrypted_json=msg_json,
        )

    expected = crypto.hmac_signature(secrets.hmac_key, envelope.enc)
    if not sign.verify(expected, envelope.hmac):
        logger.warning("invalid hmac signature from sender %r", envelope.sender_id)
        return _invalid_signature()

    decrypted_json = crypto.decrypt(secrets.enc_key, envelope.enc)

    try:
        inner = PlainEnvelope.model_validate(json.loads(decrypted_json)).message
    except (ValueError, TypeError, RecursionError) as e:
        logger.warning("unparseable decrypted message: %s (%s)", _snippet(decrypted_json), e)
        return _unparseable(decrypted_json, DecodeFailure.UNPARSEABLE_INNER)

    logger.debug("encrypted %s message %s", inner.event, inner.id)
    return Message(
        id=inner.id,
        event=inner.event,
        data=inner.data,
        datetime_stamp=inner.datetime,
        # The inner object carries no senderId when encrypted.
        sender_id=inner.sender_id or envelope.sender_id,
        needs_encryption=True,
        incoming_hmac=envelope.hmac,
        decrypted_json=decrypted_json,
    )


def encode(
    message: Message,
    stamp: Stamp,
    crypto: Optional[CryptoCapability] = None,
    clock: Callable[[], int] = utils.now_ms,
) -> str:
    """
    Turn a Message into wire JSON using the caller's Stamp.

    Sets message.datetime_stamp (our clock plus the server offset) and
    message.sender_id. Encrypted form is {"enc", "hmac", "senderId"};
    plain form keeps senderId inside "message".
    """
    crypto = crypto or DEFAULT_CRYPTO

    message.datetime_stamp = utils.format_timestamp(clock() + stamp.server_time_delta)
    message.sender_id = stamp.sender_id

    inner = WireMessage(
        id=message.id,
        event=message.event,
        data=message.data,
        datetime=message.datetime_stamp,
        sender_id=stamp.sender_id,
    )

    if not message.needs_encryption:
        message.decrypted_json = json.dumps(
            {"message": inner.model_dump(by_alias=True)}
        )
        logger.debug("encoded plain %s message %s", message.event, message.id)
        return message.decrypted_json

    message.decrypted_json = json.dumps(
        {"message": inner.model_dump(exclude={"sender_id"})}
    )
    enc = crypto.encrypt(stamp.secrets.enc_key, message.decrypted_json)
    hmac_sig = crypto.hmac_signature(stamp.secrets.hmac_key, enc).upper()
    logger.debug("encoded encrypted %s message %s", message.event, message.id)
    return json.dumps(
        EncryptedEnvelope(enc=enc, hmac=hmac_sig, sender_id=stamp.sender_id).model_dump(
            by_alias=True
        )
    )
