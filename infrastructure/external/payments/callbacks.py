"""
Verification and parsing of LiqPay server callbacks.

LiqPay posts `data` and `signature` form fields to the merchant's `server_url`.
Verification and parsing are separate steps: call `validate_callback` first
and only decode the data once it passes.
"""
from __future__ import annotations

import base64
import binascii
import hmac
import json

from pydantic import ValidationError

from application.dtos.payments import Callback
from infrastructure.external.payments.exceptions import DecodeError, SignatureMismatchError
from infrastructure.external.payments.signing import sign


def _b64decode(value: str, field: str) -> bytes:
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"callback {field} is not valid base64", details={"field": field}) from exc
    # Only the canonical spelling is accepted; stray low bits before padding are not ignored
    if base64.b64encode(decoded).decode("ascii") != value:
        raise DecodeError(f"callback {field} is not canonical base64", details={"field": field})
    return decoded


def validate_callback(encoded_data: str, claimed_signature: str, secret: str) -> None:
    """Raise unless `claimed_signature` authenticates `encoded_data`.

    Two forms are accepted. The first is a base64 wrapping of the signature
    computed over the decoded data bytes. The second is the plain envelope
    signature computed over the encoded data, as used for outgoing requests.
    """
    raw_data = _b64decode(encoded_data, "data")
    decoded_signature = _b64decode(claimed_signature, "signature")

    expected = sign(secret, raw_data).encode("ascii")
    if hmac.compare_digest(decoded_signature, expected):
        return
    if hmac.compare_digest(claimed_signature.encode("utf-8"), sign(secret, encoded_data).encode("ascii")):
        return
    raise SignatureMismatchError()


def decode_callback(encoded_data: str) -> Callback:
    raw_data = _b64decode(encoded_data, "data")
    try:
        body = json.loads(raw_data)
    except ValueError as exc:
        raise DecodeError(f"callback data is not valid json: {exc}") from exc
    if not isinstance(body, dict):
        raise DecodeError(f"callback data must be a JSON object, got {type(body).__name__}")
    try:
        return Callback.model_validate(body)
    except ValidationError as exc:
        raise DecodeError("callback data does not fit the callback record", details={"errors": exc.errors()}) from exc


class CallbackVerifier:
    """Callback checks bound to one private key."""

    def __init__(self, private_key: str) -> None:
        if not private_key:
            raise ValueError("private_key is required")
        self._private_key = private_key

    def validate(self, encoded_data: str, claimed_signature: str) -> None:
        validate_callback(encoded_data, claimed_signature, self._private_key)

    def parse(self, encoded_data: str) -> Callback:
        return decode_callback(encoded_data)

    def verify_and_parse(self, encoded_data: str, claimed_signature: str) -> Callback:
        self.validate(encoded_data, claimed_signature)
        return self.parse(encoded_data)
