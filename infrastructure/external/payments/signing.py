"""
LiqPay signing engine: canonical encoding, default injection and signatures.

Everything here is pure. The signature is `base64(sha1(secret + data + secret))`
where `data` is the base64 of the compact JSON payload, so the serializer's key
order is part of the signature input.
"""
from __future__ import annotations

import base64
import hashlib
import json
from dataclasses import dataclass
from typing import Any, Mapping, Union

from pydantic import BaseModel

from infrastructure.external.payments.exceptions import EncodingError
from shared.codes.payment_codes import LIQPAY_API_VERSION


Payload = Union[Mapping[str, Any], BaseModel]


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def sign(secret: Union[str, bytes], message: Union[str, bytes]) -> str:
    secret_b = _to_bytes(secret)
    digest = hashlib.sha1(secret_b + _to_bytes(message) + secret_b).digest()
    return base64.b64encode(digest).decode("ascii")


def as_mapping(payload: Payload) -> dict[str, Any]:
    """Plain ordered dict view of a payload; records dump in field order."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", exclude_none=True, by_alias=True)
    return dict(payload)


def encode(payload: Payload) -> str:
    try:
        raw = json.dumps(
            as_mapping(payload),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"payload is not serializable: {exc}") from exc
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def inject_defaults(
    payload: Payload,
    public_key: str,
    version: str = LIQPAY_API_VERSION,
) -> dict[str, Any]:
    """Return a copy with `version` and `public_key` filled in.

    Present, non-empty values are kept. Missing ones are appended after the
    caller's fields, so repeated injection yields the same mapping.
    """
    enriched = as_mapping(payload)
    for key, value in (("version", version), ("public_key", public_key)):
        if enriched.get(key) in (None, ""):
            enriched.pop(key, None)
            enriched[key] = value
    return enriched


@dataclass(frozen=True)
class Envelope:
    data: str
    signature: str

    def as_form(self) -> dict[str, str]:
        return {"data": self.data, "signature": self.signature}


def build_envelope(
    payload: Payload,
    *,
    public_key: str,
    private_key: str,
    version: str = LIQPAY_API_VERSION,
) -> Envelope:
    data = encode(inject_defaults(payload, public_key, version))
    return Envelope(data=data, signature=sign(private_key, data))
