"""
Base payment client implementing the shared request template: envelope,
transport, response classification and debug logging.

Concrete providers subclass and add per-action methods on top of `execute`.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from core.logging_config import get_logger
from application.dtos.payments import Action, TransportMode
from infrastructure.external.payments.exceptions import (
    APIError,
    DecodeError,
    RedirectError,
    TransportError,
)
from infrastructure.external.payments.signing import Envelope, Payload, build_envelope
from shared.codes.payment_codes import (
    ERROR_RESULTS,
    ERROR_STATUSES,
    LIQPAY_API_VERSION,
    LIQPAY_CHECKOUT_URL,
    LIQPAY_REQUEST_URL,
)


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class BasePaymentClient:
    provider: str = "base"

    def __init__(
        self,
        *,
        public_key: str,
        private_key: str,
        debug: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
        timeouts: Optional[dict[str, float]] = None,
        api_version: str = LIQPAY_API_VERSION,
        checkout_url: str = LIQPAY_CHECKOUT_URL,
        request_url: str = LIQPAY_REQUEST_URL,
    ) -> None:
        self.public_key = public_key
        self._private_key = private_key
        self.debug = debug
        self.api_version = api_version
        self.checkout_url = checkout_url
        self.request_url = request_url
        self._timeouts_cfg = timeouts or {"connect": 1.0, "read": 3.0, "write": 3.0, "total": 5.0}
        # A caller's client is used as-is and left open on aclose()
        self._client: Optional[httpx.AsyncClient] = http_client
        self._owns_client = http_client is None

    @property
    def timeouts(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self._timeouts_cfg["connect"],
            read=self._timeouts_cfg["read"],
            write=self._timeouts_cfg["write"],
            timeout=self._timeouts_cfg["total"],
        )

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeouts, follow_redirects=False)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    # Template
    def build_envelope(self, payload: Payload) -> Envelope:
        return build_envelope(
            payload,
            public_key=self.public_key,
            private_key=self._private_key,
            version=self.api_version,
        )

    async def execute(
        self,
        action: Union[Action, str],
        payload: Payload,
        mode: TransportMode,
        response_model: Optional[Type[T]] = None,
    ) -> Any:
        """Tag the payload with `action` and send it the way `mode` requires.

        Redirect mode returns the checkout URL. Direct mode returns the
        `response_model` instance, or the decoded dict when none is given.
        """
        tagged = self._with_fields(payload, action=Action(action))
        if TransportMode(mode) is TransportMode.REDIRECT:
            return await self.send_redirect(tagged)
        return await self.send_direct(tagged, response_model)

    async def send_redirect(self, payload: Payload) -> str:
        envelope = self.build_envelope(payload)
        response = await self._post(self.checkout_url, envelope, TransportMode.REDIRECT)
        if response.status_code != httpx.codes.FOUND:
            raise RedirectError("redirect not found", status_code=response.status_code)
        location = response.headers.get("location")
        if not location:
            raise RedirectError(
                "redirection response missing Location header",
                status_code=response.status_code,
            )
        self._log("liqpay_response", status_code=response.status_code, location=location)
        return location

    async def send_direct(self, payload: Payload, response_model: Optional[Type[T]] = None) -> Any:
        envelope = self.build_envelope(payload)
        response = await self._post(self.request_url, envelope, TransportMode.DIRECT)
        try:
            body = response.json()
        except ValueError as exc:
            raise DecodeError(
                f"failed to decode json: {exc}",
                details={"status_code": response.status_code},
            ) from exc
        if not isinstance(body, dict):
            raise DecodeError(
                f"expected a JSON object, got {type(body).__name__}",
                details={"status_code": response.status_code},
            )
        self._log("liqpay_response", status_code=response.status_code, body=body)

        result: Any = body
        if response_model is not None:
            try:
                result = response_model.model_validate(body)
            except ValidationError as exc:
                raise DecodeError(
                    f"failed to unmarshal response into {response_model.__name__}",
                    details={"status_code": response.status_code, "errors": exc.errors()},
                ) from exc

        self._raise_for_api_error(body, response.status_code, result if response_model is not None else None)
        return result

    # Helpers
    async def _post(self, url: str, envelope: Envelope, mode: TransportMode) -> httpx.Response:
        self._log("liqpay_request", method="POST", url=url, mode=mode.value)
        try:
            return await self.client.post(
                url,
                data=envelope.as_form(),
                headers=FORM_HEADERS,
                follow_redirects=False,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"request timed out: {exc}", provider=self.provider, timeout=True) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}", provider=self.provider) from exc

    def _raise_for_api_error(self, body: Mapping[str, Any], http_status: int, typed: Any) -> None:
        status = body.get("status")
        if not (_is_one_of(status, ERROR_STATUSES) or _is_one_of(body.get("result"), ERROR_RESULTS)):
            return
        err = APIError(
            status=_as_text(status),
            err_code=_as_text(body.get("err_code")),
            err_description=_as_text(body.get("err_description")),
            http_status=http_status,
            response=typed,
            provider=self.provider,
        )
        self._log(
            "liqpay_api_error",
            status=err.status,
            status_code=http_status,
            err_code=err.err_code,
            err_description=err.err_description,
        )
        raise err

    @staticmethod
    def _with_fields(payload: Payload, **fields: Any) -> Payload:
        # Copies; the caller's record or mapping stays untouched
        if isinstance(payload, BaseModel):
            return payload.model_copy(update=fields)
        return {**payload, **fields}

    def _log(self, event: str, **kwargs) -> None:
        if not self.debug:
            return
        logger.info(
            event,
            provider=self.provider,
            **kwargs,
        )


def _is_one_of(value: Any, choices: frozenset) -> bool:
    return isinstance(value, str) and value in choices


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
