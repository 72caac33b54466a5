"""
Exceptions for the LiqPay gateway client mapped to unified BusinessException variants.
"""
from __future__ import annotations

from typing import Any, Optional

from domain.common.exceptions import BusinessException
from shared.codes.payment_codes import ErrorInfo, PaymentCode, describe_error


class PaymentGatewayError(BusinessException):
    """Base class for every error raised by the gateway client."""

    def __init__(
        self,
        message: str,
        *,
        code: int = PaymentCode.PROVIDER_ERROR,
        error_type: str = "PaymentGatewayError",
        provider: str = "liqpay",
        details: Optional[dict] = None,
    ):
        full_details = {"provider": provider}
        if details:
            full_details.update(details)
        super().__init__(
            code=code,
            message=message,
            error_type=error_type,
            details=full_details,
        )
        self.provider = provider


class EncodingError(PaymentGatewayError):
    """Payload cannot be serialized to its canonical form."""

    def __init__(self, message: str, *, provider: str = "liqpay", details: Optional[dict] = None):
        super().__init__(
            message,
            code=PaymentCode.ENCODING_ERROR,
            error_type="EncodingError",
            provider=provider,
            details=details,
        )


class TransportError(PaymentGatewayError):
    """The HTTP round trip itself failed (network, DNS, TLS, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "liqpay",
        timeout: bool = False,
        details: Optional[dict] = None,
    ):
        super().__init__(
            message,
            code=PaymentCode.TIMEOUT if timeout else PaymentCode.PROVIDER_RECOVERABLE,
            error_type="TransportError",
            provider=provider,
            details=details,
        )
        self.timeout = timeout


class RedirectError(PaymentGatewayError):
    """Checkout response did not carry the expected 302 + Location."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        provider: str = "liqpay",
    ):
        super().__init__(
            message,
            code=PaymentCode.REDIRECT_ERROR,
            error_type="RedirectError",
            provider=provider,
            details={"status_code": status_code},
        )
        self.status_code = status_code


class DecodeError(PaymentGatewayError):
    """Body or callback data is not valid JSON/base64 or does not fit the record."""

    def __init__(self, message: str, *, provider: str = "liqpay", details: Optional[dict] = None):
        super().__init__(
            message,
            code=PaymentCode.DECODE_ERROR,
            error_type="DecodeError",
            provider=provider,
            details=details,
        )


class APIError(PaymentGatewayError):
    """LiqPay reported a business failure in an otherwise well-formed response.

    `response` holds the decoded typed record when the caller asked for one,
    since LiqPay attaches diagnostic fields to failed operations.
    """

    def __init__(
        self,
        *,
        status: str,
        err_code: str,
        err_description: str,
        http_status: Optional[int] = None,
        response: Any = None,
        provider: str = "liqpay",
    ):
        super().__init__(
            f"status: {status}, code: {err_code}, description: {err_description}",
            code=PaymentCode.PROVIDER_ERROR,
            error_type="APIError",
            provider=provider,
            details={
                "status": status,
                "err_code": err_code,
                "err_description": err_description,
                "http_status": http_status,
            },
        )
        self.status = status
        self.err_code = err_code
        self.err_description = err_description
        self.http_status = http_status
        self.response = response

    @property
    def error_info(self) -> Optional[ErrorInfo]:
        return describe_error(self.err_code)


class SignatureMismatchError(PaymentGatewayError):
    """Callback signature does not match; the payload must be discarded."""

    def __init__(self, message: str = "callback signature verification failed", *, provider: str = "liqpay"):
        super().__init__(
            message,
            code=PaymentCode.SIGNATURE_ERROR,
            error_type="SignatureMismatchError",
            provider=provider,
        )
