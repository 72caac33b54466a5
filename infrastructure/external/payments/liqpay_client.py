"""
LiqPay API v3 adapter.

Each public method names an action and picks the transport mode:
- checkout and subscription creation go to the checkout endpoint and return
  the URL LiqPay redirects the payer to;
- everything else is a server-to-server call decoded into a typed record.
Business failures raise `APIError`, whose `response` keeps the decoded record.
"""
from __future__ import annotations

from typing import Optional, Union

import httpx

from application.dtos.payments import (
    Action,
    CancelInvoiceRequest,
    CancelInvoiceResponse,
    Callback,
    CheckoutRequest,
    EditSubscriptionRequest,
    InvoiceRequest,
    InvoiceResponse,
    RefundRequest,
    RefundResponse,
    StatusRequest,
    StatusResponse,
    SubscriptionRequest,
    SubscriptionResponse,
    TransportMode,
    UnsubscribeRequest,
)
from core.settings import PaymentSettings, payment_settings
from infrastructure.external.payments.base import BasePaymentClient
from infrastructure.external.payments.callbacks import CallbackVerifier
from shared.codes.payment_codes import (
    LIQPAY_API_VERSION,
    LIQPAY_CHECKOUT_URL,
    LIQPAY_REQUEST_URL,
)


class LiqPayClient(BasePaymentClient):
    provider = "liqpay"

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
        if not public_key:
            raise ValueError("public_key is required")
        if not private_key:
            raise ValueError("private_key is required")
        super().__init__(
            public_key=public_key,
            private_key=private_key,
            debug=debug,
            http_client=http_client,
            timeouts=timeouts,
            api_version=api_version,
            checkout_url=checkout_url,
            request_url=request_url,
        )
        self._callbacks = CallbackVerifier(private_key)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[PaymentSettings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "LiqPayClient":
        settings = settings or payment_settings
        cfg = settings.liqpay
        if not cfg.public_key or not cfg.private_key:
            raise RuntimeError("LIQPAY__PUBLIC_KEY and LIQPAY__PRIVATE_KEY must be configured")
        return cls(
            public_key=cfg.public_key,
            private_key=cfg.private_key,
            debug=cfg.debug or settings.debug,
            http_client=http_client,
            timeouts=settings.timeouts.model_dump(),
            api_version=cfg.api_version,
            checkout_url=cfg.checkout_url,
            request_url=cfg.request_url,
        )

    # Redirect flow
    async def create_checkout(self, req: CheckoutRequest) -> str:
        return await self.execute(Action.PAY, req, TransportMode.REDIRECT)

    async def create_subscription(self, req: SubscriptionRequest) -> str:
        req = req.model_copy(update={"subscribe": "1"})
        return await self.execute(Action.SUBSCRIBE, req, TransportMode.REDIRECT)

    # Server-to-server flow
    async def update_subscription(self, req: EditSubscriptionRequest) -> SubscriptionResponse:
        return await self.execute(
            Action.SUBSCRIBE_UPDATE, req, TransportMode.DIRECT, SubscriptionResponse
        )

    async def remove_subscription(self, order_id: str) -> SubscriptionResponse:
        req = UnsubscribeRequest(order_id=order_id)
        return await self.execute(Action.UNSUBSCRIBE, req, TransportMode.DIRECT, SubscriptionResponse)

    async def create_invoice(self, req: InvoiceRequest) -> InvoiceResponse:
        return await self.execute(Action.INVOICE_SEND, req, TransportMode.DIRECT, InvoiceResponse)

    async def cancel_invoice(self, order_id: str) -> CancelInvoiceResponse:
        req = CancelInvoiceRequest(order_id=order_id)
        return await self.execute(
            Action.INVOICE_CANCEL, req, TransportMode.DIRECT, CancelInvoiceResponse
        )

    async def status(self, order_id: str) -> StatusResponse:
        req = StatusRequest(order_id=order_id)
        return await self.execute(Action.STATUS, req, TransportMode.DIRECT, StatusResponse)

    async def refund(self, order_id: str, amount: Union[str, int, float]) -> RefundResponse:
        req = RefundRequest(order_id=order_id, amount=str(amount))
        return await self.execute(Action.REFUND, req, TransportMode.DIRECT, RefundResponse)

    # Callbacks
    def validate_callback(self, data: str, signature: str) -> None:
        self._callbacks.validate(data, signature)

    def parse_callback(self, data: str) -> Callback:
        return self._callbacks.parse(data)
