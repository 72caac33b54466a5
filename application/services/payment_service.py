"""
Application service orchestrating payment use-cases.

This class depends only on the application PaymentGateway port and DTOs.
Gateway implementations are provided by infrastructure and must be injected
from the composition root, keeping dependencies one-way.
"""
from __future__ import annotations

from typing import Union

from application.dtos.payments import (
    Callback,
    CancelInvoiceResponse,
    CheckoutRequest,
    EditSubscriptionRequest,
    InvoiceRequest,
    InvoiceResponse,
    RefundResponse,
    StatusResponse,
    SubscriptionRequest,
    SubscriptionResponse,
)
from application.ports.payment_gateway import PaymentGateway
from core.logging_config import get_logger


logger = get_logger(__name__)


class PaymentService:
    def __init__(self, gateway: PaymentGateway) -> None:
        self.gateway = gateway

    async def create_checkout(self, req: CheckoutRequest) -> str:
        logger.info(
            "liqpay_checkout_request",
            order_id=req.order_id,
            provider=self.gateway.provider,
            amount=req.amount,
            currency=req.currency,
        )
        url = await self.gateway.create_checkout(req)
        logger.info("liqpay_checkout_created", order_id=req.order_id, provider=self.gateway.provider)
        return url

    async def create_subscription(self, req: SubscriptionRequest) -> str:
        logger.info(
            "liqpay_subscription_request",
            order_id=req.order_id,
            provider=self.gateway.provider,
            periodicity=req.subscribe_periodicity,
        )
        return await self.gateway.create_subscription(req)

    async def update_subscription(self, req: EditSubscriptionRequest) -> SubscriptionResponse:
        logger.info("liqpay_subscription_update_request", order_id=req.order_id, provider=self.gateway.provider)
        return await self.gateway.update_subscription(req)

    async def remove_subscription(self, order_id: str) -> SubscriptionResponse:
        logger.info("liqpay_unsubscribe_request", order_id=order_id, provider=self.gateway.provider)
        return await self.gateway.remove_subscription(order_id)

    async def create_invoice(self, req: InvoiceRequest) -> InvoiceResponse:
        logger.info("liqpay_invoice_request", order_id=req.order_id, provider=self.gateway.provider)
        invoice = await self.gateway.create_invoice(req)
        logger.info(
            "liqpay_invoice_created",
            order_id=req.order_id,
            provider=self.gateway.provider,
            invoice_id=invoice.id,
            status=invoice.status,
        )
        return invoice

    async def cancel_invoice(self, order_id: str) -> CancelInvoiceResponse:
        logger.info("liqpay_invoice_cancel_request", order_id=order_id, provider=self.gateway.provider)
        return await self.gateway.cancel_invoice(order_id)

    async def status(self, order_id: str) -> StatusResponse:
        logger.info("liqpay_status_request", order_id=order_id, provider=self.gateway.provider)
        return await self.gateway.status(order_id)

    async def refund(self, order_id: str, amount: Union[str, int, float]) -> RefundResponse:
        logger.info("liqpay_refund_request", order_id=order_id, provider=self.gateway.provider, amount=str(amount))
        result = await self.gateway.refund(order_id, amount)
        logger.info(
            "liqpay_refund_response",
            order_id=order_id,
            provider=self.gateway.provider,
            status=result.status,
            payment_id=result.payment_id,
        )
        return result

    def handle_callback(self, data: str, signature: str) -> Callback:
        # Verify first; unauthenticated data is never parsed
        self.gateway.validate_callback(data, signature)
        callback = self.gateway.parse_callback(data)
        logger.info(
            "liqpay_callback_verified",
            provider=self.gateway.provider,
            order_id=callback.order_id,
            status=callback.status,
            action=callback.action,
        )
        return callback

    async def aclose(self) -> None:
        # Best-effort close underlying resources
        close = getattr(self.gateway, "aclose", None)
        if callable(close):
            await close()
