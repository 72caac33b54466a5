"""
Payment gateway port (application/ports) exposing a replaceable protocol.

Application depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Protocol, Union, runtime_checkable

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


@runtime_checkable
class PaymentGateway(Protocol):
    """Gateway protocol for the LiqPay API.

    Checkout-style operations return the payer's redirect URL; the others
    return the decoded response record and raise on business failure.
    """

    provider: str

    async def create_checkout(self, req: CheckoutRequest) -> str: ...

    async def create_subscription(self, req: SubscriptionRequest) -> str: ...

    async def update_subscription(self, req: EditSubscriptionRequest) -> SubscriptionResponse: ...

    async def remove_subscription(self, order_id: str) -> SubscriptionResponse: ...

    async def create_invoice(self, req: InvoiceRequest) -> InvoiceResponse: ...

    async def cancel_invoice(self, order_id: str) -> CancelInvoiceResponse: ...

    async def status(self, order_id: str) -> StatusResponse: ...

    async def refund(self, order_id: str, amount: Union[str, int, float]) -> RefundResponse: ...

    def validate_callback(self, data: str, signature: str) -> None: ...

    def parse_callback(self, data: str) -> Callback: ...
