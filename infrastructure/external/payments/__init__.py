"""
Factory for payment gateway clients.
"""
from __future__ import annotations

from typing import Optional

import httpx

from core.settings import PaymentSettings, payment_settings
from application.ports.payment_gateway import PaymentGateway


def get_payment_gateway(
    provider: Optional[str] = None,
    *,
    settings: Optional[PaymentSettings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> PaymentGateway:
    settings = settings or payment_settings
    name = (provider or settings.default_provider).lower()
    if name == "liqpay":
        from .liqpay_client import LiqPayClient
        return LiqPayClient.from_settings(settings, http_client=http_client)
    raise ValueError(f"Unsupported payment provider: {name}")
