"""Pytest bootstrap configuration.

Ensure LiqPay credentials are set before test collection and module imports
that depend on payment settings, and provide mock HTTP transports.
"""
import os

import httpx
import pytest
import structlog

# Sandbox credentials for settings-driven construction
os.environ.setdefault("LIQPAY__PUBLIC_KEY", "sandbox_pub")
os.environ.setdefault("LIQPAY__PRIVATE_KEY", "sandbox_priv")


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it answered."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture(autouse=True)
def uncached_loggers():
    """Keep module loggers uncached so `capture_logs` sees every event."""
    structlog.configure(cache_logger_on_first_use=False)
    yield


@pytest.fixture
def make_client():
    """Build a LiqPayClient over a recording mock transport."""
    from infrastructure.external.payments.liqpay_client import LiqPayClient

    def _make(handler, **kwargs):
        transport = RecordingTransport(handler)
        http_client = httpx.AsyncClient(transport=transport)
        kwargs.setdefault("public_key", "pub_1")
        kwargs.setdefault("private_key", "priv_1")
        client = LiqPayClient(http_client=http_client, **kwargs)
        return client, transport

    return _make
