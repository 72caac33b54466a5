import logging

from core.logging_config import MASK, configure_logging, get_renderer, mask_secrets


def test_mask_secrets_top_level_and_nested():
    event = {
        "event": "liqpay_request",
        "signature": "abc=",
        "body": {"card": "4242", "status": "success"},
        "private_key": "",
    }
    out = mask_secrets(None, "info", event)
    assert out["signature"] == MASK
    assert out["body"] == {"card": MASK, "status": "success"}
    assert out["private_key"] == ""
    assert out["event"] == "liqpay_request"


def test_renderer_follows_debug_flag():
    from structlog.dev import ConsoleRenderer
    from structlog.processors import JSONRenderer

    assert isinstance(get_renderer(True), ConsoleRenderer)
    assert isinstance(get_renderer(False), JSONRenderer)


def test_configure_logging_levels():
    try:
        configure_logging(debug=False)
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING
        configure_logging(debug=True)
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG
    finally:
        configure_logging(debug=False)
