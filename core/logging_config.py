"""
Structlog 日志配置模块

支付客户端的调试事件（liqpay_request / liqpay_response / liqpay_api_error）
与标准库 logging 共用同一处理链；密钥与签名字段在渲染前脱敏。
"""
import logging
import json
import structlog
from structlog.processors import TimeStamper, add_log_level, JSONRenderer
from structlog.dev import ConsoleRenderer
from structlog.contextvars import merge_contextvars
from structlog.stdlib import ProcessorFormatter
from typing import Any, List, MutableMapping

from core.settings import payment_settings


SENSITIVE_KEYS = frozenset({"private_key", "signature", "card", "card_cvv"})
MASK = "***"

# httpx/httpcore 在 INFO 级别逐请求打印，仅调试时保留
NOISY_LOGGERS = ("httpx", "httpcore")


def mask_secrets(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """脱敏：顶层与一层嵌套 dict 中的敏感字段。"""
    for key, value in list(event_dict.items()):
        if key in SENSITIVE_KEYS and value:
            event_dict[key] = MASK
        elif isinstance(value, dict) and SENSITIVE_KEYS.intersection(value):
            event_dict[key] = {k: (MASK if k in SENSITIVE_KEYS and v else v) for k, v in value.items()}
    return event_dict


def get_renderer(debug: bool) -> Any:
    """Console in DEBUG, JSON otherwise.
    注意：structlog 会向 serializer 传入 default/sort_keys 等参数，需要适配。
    """
    if debug:
        return ConsoleRenderer(colors=False)

    def _dumps(obj, default=None, **kwargs):
        return json.dumps(obj, ensure_ascii=False, default=default, **kwargs)
    return JSONRenderer(serializer=_dumps)


def configure_logging(debug: bool = payment_settings.debug) -> None:
    """配置 structlog 并桥接标准库 logging 到同一处理链。"""
    shared_pre_chain: List[Any] = [
        merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        mask_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared_pre_chain, ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        ProcessorFormatter(
            foreign_pre_chain=shared_pre_chain,
            processors=[ProcessorFormatter.remove_processors_meta, get_renderer(debug)],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """获取 structlog logger 实例。"""
    return structlog.get_logger(name)


# 初始化配置
configure_logging()
