"""领域层业务异常定义，供领域与基础设施使用。

基础设施层的支付网关异常均派生自 BusinessException，携带统一的数字业务码。
"""
from __future__ import annotations

from typing import Optional


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "code": int(self.code),
            "message": self.message,
            "error_type": self.error_type,
            "details": self.details,
        }
