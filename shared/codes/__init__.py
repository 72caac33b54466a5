"""
Shared codes used across layers (Domain/Application/Infrastructure).

Payment-specific codes, protocol constants and the LiqPay error catalog
live under `shared.codes.payment_codes`.
"""
from shared.codes.payment_codes import ErrorInfo, PaymentCode, describe_error


__all__ = ["PaymentCode", "ErrorInfo", "describe_error"]
