"""
Payment specific codes, LiqPay protocol constants and the LiqPay error catalog.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class PaymentCode(IntEnum):
    # Generic success
    SUCCESS = 0

    # Provider/Network errors (6xxxx)
    PROVIDER_ERROR = 60000
    PROVIDER_RECOVERABLE = 60001
    SIGNATURE_ERROR = 60002
    TIMEOUT = 60003

    # Protocol errors raised by the client itself
    ENCODING_ERROR = 60005
    DECODE_ERROR = 60006
    REDIRECT_ERROR = 60007


LIQPAY_REQUEST_URL = "https://www.liqpay.ua/api/request"
LIQPAY_CHECKOUT_URL = "https://www.liqpay.ua/api/3/checkout"
LIQPAY_API_VERSION = "3"

# Values of the response `status` / `result` fields that mark a business failure
ERROR_STATUSES = frozenset({"error", "failure"})
ERROR_RESULTS = frozenset({"error"})


# Exceeded limits or risky transactions flagged by the bank
ANTI_FRAUD_ERRORS: dict[str, str] = {
    "limit": "Exceeded limit on amount or number of client payments",
    "frod": "Transaction identified as atypical/risky according to Bank's Anti-Fraud rules",
    "decline": "Transaction identified as atypical/risky according to Bank's Anti-Fraud system",
}

NON_FINANCIAL_ERRORS: dict[str, str] = {
    "err_auth": "Authorization required",
    "err_cache": "Data storage time elapsed for this operation",
    "user_not_found": "User not found",
    "err_sms_send": "Failed to send SMS",
    "err_sms_otp": "SMS password entered incorrectly",
    "shop_blocked": "Shop is blocked",
    "shop_not_active": "Shop is not active",
    "invalid_signature": "Invalid request signature",
    "order_id_empty": "Empty order_id passed",
    "err_shop_not_agent": "You are not an agent for the specified shop",
    "err_card_def_notfound": "Card for receiving payments not found in wallet",
    "err_no_card_token": "User has no card with such card_token",
    "err_card_liqpay_def": "Specify another card",
    "err_card_type": "Invalid card type",
    "err_card_country": "Specify another card",
    "err_limit_amount": "Transfer amount less than or greater than specified limit",
    "err_payment_amount_limit": "Transfer amount less than or greater than specified limit",
    "amount_limit": "Exceeded amount limit",
    "payment_err_sender_card": "Specify another sender card",
    "payment_processing": "Payment is being processed",
    "err_payment_discount": "Discount for this payment not found",
    "err_wallet": "Failed to load wallet",
    "err_get_verify_code": "Card verification required",
    "err_verify_code": "Incorrect verification code",
    "wait_info": "Additional information is expected, try again later",
    "err_path": "Invalid request address",
    "err_payment_cash_acq": "Payment cannot be made in this shop",
    "err_split_amount": "Split payment amounts do not match payment amount",
    "err_card_receiver_def": "Recipient has not set up card to receive payments",
    "payment_err_status": "Incorrect payment status",
    "public_key_not_found": "Public key not found",
    "payment_not_found": "Payment not found",
    "payment_not_subscribed": "Payment is not regular",
    "wrong_amount_currency": "Payment currency does not match debit currency",
    "err_amount_hold": "Amount cannot exceed payment amount",
    "err_access": "Access error",
    "order_id_duplicate": "Such order_id already exists",
    "err_blocked": "Account access closed",
    "err_empty": "Parameter not filled",
    "err_empty_phone": "Phone parameter not filled",
    "err_missing": "Parameter not passed",
    "err_wrong": "Parameter specified incorrectly",
    "err_wrong_currency": "Incorrect currency specified. Use: USD, UAH, EUR",
    "err_phone": "Incorrect phone number entered",
    "err_card": "Incorrect card number specified",
    "err_card_bin": "Card BIN not found",
    "err_terminal_notfound": "Terminal not found",
    "err_commission_notfound": "Commission not found",
    "err_payment_create": "Failed to create payment",
    "err_mpi": "Failed to verify card",
    "err_currency_is_not_allowed": "Currency not allowed",
    "err_look": "Operation incomplete",
    "err_mods_empty": "Operation incomplete",
    "payment_err_type": "Incorrect payment type",
    "err_payment_currency": "Card or transfer currency not allowed",
    "err_payment_exchangerates": "Failed to find corresponding exchange rate",
    "err_signature": "Invalid request signature",
    "err_api_action": "Action parameter not passed",
    "err_api_callback": "Callback parameter not passed",
    "err_api_ip": "API call from this IP address is forbidden in this merchant",
    "expired_phone": "Payment confirmation deadline by entering phone number expired",
    "expired_3ds": "3DS client verification deadline expired",
    "expired_otp": "Payment confirmation deadline by OTP password expired",
    "expired_cvv": "Payment confirmation deadline by entering CVV code expired",
    "expired_p24": "Privat24 card selection deadline expired",
    "expired_sender": "Sender data collection deadline expired",
    "expired_pin": "Payment confirmation deadline by card PIN expired",
    "expired_ivr": "Payment confirmation deadline by IVR call expired",
    "expired_captcha": "Payment confirmation deadline by captcha expired",
    "expired_password": "Payment confirmation deadline by Privat24 password expired",
    "expired_senderapp": "Payment confirmation deadline by Privat24 form expired",
    "expired_prepared": "Deadline for completing created payment expired",
    "expired_mp": "Deadline for completing payment in MasterPass wallet expired",
    "expired_qr": "Deadline for confirming payment by scanning QR code expired",
    "5": "Card does not support 3DSecure",
}

FINANCIAL_ERRORS: dict[int, str] = {
    90: "General error during processing",
    101: "Token created not by this merchant",
    102: "Sent token is not active",
    103: "Maximum purchase amount reached for the token",
    104: "Transaction limit for the token exceeded",
    105: "Card is not supported",
    106: "Merchant not allowed to preauthorize",
    107: "Acquirer does not support 3DSecure",
    108: "Such token does not exist",
    109: "IP attempt limit exceeded",
    110: "Session expired",
    111: "Card branch blocked",
    112: "Daily card branch limit reached",
    113: "Temporary restriction on P2P payments from PB cards to cards of foreign banks",
    2903: "Daily limit for using the card reached",
    2915: "Such order_id already exists",
    3914: "Payments to this country are forbidden",
    9851: "Card expiration date expired",
    9852: "Incorrect card number",
    9854: "Payment declined. Try again later",
    9855: "Card does not support this type of transaction",
}


@dataclass(frozen=True)
class ErrorInfo:
    family: str  # anti_fraud | non_financial | financial
    code: str
    description: str


def describe_error(err_code: object) -> Optional[ErrorInfo]:
    """Look up a LiqPay `err_code` in the documented error families."""
    if err_code is None:
        return None
    code = str(err_code).strip()
    if not code:
        return None
    if code in ANTI_FRAUD_ERRORS:
        return ErrorInfo("anti_fraud", code, ANTI_FRAUD_ERRORS[code])
    if code in NON_FINANCIAL_ERRORS:
        return ErrorInfo("non_financial", code, NON_FINANCIAL_ERRORS[code])
    if code.isdigit() and int(code) in FINANCIAL_ERRORS:
        return ErrorInfo("financial", code, FINANCIAL_ERRORS[int(code)])
    return None
