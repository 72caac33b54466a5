"""
LiqPay DTOs (Pydantic v2) used at application boundaries.

Request records serialize in field declaration order with unset optional
fields omitted. Every record accepts undeclared fields and carries them
through unchanged, so callers can pass API parameters not modelled here.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Optional, Union
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator


class Action(str, Enum):
    PAY = "pay"
    HOLD = "hold"
    SUBSCRIBE = "subscribe"
    SUBSCRIBE_UPDATE = "subscribe_update"
    UNSUBSCRIBE = "unsubscribe"
    STATUS = "status"
    PAYDONATE = "paydonate"
    PAYSPLIT = "paysplit"
    AUTH = "auth"
    REGULAR = "regular"
    REFUND = "refund"
    INVOICE_SEND = "invoice_send"
    INVOICE_CANCEL = "invoice_cancel"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    UAH = "UAH"


class Language(str, Enum):
    UK = "uk"
    EN = "en"


class PayType(str, Enum):
    APPLE_PAY = "apay"
    GOOGLE_PAY = "gpay"
    CARD = "card"
    PRIVAT24 = "privat24"
    MOMENT_PART = "moment_part"
    PAYPART = "paypart"
    CASH = "cash"
    INVOICE = "invoice"
    QR = "qr"


class PaymentStatus(str, Enum):
    ERROR = "error"  # incorrect data
    FAILURE = "failure"
    REVERSED = "reversed"  # refunded
    SUCCESS = "success"


class SubscribePeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class CancelInvoiceResult(str, Enum):
    OK = "ok"
    ERROR = "error"


class TransportMode(str, Enum):
    """How an envelope travels to LiqPay.

    REDIRECT: browser-style form post to the checkout endpoint, answered by a
    302 whose Location is the checkout page.
    DIRECT: server-to-server form post to the request endpoint, answered by
    a JSON body.
    """

    REDIRECT = "redirect"
    DIRECT = "direct"


SUPPORTED_CURRENCIES = {c.value for c in Currency}

Amount = Union[int, float]


def _validate_currency(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    u = str(v.value if isinstance(v, Currency) else v).upper()
    if u not in SUPPORTED_CURRENCIES:
        raise ValueError(f"unsupported currency, use one of: {', '.join(sorted(SUPPORTED_CURRENCIES))}")
    return u


def _validate_positive(v: Any) -> Any:
    if v is not None and float(v) <= 0:
        raise ValueError("amount must be greater than 0")
    return v


CurrencyCode = Annotated[str, AfterValidator(_validate_currency)]
PositiveAmount = Annotated[Amount, AfterValidator(_validate_positive)]


class LiqPayModel(BaseModel):
    """Base record: open shape, enum values stored as plain strings."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="allow",
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)


class LiqPayRequest(LiqPayModel):
    # Optional explicit overrides; the client injects its own values otherwise
    version: Optional[str] = None
    public_key: Optional[str] = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RROItem(LiqPayModel):
    amount: Optional[Amount] = None  # quantity
    cost: Optional[str] = None
    id: Optional[str] = None
    price: Optional[str] = None


class RROInfo(LiqPayModel):
    """Fiscalization data."""

    items: Optional[list[RROItem]] = None
    delivery_emails: Optional[list[str]] = None


class CheckoutRequest(LiqPayRequest):
    action: Optional[Action] = None
    amount: PositiveAmount
    currency: CurrencyCode
    description: str
    order_id: str = Field(max_length=255)
    rro_info: Optional[RROInfo] = None
    expired_date: Optional[str] = None  # UTC, "2016-04-24 00:00:00"
    language: Optional[Language] = None
    pay_types: Optional[list[PayType]] = None
    result_url: Optional[str] = Field(default=None, max_length=510)
    server_url: Optional[str] = Field(default=None, max_length=510)
    verifycode: Optional[str] = None


class SubscriptionRequest(LiqPayRequest):
    action: Optional[Action] = None
    amount: PositiveAmount
    currency: CurrencyCode
    description: str
    order_id: str = Field(max_length=255)
    card: Optional[str] = None
    card_cvv: Optional[str] = None
    card_exp_month: Optional[str] = None
    card_exp_year: Optional[str] = None
    ip: Optional[str] = None
    phone: Optional[str] = None
    language: Optional[Language] = None
    prepare: Optional[str] = None
    recurringbytoken: Optional[str] = None
    recurring: Optional[bool] = None
    server_url: Optional[str] = Field(default=None, max_length=510)
    subscribe: Optional[str] = None
    subscribe_date_start: Optional[str] = None
    subscribe_periodicity: Optional[SubscribePeriod] = None
    sender_address: Optional[str] = None
    sender_city: Optional[str] = None
    sender_country_code: Optional[str] = None
    sender_first_name: Optional[str] = None
    sender_last_name: Optional[str] = None
    sender_postal_code: Optional[str] = None
    customer: Optional[str] = None
    dae: Optional[str] = None
    info: Optional[str] = None
    product_category: Optional[str] = None
    product_description: Optional[str] = None
    product_name: Optional[str] = None
    product_url: Optional[str] = None


class EditSubscriptionRequest(LiqPayRequest):
    action: Optional[Action] = None
    amount: PositiveAmount
    currency: CurrencyCode
    description: str
    order_id: str


class UnsubscribeRequest(LiqPayRequest):
    action: Action = Action.UNSUBSCRIBE
    order_id: str


class InvoiceItem(LiqPayModel):
    amount: Amount  # price per unit
    count: int
    unit: str
    name: str


class InvoiceRequest(LiqPayRequest):
    """Invoice sent to the customer by e-mail or Privat24 push (phone)."""

    action: Optional[Action] = None
    amount: PositiveAmount
    currency: CurrencyCode
    description: str
    order_id: str = Field(max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    action_payment: Optional[str] = None  # pay, hold, subscribe, paydonate
    expired_date: Optional[str] = None
    goods: Optional[list[InvoiceItem]] = None
    language: Optional[Language] = None
    result_url: Optional[str] = Field(default=None, max_length=510)
    server_url: Optional[str] = Field(default=None, max_length=510)


class CancelInvoiceRequest(LiqPayRequest):
    action: Action = Action.INVOICE_CANCEL
    order_id: str


class StatusRequest(LiqPayRequest):
    action: Action = Action.STATUS
    order_id: str


class RefundRequest(LiqPayRequest):
    action: Action = Action.REFUND
    amount: str  # e.g. "5", "7.34"
    order_id: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class LiqPayResponse(LiqPayModel):
    """Fields every LiqPay answer may carry, including failure diagnostics."""

    status: Optional[str] = None
    result: Optional[str] = None
    err_code: Optional[str] = None
    err_description: Optional[str] = None

    @field_validator("err_code", mode="before")
    @classmethod
    def _err_code_as_str(cls, v: Any) -> Any:
        # financial error codes arrive as numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class RefundResponse(LiqPayResponse):
    action: Optional[str] = None
    payment_id: Optional[int] = None


class CancelInvoiceResponse(LiqPayResponse):
    invoice_id: Optional[int] = None


class InvoiceResponse(LiqPayResponse):
    action: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    href: Optional[str] = None
    id: Optional[int] = None
    order_id: Optional[str] = None
    receiver_type: Optional[str] = None
    receiver_value: Optional[str] = None
    token: Optional[str] = None


class PaymentDetails(LiqPayResponse):
    """Payment attributes shared by status, subscription and callback answers."""

    acq_id: Optional[int] = None
    action: Optional[str] = None
    agent_commission: Optional[float] = None
    amount: Optional[float] = None
    amount_bonus: Optional[float] = None
    amount_credit: Optional[float] = None
    amount_debit: Optional[float] = None
    card_token: Optional[str] = None
    commission_credit: Optional[float] = None
    commission_debit: Optional[float] = None
    create_date: Optional[Union[int, str]] = None
    currency: Optional[str] = None
    currency_credit: Optional[str] = None
    currency_debit: Optional[str] = None
    description: Optional[str] = None
    end_date: Optional[Union[int, str]] = None
    is_3ds: Optional[bool] = None
    liqpay_order_id: Optional[str] = None
    mpi_eci: Optional[Union[int, str]] = None
    order_id: Optional[str] = None
    payment_id: Optional[int] = None
    paytype: Optional[str] = None
    public_key: Optional[str] = None
    receiver_commission: Optional[float] = None
    sender_bonus: Optional[float] = None
    sender_card_bank: Optional[str] = None
    sender_card_country: Optional[Union[int, str]] = None
    sender_card_mask2: Optional[str] = None
    sender_card_type: Optional[str] = None
    sender_commission: Optional[float] = None
    sender_phone: Optional[str] = None


class StatusResponse(PaymentDetails):
    authcode_credit: Optional[str] = None
    authcode_debit: Optional[str] = None
    bonus_procent: Optional[float] = None
    bonus_type: Optional[str] = None
    info: Optional[str] = None
    ip: Optional[str] = None
    moment_part: Optional[Union[bool, str]] = None
    rrn_credit: Optional[str] = None
    rrn_debit: Optional[str] = None


class SubscriptionResponse(PaymentDetails):
    transaction_id: Optional[int] = None
    version: Optional[int] = None


class Callback(PaymentDetails):
    """Asynchronous notification LiqPay posts to `server_url`."""

    authcode_credit: Optional[str] = None
    authcode_debit: Optional[str] = None
    completion_date: Optional[str] = None
    customer: Optional[str] = None
    info: Optional[str] = None
    ip: Optional[str] = None
    redirect_to: Optional[str] = None
    refund_date_last: Optional[str] = None
    rrn_credit: Optional[str] = None
    rrn_debit: Optional[str] = None
    sender_first_name: Optional[str] = None
    sender_last_name: Optional[str] = None
    wait_reserve_status: Optional[str] = None
    token: Optional[str] = None
    type: Optional[str] = None
    version: Optional[int] = None
    err_erc: Optional[str] = None
    product_category: Optional[str] = None
    product_description: Optional[str] = None
    product_name: Optional[str] = None
    product_url: Optional[str] = None
    refund_amount: Optional[float] = None
    verifycode: Optional[str] = None
