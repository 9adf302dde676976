"""
Value types for the client-side payment initiation flow.

An ``Order`` is owned by the caller and handed to one checkout session; the
session never mutates it. ``PaymentOutcome`` is the single tagged result a
session produces, whatever the widget did.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

DEFAULT_CURRENCY = "INR"


def to_minor_units(amount) -> int:
    """Convert a two-decimal currency amount (rupees) to paise."""
    value = Decimal(str(amount)) * 100
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount}")
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class CustomerInfo:
    """Contact fields used to prefill the widget. Passed through unvalidated."""
    name: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Order:
    id: str
    total_price: Decimal
    currency: str = DEFAULT_CURRENCY
    gateway_order_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.total_price, Decimal):
            object.__setattr__(self, "total_price", Decimal(str(self.total_price)))

    @classmethod
    def from_gateway_order(
        cls,
        amount,
        gateway_order_id: Optional[str],
        order_id: Optional[str] = None,
        currency: str = DEFAULT_CURRENCY,
    ) -> "Order":
        """Map the flat ``(amount, gateway order id)`` caller shape onto an Order."""
        return cls(
            id=order_id or gateway_order_id or "",
            total_price=Decimal(str(amount)),
            currency=currency,
            gateway_order_id=gateway_order_id,
        )

    @property
    def amount_minor(self) -> int:
        return to_minor_units(self.total_price)


class FailureReason(str, Enum):
    USER_CANCELLED = "user-cancelled"
    SCRIPT_LOAD_FAILED = "script-load-failed"
    CONSTRUCTION_ERROR = "construction-error"
    MISSING_GATEWAY_ORDER = "missing-gateway-order"


@dataclass(frozen=True)
class PaymentSucceeded:
    payment_id: str
    gateway_order_id: str
    signature: str


@dataclass(frozen=True)
class PaymentFailed:
    reason: FailureReason
    message: str


PaymentOutcome = Union[PaymentSucceeded, PaymentFailed]
