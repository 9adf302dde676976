"""
The hosted Razorpay checkout widget, seen from Python.

In the browser the widget is a global constructor injected by the checkout
script. Here it is an injected capability so a session can be driven by a
real bridge or by a fake in tests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from storefront.logging_config import get_logger

from .models import CustomerInfo, Order

logger = get_logger(__name__)

CHECKOUT_SCRIPT_URL = "https://checkout.razorpay.com/v1/checkout.js"

PaymentHandler = Callable[[Mapping[str, Any]], None]
DismissHandler = Callable[[], None]


class PaymentWidget(Protocol):
    def open(self) -> None:
        ...


class PaymentWidgetFactory(Protocol):
    """Stands in for ``new window.Razorpay(options)``."""

    def __call__(self, options: Dict[str, Any]) -> PaymentWidget:
        ...


class ScriptHost(Protocol):
    """The page document the checkout script is injected into."""

    def append_script(
        self,
        src: str,
        on_load: Callable[[], None],
        on_error: Callable[[Optional[BaseException]], None],
    ) -> Any:
        """Append an async script element to the body and return a handle to it."""
        ...

    def remove_script(self, element: Any) -> None:
        ...


class Notifier(Protocol):
    def info(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Default notifier: records shopper-facing notices in the log."""

    def info(self, message: str) -> None:
        logger.info("checkout_notice", notice_level="info", notice=message)

    def error(self, message: str) -> None:
        logger.warning("checkout_notice", notice_level="error", notice=message)


@dataclass(frozen=True)
class Branding:
    name: str = "Manglanam Spices"
    image: Optional[str] = "/logo.png"
    theme_color: str = "#E11D48"
    notes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings) -> "Branding":
        notes = {"address": settings.STORE_ADDRESS_NOTE} if settings.STORE_ADDRESS_NOTE else {}
        return cls(
            name=settings.STORE_NAME,
            image=settings.STORE_LOGO_URL or None,
            theme_color=settings.THEME_COLOR,
            notes=notes,
        )


def build_widget_options(
    order: Order,
    customer: CustomerInfo,
    key_id: Optional[str],
    branding: Optional[Branding] = None,
    on_payment: Optional[PaymentHandler] = None,
    on_dismiss: Optional[DismissHandler] = None,
) -> Dict[str, Any]:
    """
    Build the configuration object the widget constructor expects.

    The amount is converted to paise. ``handler`` and ``modal.ondismiss`` are
    only present when callbacks are given, so the result without them is
    JSON-serializable and can be embedded in a page.
    """
    branding = branding or Branding()
    options: Dict[str, Any] = {
        "key": key_id,
        "amount": order.amount_minor,
        "currency": order.currency,
        "name": branding.name,
        "description": f"Order #{order.id}",
        "order_id": order.gateway_order_id,
        "prefill": {
            "name": customer.name,
            "email": customer.email,
            "contact": customer.phone,
        },
        "theme": {"color": branding.theme_color},
    }
    if branding.image:
        options["image"] = branding.image
    if branding.notes:
        options["notes"] = dict(branding.notes)
    if on_payment is not None:
        options["handler"] = on_payment
    if on_dismiss is not None:
        options["modal"] = {"ondismiss": on_dismiss}
    return options
