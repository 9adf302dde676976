"""Client-side Razorpay payment initiation: script loading and checkout sessions."""
from .errors import (
    MissingGatewayOrder,
    PaymentError,
    ScriptLoadFailed,
    UserCancelled,
    WidgetConstructionError,
)
from .loader import HttpScriptHost, LoaderStatus, ScriptLoader
from .models import (
    CustomerInfo,
    FailureReason,
    Order,
    PaymentFailed,
    PaymentOutcome,
    PaymentSucceeded,
    to_minor_units,
)
from .session import CheckoutSession, SessionState
from .widget import (
    CHECKOUT_SCRIPT_URL,
    Branding,
    LoggingNotifier,
    build_widget_options,
)

__all__ = [
    "CHECKOUT_SCRIPT_URL",
    "Branding",
    "CheckoutSession",
    "CustomerInfo",
    "FailureReason",
    "HttpScriptHost",
    "LoaderStatus",
    "LoggingNotifier",
    "MissingGatewayOrder",
    "Order",
    "PaymentError",
    "PaymentFailed",
    "PaymentOutcome",
    "PaymentSucceeded",
    "ScriptLoadFailed",
    "ScriptLoader",
    "SessionState",
    "UserCancelled",
    "WidgetConstructionError",
    "build_widget_options",
    "to_minor_units",
]
