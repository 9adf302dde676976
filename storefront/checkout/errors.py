"""
Failure taxonomy for a checkout session.

Every failure reaches the caller through ``on_failure`` as one of these
exceptions. None of them is retried inside the session; retrying means
mounting a new session.
"""
from typing import Any, Dict, Optional

from .models import FailureReason, PaymentFailed


class PaymentError(Exception):
    """Base class. ``message`` mirrors the ``{message: ...}`` shape callers read."""

    reason: FailureReason
    default_message = "Payment failed"
    # how the failure is shown to the shopper: "info" or "error"
    notice_level = "error"
    notice: Optional[str] = None

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def notice_text(self) -> str:
        return self.notice or self.message

    def to_outcome(self) -> PaymentFailed:
        return PaymentFailed(reason=self.reason, message=self.message)

    def as_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "reason": self.reason.value}


class MissingGatewayOrder(PaymentError):
    """The order has no gateway order reference. Needs a new server-side order."""
    reason = FailureReason.MISSING_GATEWAY_ORDER
    default_message = "Error initializing payment"


class ScriptLoadFailed(PaymentError):
    """The hosted checkout script could not be fetched. Retry by remounting."""
    reason = FailureReason.SCRIPT_LOAD_FAILED
    default_message = "Failed to load payment gateway"
    notice_level = "info"
    notice = "Could not reach the payment gateway. Please try again."


class WidgetConstructionError(PaymentError):
    reason = FailureReason.CONSTRUCTION_ERROR
    default_message = "Payment initialization failed"
    notice = "Payment initialization failed"

    def __init__(self, original: BaseException):
        self.original = original
        super().__init__(str(original) or None)
        self.__cause__ = original


class UserCancelled(PaymentError):
    reason = FailureReason.USER_CANCELLED
    default_message = "Payment cancelled by user"
    notice_level = "info"
