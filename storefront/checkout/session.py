"""
Checkout session adapter.

Turns one Order + CustomerInfo into exactly one Razorpay widget session and
exactly one terminal outcome, delivered through the caller's
``on_success(payment_id, order_id, signature)`` or ``on_failure(error)``.

    IDLE -> LOADING -> CONFIGURING -> OPEN -> SUCCEEDED
      |        |            |           |
      +--------+------------+-----------+---> FAILED

Terminal states never transition again. A new attempt needs a new session.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Mapping, Optional

from storefront.logging_config import get_logger

from .errors import (
    MissingGatewayOrder,
    PaymentError,
    ScriptLoadFailed,
    UserCancelled,
    WidgetConstructionError,
)
from .loader import ScriptLoader
from .models import CustomerInfo, Order, PaymentOutcome, PaymentSucceeded
from .widget import (
    CHECKOUT_SCRIPT_URL,
    Branding,
    LoggingNotifier,
    Notifier,
    PaymentWidgetFactory,
    ScriptHost,
    build_widget_options,
)

logger = get_logger(__name__)

SuccessHandler = Callable[[str, str, str], None]
FailureHandler = Callable[[PaymentError], None]


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    CONFIGURING = "configuring"
    OPEN = "open"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES = frozenset({SessionState.SUCCEEDED, SessionState.FAILED})


class CheckoutSession:
    def __init__(
        self,
        order: Order,
        customer: CustomerInfo,
        on_success: SuccessHandler,
        on_failure: FailureHandler,
        *,
        widget_factory: PaymentWidgetFactory,
        key_id: Optional[str],
        script_host: Optional[ScriptHost] = None,
        loader: Optional[ScriptLoader] = None,
        branding: Optional[Branding] = None,
        notifier: Optional[Notifier] = None,
        script_url: str = CHECKOUT_SCRIPT_URL,
    ):
        if loader is None:
            if script_host is None:
                raise ValueError("either script_host or loader is required")
            loader = ScriptLoader(script_host, src=script_url)
        self.order = order
        self.customer = customer
        self.state = SessionState.IDLE
        self.outcome: Optional[PaymentOutcome] = None
        self._on_success = on_success
        self._on_failure = on_failure
        self._widget_factory = widget_factory
        self._key_id = key_id
        self._loader = loader
        self._branding = branding
        self._notifier = notifier or LoggingNotifier()
        self._mounted = False
        self._log = logger.bind(order_id=order.id, gateway_order_id=order.gateway_order_id)

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def mount(self) -> None:
        if self._mounted or self.state is not SessionState.IDLE:
            raise RuntimeError("a checkout session can only be mounted once")
        self._mounted = True

        if not self.order.gateway_order_id:
            self._fail(MissingGatewayOrder())
            return

        self._transition(SessionState.LOADING)
        self._loader.ensure_loaded(self._script_loaded, self._script_failed)

    def unmount(self) -> None:
        """Tear down. Always removes the script; later widget or script signals are dropped."""
        self._mounted = False
        self._loader.release()
        self._log.debug("checkout_session_unmounted", state=self.state.value)

    def _accepting(self, signal: str, *states: SessionState) -> bool:
        if self._mounted and self.state in states:
            return True
        self._log.info(
            "checkout_signal_ignored",
            signal=signal,
            state=self.state.value,
            mounted=self._mounted,
        )
        return False

    def _transition(self, state: SessionState) -> None:
        self._log.debug("checkout_session_transition", from_state=self.state.value, to_state=state.value)
        self.state = state

    def _script_loaded(self) -> None:
        if not self._accepting("script_loaded", SessionState.LOADING):
            return
        self._transition(SessionState.CONFIGURING)
        try:
            options = build_widget_options(
                self.order,
                self.customer,
                self._key_id,
                self._branding,
                on_payment=self._payment_completed,
                on_dismiss=self._widget_dismissed,
            )
            widget = self._widget_factory(options)
            widget.open()
        except Exception as exc:
            self._log.error("checkout_widget_construction_failed", exc_info=exc)
            self._fail(WidgetConstructionError(exc))
            return
        # the widget may already have called back while opening
        if self.state is SessionState.CONFIGURING:
            self._transition(SessionState.OPEN)

    def _script_failed(self, error: Optional[BaseException] = None) -> None:
        if not self._accepting("script_failed", SessionState.LOADING):
            return
        self._fail(ScriptLoadFailed())

    def _payment_completed(self, response: Mapping[str, Any]) -> None:
        if not self._accepting("payment_completed", SessionState.CONFIGURING, SessionState.OPEN):
            return
        outcome = PaymentSucceeded(
            payment_id=response.get("razorpay_payment_id"),
            gateway_order_id=response.get("razorpay_order_id"),
            signature=response.get("razorpay_signature"),
        )
        self.outcome = outcome
        self._transition(SessionState.SUCCEEDED)
        self._log.info("checkout_payment_completed", payment_id=outcome.payment_id)
        self._on_success(outcome.payment_id, outcome.gateway_order_id, outcome.signature)

    def _widget_dismissed(self) -> None:
        if not self._accepting("widget_dismissed", SessionState.CONFIGURING, SessionState.OPEN):
            return
        self._fail(UserCancelled())

    def _fail(self, error: PaymentError) -> None:
        if self.done:
            return
        self.outcome = error.to_outcome()
        self._transition(SessionState.FAILED)
        self._log.info("checkout_payment_failed", reason=error.reason.value, message=error.message)
        if error.notice_level == "info":
            self._notifier.info(error.notice_text)
        else:
            self._notifier.error(error.notice_text)
        self._on_failure(error)
