"""
Razorpay payment endpoints: gateway order creation and checkout verification.

The checkout widget only reports what it saw. An order is marked paid here,
after the signature it returned has been checked against our key secret and
the amount Razorpay recorded for the gateway order matches the stored total.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone

import httpx
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.checkout.models import to_minor_units
from storefront.config import settings
from storefront.db import get_db
from storefront.logging_config import bind_order_context, get_logger
from storefront.routers.orders import get_order_or_404
from storefront.schemas import OrderOut, PaymentOrderCreate, PaymentOrderOut, PaymentVerify
from storefront.services.razorpay_client import RazorpayClient, RazorpayError
from storefront.services.signature import verify_checkout_signature

logger = get_logger(__name__)

router = APIRouter()


def get_razorpay_client() -> RazorpayClient:
    try:
        return RazorpayClient()
    except RazorpayError:
        raise HTTPException(status_code=503, detail="Razorpay not configured")


@router.post("/create-payment-order", response_model=PaymentOrderOut)
async def create_payment_order(
    body: PaymentOrderCreate,
    db: Session = Depends(get_db),
    client: RazorpayClient = Depends(get_razorpay_client),
):
    if not body.amount or body.amount < 1:
        raise HTTPException(status_code=400, detail="Invalid amount")
    try:
        amount = to_minor_units(body.amount)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid amount")

    order = None
    if body.order_id:
        order = get_order_or_404(db, body.order_id)
        bind_order_context(order.id, order.razorpay_order_id)
        # gateway orders are always for the stored total
        expected = to_minor_units(order.total_price)
        if amount != expected:
            logger.warning("payment_amount_mismatch", requested=amount, expected=expected)
            raise HTTPException(status_code=400, detail="Amount does not match order total")
        # Idempotency: an order keeps the gateway reference it was first given
        if order.razorpay_order_id:
            return PaymentOrderOut(id=order.razorpay_order_id, amount=expected, currency=body.currency.upper())

    receipt = body.receipt or (f"order_{order.id}" if order else f"receipt_{int(time.time() * 1000)}")
    try:
        res = await client.create_order(amount=amount, currency=body.currency, receipt=receipt)
    except (httpx.HTTPError, RazorpayError) as e:
        logger.error("razorpay_order_failed", error=str(e), error_type=type(e).__name__, receipt=receipt)
        raise HTTPException(status_code=502, detail="Failed to create payment order")

    if order is not None:
        order.razorpay_order_id = res["id"]
        db.commit()

    return PaymentOrderOut(
        id=res["id"],
        amount=res.get("amount") or amount,
        currency=res.get("currency") or body.currency.upper(),
    )


@router.post("/verify", response_model=OrderOut)
@router.post("/verify-razorpay", response_model=OrderOut, include_in_schema=False)
async def verify_payment(
    body: PaymentVerify,
    db: Session = Depends(get_db),
    client: RazorpayClient = Depends(get_razorpay_client),
):
    bind_order_context(body.order_id, body.razorpay_order_id)
    secret = settings.RAZORPAY_KEY_SECRET
    if not secret:
        raise HTTPException(status_code=503, detail="Razorpay not configured")

    if not verify_checkout_signature(body.razorpay_order_id, body.razorpay_payment_id, body.razorpay_signature, secret):
        logger.warning("razorpay_signature_mismatch", razorpay_payment_id=body.razorpay_payment_id)
        raise HTTPException(status_code=400, detail="Invalid signature, payment verification failed")

    order = get_order_or_404(db, body.order_id)
    if order.razorpay_order_id and order.razorpay_order_id != body.razorpay_order_id:
        raise HTTPException(status_code=400, detail="Payment does not belong to this order")

    if order.is_paid:
        if order.razorpay_payment_id == body.razorpay_payment_id:
            return order
        raise HTTPException(status_code=409, detail="Order already paid")

    # the gateway's own record of the amount must match the stored total
    try:
        gateway_order = await client.fetch_order(body.razorpay_order_id)
    except (httpx.HTTPError, RazorpayError) as e:
        logger.error("razorpay_order_fetch_failed", error=str(e), error_type=type(e).__name__)
        raise HTTPException(status_code=502, detail="Could not confirm payment with Razorpay")

    expected = to_minor_units(order.total_price)
    if gateway_order["amount"] != expected:
        logger.warning(
            "razorpay_amount_mismatch",
            gateway_amount=gateway_order["amount"],
            expected=expected,
            gateway_status=gateway_order["status"],
        )
        raise HTTPException(status_code=400, detail="Payment amount does not match order total")

    order.is_paid = True
    order.paid_at = datetime.now(timezone.utc)
    order.razorpay_order_id = body.razorpay_order_id
    order.razorpay_payment_id = body.razorpay_payment_id
    order.razorpay_signature = body.razorpay_signature
    if order.status == "pending":
        order.status = "processing"
    db.commit()
    db.refresh(order)

    logger.info("order_paid", razorpay_payment_id=order.razorpay_payment_id, gateway_status=gateway_order["status"])
    return order
