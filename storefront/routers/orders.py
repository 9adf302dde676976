"""
Storefront orders: create, read, and admin status updates.

Totals are taken as sent by the checkout page; missing parts are filled with
plain sums of what was sent. No tax or shipping rules are applied here.
"""
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.db import get_db
from storefront.logging_config import get_logger
from storefront.models import StoreOrder
from storefront.schemas import OrderCreate, OrderOut, OrderStatusUpdate

logger = get_logger(__name__)

router = APIRouter()


def get_order_or_404(db: Session, order_id: str) -> StoreOrder:
    order = db.query(StoreOrder).filter(StoreOrder.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.post("", response_model=OrderOut, status_code=201)
def create_order(body: OrderCreate, db: Session = Depends(get_db)):
    items = body.order_items or body.items or []
    if not items:
        raise HTTPException(status_code=400, detail="No order items")

    items_price = body.items_price
    if items_price is None:
        items_price = round(sum(item.unit_price * item.quantity for item in items), 2)
    tax_price = body.tax_price or 0.0
    shipping_price = body.shipping_price or 0.0

    total_price = body.total_price if body.total_price is not None else body.total
    if total_price is None:
        total_price = round(items_price + tax_price + shipping_price, 2)

    order = StoreOrder(
        user_id=body.user_id if body.user_id and body.user_id != "guest" else None,
        order_items=[item.model_dump(by_alias=True, exclude_none=True) for item in items],
        shipping_address=body.shipping_address.model_dump(by_alias=True, exclude_none=True),
        payment_method=body.payment_method,
        items_price=items_price,
        tax_price=tax_price,
        shipping_price=shipping_price,
        total_price=total_price,
    )
    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info(
        "order_created",
        order_id=order.id,
        items=len(items),
        total_price=order.total_price,
        payment_method=order.payment_method,
    )
    return order


@router.get("", response_model=List[OrderOut])
def list_orders(db: Session = Depends(get_db)):
    return db.query(StoreOrder).order_by(StoreOrder.created_at.desc()).all()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    return get_order_or_404(db, order_id)


@router.put("/{order_id}/deliver", response_model=OrderOut)
def mark_delivered(order_id: str, db: Session = Depends(get_db)):
    order = get_order_or_404(db, order_id)
    order.is_delivered = True
    order.delivered_at = datetime.now(timezone.utc)
    order.status = "delivered"
    db.commit()
    db.refresh(order)
    logger.info("order_delivered", order_id=order.id)
    return order


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(order_id: str, body: OrderStatusUpdate, db: Session = Depends(get_db)):
    order = get_order_or_404(db, order_id)
    previous = order.status
    order.status = body.status
    if body.status == "delivered":
        order.is_delivered = True
        order.delivered_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(order)
    logger.info("order_status_updated", order_id=order.id, from_status=previous, to_status=order.status)
    return order
