"""
Storefront SQLAlchemy models.

Only orders are stored here; products, users and blog content live elsewhere.
"""
import uuid

from sqlalchemy import (
    Column, String, Boolean, DateTime, JSON, Float, func
)
from .db import Base


ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "canceled")


def _new_order_id() -> str:
    return uuid.uuid4().hex[:24]


# =====================================================
# ORDER MODEL
# =====================================================

class StoreOrder(Base):
    __tablename__ = "store_orders"

    id = Column(String(32), primary_key=True, default=_new_order_id)
    user_id = Column(String(64), nullable=True, index=True)  # null for guest orders

    order_items = Column(JSON, nullable=False, default=list)
    shipping_address = Column(JSON, nullable=True, default=dict)
    payment_method = Column(String(32), nullable=False, default="razorpay")

    # Prices in rupees, as supplied by the caller
    items_price = Column(Float, nullable=False, default=0.0)
    tax_price = Column(Float, nullable=False, default=0.0)
    shipping_price = Column(Float, nullable=False, default=0.0)
    total_price = Column(Float, nullable=False, default=0.0)

    is_paid = Column(Boolean, default=False, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    is_delivered = Column(Boolean, default=False, nullable=False)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(16), nullable=False, default="pending")

    # Razorpay
    razorpay_order_id = Column(String(128), index=True, nullable=True)
    razorpay_payment_id = Column(String(128), index=True, nullable=True)
    razorpay_signature = Column(String(256), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(),
                        onupdate=func.now(), nullable=False)

    def customer_contact(self) -> dict:
        address = self.shipping_address or {}
        return {
            "name": address.get("fullName") or "",
            "email": address.get("email") or "",
            "phone": address.get("phone") or address.get("whatsappNumber") or "",
        }
