"""
Request / response models for the storefront API.

The storefront frontend speaks camelCase; fields are snake_case here and
aliased on the wire.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "canceled"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------
# ORDERS
# ---------------------------------------------

class OrderItemIn(CamelModel):
    product: Optional[str] = None
    name: str
    size: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: float = Field(0.0, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None

    @property
    def unit_price(self) -> float:
        return self.sale_price if self.sale_price and self.sale_price > 0 else self.price


class ShippingAddress(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    whatsapp_number: Optional[str] = None
    prefer_whatsapp: bool = False
    address: Optional[str] = None
    street: Optional[str] = None
    city: str
    state: Optional[str] = None
    postal_code: Optional[str] = None
    zip_code: Optional[str] = None
    country: str


class OrderCreate(CamelModel):
    order_items: Optional[List[OrderItemIn]] = None
    # legacy cart payload
    items: Optional[List[OrderItemIn]] = None
    shipping_address: ShippingAddress
    payment_method: Literal["razorpay", "cash-on-delivery"] = "razorpay"
    user_id: Optional[str] = None
    items_price: Optional[float] = Field(None, ge=0)
    tax_price: Optional[float] = Field(None, ge=0)
    shipping_price: Optional[float] = Field(None, ge=0)
    total_price: Optional[float] = Field(None, ge=0)
    total: Optional[float] = Field(None, ge=0)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    user_id: Optional[str] = None
    order_items: list
    shipping_address: Optional[dict] = None
    payment_method: str
    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float
    is_paid: bool
    paid_at: Optional[datetime] = None
    is_delivered: bool
    delivered_at: Optional[datetime] = None
    status: str
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------
# PAYMENTS
# ---------------------------------------------

class PaymentOrderCreate(CamelModel):
    amount: float              # in rupees
    currency: str = "INR"
    receipt: Optional[str] = Field(None, max_length=40)
    order_id: Optional[str] = None


class PaymentOrderOut(BaseModel):
    id: str
    amount: int                # in paise
    currency: str


class PaymentVerify(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)
    order_id: str = Field(..., alias="orderId")
