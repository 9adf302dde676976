"""
Razorpay Orders API client.

Creates the gateway order reference the checkout widget needs before it can
open, and reads it back when a payment is verified.
"""
from __future__ import annotations

import base64
from typing import Any, Dict, Optional

import httpx

from storefront.config import settings
from storefront.logging_config import get_logger

logger = get_logger(__name__)


class RazorpayError(Exception):
    """Razorpay is misconfigured or returned something unusable."""


class RazorpayClient:
    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id or settings.RAZORPAY_KEY_ID
        self.key_secret = key_secret or settings.RAZORPAY_KEY_SECRET
        if not self.key_id or not self.key_secret:
            raise RazorpayError("Razorpay not configured")
        token = base64.b64encode(f"{self.key_id}:{self.key_secret}".encode()).decode()
        self._auth_header = {"Authorization": f"Basic {token}"}
        self._base = (base_url or settings.RAZORPAY_API_BASE).rstrip("/")
        self._timeout = timeout or settings.RAZORPAY_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def _post(self, path: str, json: Dict[str, Any]) -> Dict[str, Any]:
        async with self._client() as client:
            r = await client.post(f"{self._base}{path}", json=json, headers=self._auth_header)
            r.raise_for_status()
            return r.json()

    async def _get(self, path: str) -> Dict[str, Any]:
        async with self._client() as client:
            r = await client.get(f"{self._base}{path}", headers=self._auth_header)
            r.raise_for_status()
            return r.json()

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Create a Razorpay order.

        Args:
            amount: Amount in paise
            currency: ISO currency code
            receipt: Merchant receipt reference (max 40 chars)
            notes: Optional key/value notes stored on the order

        Returns:
            Dict with id, amount, currency, receipt and status
        """
        payload: Dict[str, Any] = {
            "amount": int(amount),
            "currency": currency.upper(),
            "receipt": receipt,
            "payment_capture": 1,
        }
        if notes:
            payload["notes"] = notes
        data = await self._post("/v1/orders", payload)
        order_id = data.get("id")
        if not order_id:
            raise RazorpayError("Invalid order response")
        logger.info(
            "razorpay_order_created",
            razorpay_order_id=order_id,
            amount=data.get("amount"),
            currency=data.get("currency"),
            receipt=receipt,
        )
        return {
            "id": order_id,
            "amount": data.get("amount"),
            "currency": data.get("currency"),
            "receipt": data.get("receipt"),
            "status": data.get("status"),
        }

    async def fetch_order(self, order_id: str) -> Dict[str, Any]:
        """Read a gateway order back. Status is one of created, attempted, paid."""
        data = await self._get(f"/v1/orders/{order_id}")
        if data.get("amount") is None:
            raise RazorpayError("Invalid order response")
        return {
            "id": data.get("id", order_id),
            "amount": int(data["amount"]),
            "currency": data.get("currency"),
            "status": data.get("status"),
        }
