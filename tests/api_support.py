"""Shared FastAPI test fixture: in-memory SQLite and a mocked Razorpay Orders API."""
import json
import unittest
from unittest import mock

import httpx
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.config import settings
from storefront.db import Base, get_db
from storefront.main import app
from storefront.routers.payments import get_razorpay_client
from storefront.services.razorpay_client import RazorpayClient
from storefront.services.signature import checkout_signature

KEY_ID = "rzp_test_key"
KEY_SECRET = "rzp_test_secret"

ORDER_PAYLOAD = {
    "orderItems": [
        {"product": "p1", "name": "Kashmiri Saffron", "quantity": 2, "price": 200.0, "image": "/saffron.jpg"},
        {"product": "p2", "name": "Black Pepper", "quantity": 1, "price": 120.0, "salePrice": 100.0},
    ],
    "shippingAddress": {
        "fullName": "Asha Rao",
        "email": "asha@example.com",
        "phone": "9876543210",
        "city": "Kochi",
        "country": "India",
    },
    "paymentMethod": "razorpay",
    "taxPrice": 50.0,
    "shippingPrice": 0,
}


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(bind=engine)
        TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

        def override_get_db():
            db = TestingSession()
            try:
                yield db
            finally:
                db.close()

        self.gateway_requests = []
        self.gateway_status = 200
        self.gateway_orders = {}

        def gateway(request):
            self.gateway_requests.append(request)
            if self.gateway_status != 200:
                return httpx.Response(self.gateway_status, json={"error": {"description": "bad"}})
            if request.method == "GET":
                order_id = request.url.path.rsplit("/", 1)[-1]
                if order_id not in self.gateway_orders:
                    return httpx.Response(400, json={"error": {"description": "The id provided does not exist"}})
                return httpx.Response(200, json=self.gateway_orders[order_id])
            body = json.loads(request.content)
            created = {
                "id": "order_test123",
                "entity": "order",
                "amount": body["amount"],
                "currency": body["currency"],
                "receipt": body["receipt"],
                "status": "created",
            }
            self.gateway_orders[created["id"]] = created
            return httpx.Response(200, json=created)

        transport = httpx.MockTransport(gateway)
        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_razorpay_client] = lambda: RazorpayClient(
            key_id=KEY_ID, key_secret=KEY_SECRET, transport=transport
        )

        patcher = mock.patch.multiple(settings, RAZORPAY_KEY_ID=KEY_ID, RAZORPAY_KEY_SECRET=KEY_SECRET)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(app.dependency_overrides.clear)
        self.addCleanup(engine.dispose)

        self.client = TestClient(app)

    def create_order(self, **overrides):
        payload = dict(ORDER_PAYLOAD, **overrides)
        res = self.client.post("/api/orders", json=payload)
        self.assertEqual(res.status_code, 201, res.text)
        return res.json()

    def verify_payload(self, order_id, payment_id="pay_1", gateway_order_id="order_test123", signature=None):
        return {
            "razorpay_order_id": gateway_order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature or checkout_signature(gateway_order_id, payment_id, KEY_SECRET),
            "orderId": order_id,
        }


