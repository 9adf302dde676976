import json
import unittest
from unittest import mock

from api_support import ApiTestCase, ORDER_PAYLOAD
from storefront.config import settings
from storefront.main import app
from storefront.routers.payments import get_razorpay_client


class TestCreatePaymentOrder(ApiTestCase):
    def test_converts_rupees_to_paise(self):
        res = self.client.post("/api/payments/create-payment-order", json={"amount": 500, "receipt": "rcpt_1"})

        self.assertEqual(res.status_code, 200, res.text)
        self.assertEqual(res.json(), {"id": "order_test123", "amount": 50000, "currency": "INR"})
        sent = json.loads(self.gateway_requests[0].content)
        self.assertEqual(sent["amount"], 50000)
        self.assertEqual(sent["receipt"], "rcpt_1")
        self.assertTrue(self.gateway_requests[0].headers["Authorization"].startswith("Basic "))
        self.assertEqual(self.gateway_requests[0].url.path, "/v1/orders")

    def test_rejects_small_amounts(self):
        res = self.client.post("/api/payments/create-payment-order", json={"amount": 0})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["detail"], "Invalid amount")
        self.assertEqual(self.gateway_requests, [])

    def test_gateway_error_is_bad_gateway(self):
        self.gateway_status = 500
        res = self.client.post("/api/payments/create-payment-order", json={"amount": 10})
        self.assertEqual(res.status_code, 502)

    def test_unconfigured_gateway(self):
        app.dependency_overrides.pop(get_razorpay_client)
        with mock.patch.multiple(settings, RAZORPAY_KEY_ID=None, RAZORPAY_KEY_SECRET=None):
            res = self.client.post("/api/payments/create-payment-order", json={"amount": 10})
        self.assertEqual(res.status_code, 503)

    def test_reference_is_stored_on_order_once(self):
        order = self.create_order()
        body = {"amount": order["totalPrice"], "orderId": order["id"]}

        first = self.client.post("/api/payments/create-payment-order", json=body)
        second = self.client.post("/api/payments/create-payment-order", json=body)

        self.assertEqual(first.json()["id"], "order_test123")
        self.assertEqual(second.json(), first.json())
        self.assertEqual(len(self.gateway_requests), 1)
        self.assertEqual(self.client.get(f"/api/orders/{order['id']}").json()["razorpayOrderId"], "order_test123")

    def test_unknown_order(self):
        res = self.client.post("/api/payments/create-payment-order", json={"amount": 10, "orderId": "nope"})
        self.assertEqual(res.status_code, 404)

    def test_amount_must_match_stored_total(self):
        order = self.create_order()
        underpay = {"amount": 1, "orderId": order["id"]}

        res = self.client.post("/api/payments/create-payment-order", json=underpay)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["detail"], "Amount does not match order total")
        self.assertEqual(self.gateway_requests, [])
        self.assertIsNone(self.client.get(f"/api/orders/{order['id']}").json()["razorpayOrderId"])

        created = self.client.post(
            "/api/payments/create-payment-order",
            json={"amount": order["totalPrice"], "orderId": order["id"]},
        )
        self.assertEqual(created.json()["amount"], 55000)

        replay = self.client.post("/api/payments/create-payment-order", json=underpay)
        self.assertEqual(replay.status_code, 400)
        self.assertEqual(len(self.gateway_requests), 1)


class TestVerifyPayment(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.order = self.create_order()
        self.client.post(
            "/api/payments/create-payment-order",
            json={"amount": self.order["totalPrice"], "orderId": self.order["id"]},
        )

    def test_valid_signature_marks_order_paid(self):
        res = self.client.post("/api/payments/verify", json=self.verify_payload(self.order["id"]))

        self.assertEqual(res.status_code, 200, res.text)
        data = res.json()
        self.assertTrue(data["isPaid"])
        self.assertIsNotNone(data["paidAt"])
        self.assertEqual(data["razorpayPaymentId"], "pay_1")
        self.assertEqual(data["status"], "processing")

    def test_legacy_route(self):
        res = self.client.post("/api/payments/verify-razorpay", json=self.verify_payload(self.order["id"]))
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.json()["isPaid"])

    def test_bad_signature_is_rejected(self):
        payload = self.verify_payload(self.order["id"], signature="deadbeef")
        res = self.client.post("/api/payments/verify", json=payload)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["detail"], "Invalid signature, payment verification failed")
        self.assertFalse(self.client.get(f"/api/orders/{self.order['id']}").json()["isPaid"])

    def test_payment_for_another_gateway_order_is_rejected(self):
        payload = self.verify_payload(self.order["id"], gateway_order_id="order_other")
        res = self.client.post("/api/payments/verify", json=payload)
        self.assertEqual(res.status_code, 400)

    def test_repeat_verification_is_idempotent(self):
        payload = self.verify_payload(self.order["id"])
        first = self.client.post("/api/payments/verify", json=payload)
        second = self.client.post("/api/payments/verify", json=payload)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()["paidAt"], first.json()["paidAt"])

    def test_second_payment_conflicts(self):
        self.client.post("/api/payments/verify", json=self.verify_payload(self.order["id"]))
        res = self.client.post("/api/payments/verify", json=self.verify_payload(self.order["id"], payment_id="pay_2"))
        self.assertEqual(res.status_code, 409)

    def test_unknown_order(self):
        res = self.client.post("/api/payments/verify", json=self.verify_payload("missing"))
        self.assertEqual(res.status_code, 404)

    def test_gateway_order_amount_is_checked(self):
        other = self.create_order()
        # a one-rupee gateway order not tied to any store order
        self.client.post("/api/payments/create-payment-order", json={"amount": 1})
        self.assertEqual(self.gateway_orders["order_test123"]["amount"], 100)

        res = self.client.post("/api/payments/verify", json=self.verify_payload(other["id"]))

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["detail"], "Payment amount does not match order total")
        self.assertFalse(self.client.get(f"/api/orders/{other['id']}").json()["isPaid"])
        self.assertEqual(self.gateway_requests[-1].method, "GET")
        self.assertEqual(self.gateway_requests[-1].url.path, "/v1/orders/order_test123")

    def test_unreachable_gateway_leaves_order_unpaid(self):
        self.gateway_status = 500
        res = self.client.post("/api/payments/verify", json=self.verify_payload(self.order["id"]))

        self.assertEqual(res.status_code, 502)
        self.assertFalse(self.client.get(f"/api/orders/{self.order['id']}").json()["isPaid"])

    def test_order_is_bound_to_the_log_context(self):
        with mock.patch("storefront.routers.payments.bind_order_context") as bind:
            self.client.post("/api/payments/verify", json=self.verify_payload(self.order["id"]))
        bind.assert_called_once_with(self.order["id"], "order_test123")


class TestPayPage(ApiTestCase):
    def test_page_embeds_widget_options(self):
        order = self.create_order()
        self.client.post(
            "/api/payments/create-payment-order",
            json={"amount": order["totalPrice"], "orderId": order["id"]},
        )
        res = self.client.get(f"/pay/{order['id']}")

        self.assertEqual(res.status_code, 200)
        self.assertIn("https://checkout.razorpay.com/v1/checkout.js", res.text)
        self.assertIn('"order_id": "order_test123"', res.text)
        self.assertIn('"amount": 55000', res.text)
        self.assertIn('"contact": "9876543210"', res.text)

    def test_page_without_gateway_order(self):
        order = self.create_order()
        res = self.client.get(f"/pay/{order['id']}")
        self.assertEqual(res.status_code, 409)
        self.assertIn("Error initializing payment", res.text)

    def test_script_breaking_names_are_escaped(self):
        address = dict(ORDER_PAYLOAD["shippingAddress"], fullName="</script><script>alert(1)</script>")
        order = self.create_order(shippingAddress=address)
        self.client.post(
            "/api/payments/create-payment-order",
            json={"amount": order["totalPrice"], "orderId": order["id"]},
        )
        res = self.client.get(f"/pay/{order['id']}")
        self.assertNotIn("</script><script>alert(1)", res.text)

    def test_unknown_order(self):
        self.assertEqual(self.client.get("/pay/missing").status_code, 404)


if __name__ == "__main__":
    unittest.main()
