import os
import unittest
from unittest import mock

from structlog.contextvars import clear_contextvars, get_contextvars

from storefront.config.settings import Settings
from storefront.logging_config import add_app_context, bind_order_context


class TestSettings(unittest.TestCase):
    def test_allowed_origins_from_comma_separated_env(self):
        env = {"ALLOWED_ORIGINS": "https://manglanam.com, https://www.manglanam.com,"}
        with mock.patch.dict(os.environ, env):
            s = Settings(_env_file=None)
        self.assertEqual(s.ALLOWED_ORIGINS, ["https://manglanam.com", "https://www.manglanam.com"])

    def test_default_origins(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            s = Settings(_env_file=None)
        self.assertIn("http://localhost:5173", s.ALLOWED_ORIGINS)


class TestLogContext(unittest.TestCase):
    def setUp(self):
        clear_contextvars()
        self.addCleanup(clear_contextvars)

    def test_order_context_is_bound(self):
        bind_order_context("ord_1", "order_abc")
        self.assertEqual(get_contextvars(), {"order_id": "ord_1", "razorpay_order_id": "order_abc"})

    def test_missing_gateway_reference_is_left_out(self):
        bind_order_context("ord_1", None)
        self.assertEqual(get_contextvars(), {"order_id": "ord_1"})

    def test_app_context(self):
        event = add_app_context(None, "info", {"event": "order_paid"})
        self.assertEqual(event["app"], "manglanam-storefront")
        self.assertIn("version", event)


if __name__ == "__main__":
    unittest.main()
