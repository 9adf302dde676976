import hashlib
import hmac
import unittest

from storefront.services.signature import checkout_signature, verify_checkout_signature

SECRET = "test_key_secret"


class TestCheckoutSignature(unittest.TestCase):
    def test_signature_is_hmac_of_order_and_payment(self):
        expected = hmac.new(SECRET.encode(), b"order_abc|pay_1", hashlib.sha256).hexdigest()
        self.assertEqual(checkout_signature("order_abc", "pay_1", SECRET), expected)

    def test_valid_signature_verifies(self):
        signature = checkout_signature("order_abc", "pay_1", SECRET)
        self.assertTrue(verify_checkout_signature("order_abc", "pay_1", signature, SECRET))

    def test_tampered_values_are_rejected(self):
        signature = checkout_signature("order_abc", "pay_1", SECRET)
        self.assertFalse(verify_checkout_signature("order_abc", "pay_2", signature, SECRET))
        self.assertFalse(verify_checkout_signature("order_other", "pay_1", signature, SECRET))
        self.assertFalse(verify_checkout_signature("order_abc", "pay_1", signature, "other_secret"))
        self.assertFalse(verify_checkout_signature("order_abc", "pay_1", "", SECRET))

    def test_missing_secret_is_an_error(self):
        with self.assertRaises(ValueError):
            verify_checkout_signature("order_abc", "pay_1", "sig", "")


if __name__ == "__main__":
    unittest.main()
