"""Unit tests for savekeep.core.validation: credential, payment and identifier formats."""

import unittest
import uuid

from savekeep.core.errors import ErrorKind, ServiceError
from savekeep.core.validation import (
    is_valid_password,
    is_valid_username,
    parse_identifier,
    validate_credentials,
    validate_payment,
)

VALID_PAYMENT = {
    "first_name": "Alice",
    "last_name": "Liddell-Smith",
    "address": "12 Rabbit Hole Lane, Oxford.",
    "card_number": "4242424242424242",
    "cvc": "123",
    "exp_month": "9",
    "exp_year": "29",
}


class TestUsername(unittest.TestCase):
    def test_valid(self) -> None:
        for name in ("bob", "alice123", "Player_One", "x-y-z", "A" * 15):
            self.assertTrue(is_valid_username(name), name)

    def test_invalid(self) -> None:
        for name in ("ab", "A" * 16, "has space", "émile", "semi;colon", ""):
            self.assertFalse(is_valid_username(name), name)


class TestPassword(unittest.TestCase):
    def test_valid(self) -> None:
        for password in ("Str0ng!Pass", "Aa1!" + "x" * 26):
            self.assertTrue(is_valid_password(password), password)

    def test_too_short_or_long(self) -> None:
        self.assertFalse(is_valid_password("Sh0rt!Pw"))
        self.assertFalse(is_valid_password("Aa1!" + "x" * 27))

    def test_each_character_class_required(self) -> None:
        self.assertFalse(is_valid_password("str0ng!pass"))  # no upper
        self.assertFalse(is_valid_password("STR0NG!PASS"))  # no lower
        self.assertFalse(is_valid_password("Strong!Pass"))  # no digit
        self.assertFalse(is_valid_password("Str0ngPass1"))  # no special

    def test_validate_credentials_raises_creds_format(self) -> None:
        with self.assertRaises(ServiceError) as ctx:
            validate_credentials("alice123", "weak")
        self.assertEqual(ctx.exception.kind, ErrorKind.CREDS_FORMAT)
        with self.assertRaises(ServiceError):
            validate_credentials("a", "Str0ng!Pass")


class TestPayment(unittest.TestCase):
    def test_valid_form(self) -> None:
        self.assertIsNone(validate_payment(**VALID_PAYMENT))

    def test_zero_padded_month(self) -> None:
        self.assertIsNone(validate_payment(**{**VALID_PAYMENT, "exp_month": "09"}))
        self.assertIsNone(validate_payment(**{**VALID_PAYMENT, "exp_month": "12"}))

    def test_each_bad_field_rejected(self) -> None:
        bad_values = {
            "first_name": "Al1ce",
            "last_name": "",
            "address": "12 Rabbit Hole Lane; DROP",
            "card_number": "4242-4242",
            "cvc": "12",
            "exp_month": "13",
            "exp_year": "2029",
        }
        for field, value in bad_values.items():
            with self.subTest(field=field):
                with self.assertRaises(ServiceError) as ctx:
                    validate_payment(**{**VALID_PAYMENT, field: value})
                self.assertEqual(ctx.exception.kind, ErrorKind.PAYMENT_DETAILS)


class TestIdentifier(unittest.TestCase):
    def test_uuid(self) -> None:
        account_id = uuid.uuid4()
        self.assertEqual(parse_identifier(str(account_id)), account_id)

    def test_username(self) -> None:
        self.assertEqual(parse_identifier("alice123"), "alice123")

    def test_malformed(self) -> None:
        with self.assertRaises(ServiceError) as ctx:
            parse_identifier("not a user!")
        self.assertEqual(ctx.exception.kind, ErrorKind.CREDS_FORMAT)


if __name__ == "__main__":
    unittest.main()
