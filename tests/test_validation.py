"""Tests for :mod:`keyper.validation`."""

from unittest import TestCase

from keyper import validation
from keyper.exceptions import ValidationError

PHONE_PATTERN = r'^[6-9]\d{9}$'


class TestEmail(TestCase):
    def test_valid(self):
        for email in ('a@x.com', 'first.last+tag@example.co.in'):
            self.assertTrue(validation.is_valid_email(email), email)

    def test_invalid(self):
        for email in ('', 'a@x', 'no-at.com', 'a b@x.com', 'a@x.c'):
            self.assertFalse(validation.is_valid_email(email), email)


class TestPhone(TestCase):
    def test_default_pattern(self):
        """Ten digits, starting with 6 to 9."""
        self.assertTrue(validation.is_valid_phone('9123456789', PHONE_PATTERN))
        self.assertTrue(validation.is_valid_phone('6000000000', PHONE_PATTERN))
        self.assertFalse(validation.is_valid_phone('5123456789',
                                                   PHONE_PATTERN))
        self.assertFalse(validation.is_valid_phone('912345678', PHONE_PATTERN))
        self.assertFalse(validation.is_valid_phone('91234567890',
                                                   PHONE_PATTERN))
        self.assertFalse(validation.is_valid_phone('', PHONE_PATTERN))

    def test_custom_pattern(self):
        """The accepted numbering plan is configurable."""
        self.assertTrue(validation.is_valid_phone('+15551234567',
                                                  r'^\+1\d{10}$'))


class TestValidateContact(TestCase):
    def test_email_checked_first(self):
        """With both malformed, the email is reported."""
        with self.assertRaises(ValidationError) as ctx:
            validation.validate_contact('bad', '123', PHONE_PATTERN)
        self.assertEqual(ctx.exception.code, 'INVALID_EMAIL')
        self.assertEqual(ctx.exception.status_code, 400)

    def test_bad_phone(self):
        with self.assertRaises(ValidationError) as ctx:
            validation.validate_contact('a@x.com', '123', PHONE_PATTERN)
        self.assertEqual(ctx.exception.code, 'INVALID_PHONE')

    def test_valid(self):
        validation.validate_contact('a@x.com', '9123456789', PHONE_PATTERN)


class TestClassifyUsername(TestCase):
    def test_classify(self):
        self.assertEqual(validation.classify_username('a@x.com',
                                                      PHONE_PATTERN),
                         validation.EMAIL)
        self.assertEqual(validation.classify_username('9123456789',
                                                      PHONE_PATTERN),
                         validation.PHONE)
        self.assertIsNone(validation.classify_username('someone',
                                                       PHONE_PATTERN))
