"""Format checks for emails, phone numbers and sign-in usernames."""

import re
from typing import Optional

from .exceptions import ValidationError

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

EMAIL = 'email'
PHONE = 'phone'


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ''))


def is_valid_phone(phone: str, pattern: str) -> bool:
    """Check ``phone`` against the deployment's phone number pattern."""
    return bool(re.match(pattern, phone or ''))


def validate_contact(email: str, phone: str, phone_pattern: str) -> None:
    """
    Check the contact details given at registration, email first.

    Raises
    ------
    :class:`.ValidationError`
        With code ``INVALID_EMAIL`` or ``INVALID_PHONE``.
    """
    if not is_valid_email(email):
        raise ValidationError('Invalid email format', 'INVALID_EMAIL')
    if not is_valid_phone(phone, phone_pattern):
        raise ValidationError('Invalid phone number', 'INVALID_PHONE')


def classify_username(username: str, phone_pattern: str) -> Optional[str]:
    """
    Decide whether a sign-in username is an email address or a phone number.

    Returns
    -------
    str or None
        :const:`EMAIL`, :const:`PHONE`, or ``None`` if it is neither.
    """
    if is_valid_email(username):
        return EMAIL
    if is_valid_phone(username, phone_pattern):
        return PHONE
    return None
