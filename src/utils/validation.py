"""
Field rules shared by the API models and the client-side form
"""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d\s().-]+$")
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f\x7f]")
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 30

INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
INVALID_PHONE_MESSAGE = "Please enter a valid phone number"
CONTROL_CHAR_MESSAGE = "Control characters are not allowed"


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def is_valid_phone(value: str) -> bool:
    """Digits with optional leading +, spaces, dashes, dots or parentheses"""
    if not PHONE_PATTERN.match(value):
        return False
    digit_count = sum(char.isdigit() for char in value)
    return MIN_PHONE_DIGITS <= digit_count <= MAX_PHONE_DIGITS


def has_control_chars(value: str) -> bool:
    return bool(CONTROL_CHAR_PATTERN.search(value))
