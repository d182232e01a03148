# useraccounts/utils/validators.py
# Validation functions for input data

import re
from typing import Optional

from useraccounts.utils.constants import SUBSCRIPTION_PLANS

MIN_PASSWORD_LENGTH = 6


def validate_email(email: Optional[str]) -> bool:
    """Validate email format if provided."""
    if not email:
        return True
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email.strip()))


def validate_mobile_number(mobile_number: Optional[str]) -> bool:
    """Validate mobile number format if provided."""
    if not mobile_number:
        return True
    # Digits only, optionally starting with +; short codes are allowed
    pattern = r"^\+?\d{3,15}$"
    return bool(re.match(pattern, mobile_number.strip()))


def validate_password(password: Optional[str]) -> bool:
    """Validate password length."""
    if not password:
        return False
    return len(password) >= MIN_PASSWORD_LENGTH


def validate_subscription_plan(plan: Optional[str]) -> bool:
    """Validate subscription plan against allowed values if provided."""
    if not plan:
        return True
    return plan in SUBSCRIPTION_PLANS


def validate_image_content_type(content_type: Optional[str]) -> bool:
    """Only image uploads are accepted."""
    if not content_type:
        return False
    return content_type.lower().startswith("image/")
