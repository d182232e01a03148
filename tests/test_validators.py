# tests/test_validators.py
# Unit tests for validator functions

from useraccounts.utils.validators import (
    validate_email,
    validate_image_content_type,
    validate_mobile_number,
    validate_password,
    validate_subscription_plan,
)


def test_validate_email():
    """Test email validation."""
    assert validate_email(None) == True
    assert validate_email("test@example.com") == True
    assert validate_email(" A@X.com ") == True
    assert validate_email("invalid") == False


def test_validate_mobile_number():
    """Test mobile number validation."""
    assert validate_mobile_number(None) == True
    assert validate_mobile_number("+919876543210") == True
    assert validate_mobile_number("555") == True
    assert validate_mobile_number("12") == False
    assert validate_mobile_number("555-1234") == False


def test_validate_password():
    """Test password length validation."""
    assert validate_password(None) == False
    assert validate_password("12345") == False
    assert validate_password("secret1") == True


def test_validate_subscription_plan():
    """Test subscription plan validation."""
    assert validate_subscription_plan(None) == True
    assert validate_subscription_plan("Premium") == True
    assert validate_subscription_plan("premium") == False
    assert validate_subscription_plan("Gold") == False


def test_validate_image_content_type():
    """Test upload content type validation."""
    assert validate_image_content_type(None) == False
    assert validate_image_content_type("image/png") == True
    assert validate_image_content_type("IMAGE/JPEG") == True
    assert validate_image_content_type("application/pdf") == False
