# useraccounts/utils/constants.py
# Enumerations shared by the user model, the store and the OTP service

from enum import Enum


class SubscriptionPlan(str, Enum):
    """Enum for subscription plans."""
    FREE = "Free"
    BASIC = "Basic"
    PREMIUM = "Premium"


SUBSCRIPTION_PLANS = [p.value for p in SubscriptionPlan]


class OTPChannel(str, Enum):
    """Delivery channel of an OTP; each channel owns one OTP slot on the user."""
    EMAIL = "email"
    MOBILE = "mobile"

    @property
    def otp_field(self) -> str:
        return _OTP_FIELDS[self]

    @property
    def identifier_field(self) -> str:
        return _IDENTIFIER_FIELDS[self]


_OTP_FIELDS = {
    OTPChannel.EMAIL: "email_otp",
    OTPChannel.MOBILE: "mobile_otp",
}

_IDENTIFIER_FIELDS = {
    OTPChannel.EMAIL: "email",
    OTPChannel.MOBILE: "mobile_number",
}

# Single issuance timestamp shared by both OTP slots
OTP_GENERATED_AT_FIELD = "otp_generated_at"

OTP_MIN = 100000
OTP_MAX = 999999

# Optional profile fields accepted at registration
PROFILE_FIELDS = [
    "profession",
    "company_name",
    "address_line_1",
    "country",
    "state",
    "city",
]

USERS_COLLECTION = "users"
