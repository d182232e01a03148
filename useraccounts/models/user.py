# useraccounts/models/user.py
# User document defaults and request/response models for authentication

from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from useraccounts.utils.constants import PROFILE_FIELDS, SubscriptionPlan


class RegistrationForm(BaseModel):
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None
    profession: Optional[str] = None
    company_name: Optional[str] = None
    address_line_1: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    subscription_plan: Optional[str] = None
    newsletter: Optional[bool] = None


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class OTPRequest(BaseModel):
    email: Optional[str] = None
    mobile_number: Optional[str] = Field(
        None, validation_alias=AliasChoices("mobile_number", "mobileNumber")
    )


class OTPVerification(BaseModel):
    email: Optional[str] = None
    mobile_number: Optional[str] = Field(
        None, validation_alias=AliasChoices("mobile_number", "mobileNumber")
    )
    otp: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    old_password: Optional[str] = Field(
        None, validation_alias=AliasChoices("old_password", "oldPassword")
    )
    new_password: Optional[str] = Field(
        None, validation_alias=AliasChoices("new_password", "newPassword")
    )
    confirm_password: Optional[str] = Field(
        None, validation_alias=AliasChoices("confirm_password", "confirmPassword")
    )


class PasswordCheck(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    user_id: str
    email: str
    mobile_number: str
    username: Optional[str] = None
    profile_image: Optional[str] = None
    subscription_plan: SubscriptionPlan = SubscriptionPlan.FREE
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, user: dict) -> "UserResponse":
        return cls(
            user_id=str(user["_id"]),
            email=user["email"],
            mobile_number=user["mobile_number"],
            username=user.get("username"),
            profile_image=user.get("profile_image"),
            subscription_plan=user.get("subscription_plan", SubscriptionPlan.FREE),
            last_login_at=user.get("last_login_at"),
        )


class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


def normalize_email(email: str) -> str:
    return email.strip().lower()


def new_user_document(form: RegistrationForm, profile_image: str) -> dict:
    """Build a user document with every field at its default."""
    now = datetime.now(timezone.utc)
    document = {
        "email": normalize_email(form.email),
        "mobile_number": form.mobile_number.strip(),
        "password": form.password,
        "username": form.username.strip(),
        "profile_image": profile_image,
        "subscription_plan": (form.subscription_plan or SubscriptionPlan.FREE.value),
        "newsletter": bool(form.newsletter),
        "email_otp": None,
        "mobile_otp": None,
        "otp_generated_at": None,
        "login_attempts": 0,
        "last_login_at": None,
        "created_at": now,
        "updated_at": now,
    }
    for field in PROFILE_FIELDS:
        document[field] = getattr(form, field)
    return document
