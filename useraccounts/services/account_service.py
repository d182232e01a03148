# useraccounts/services/account_service.py
# Registration, login, OTP login and password management

import logging
from typing import Optional

from fastapi import HTTPException

from useraccounts.config import Settings
from useraccounts.exceptions import (
    IncorrectPasswordError,
    InternalError,
    InvalidCredentialsError,
    OTPVerificationError,
    PasswordMismatchError,
    PasswordReuseError,
    UserNotFoundError,
    ValidationError,
)
from useraccounts.models.user import (
    ChangePasswordRequest,
    OTPRequest,
    OTPVerification,
    PasswordCheck,
    RegistrationForm,
    Token,
    UserLogin,
    UserResponse,
    new_user_document,
)
from useraccounts.services.credential_store import CredentialStore
from useraccounts.services.image_service import image_to_base64
from useraccounts.services.notification_service import NotificationSender
from useraccounts.services.otp_service import FAILURE_MESSAGES, OTPFailureReason, OTPService
from useraccounts.utils.auth import PasswordHasher, TokenIssuer, user_claims
from useraccounts.utils.constants import OTPChannel
from useraccounts.utils.validators import (
    MIN_PASSWORD_LENGTH,
    validate_email,
    validate_mobile_number,
    validate_password,
    validate_subscription_plan,
)

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        settings: Settings,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        otps: OTPService,
        notifier: NotificationSender,
    ):
        self.settings = settings
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.otps = otps
        self.notifier = notifier

    def _issue_token(self, user: dict) -> Token:
        return Token(
            token=self.tokens.issue(user_claims(user)),
            expires_in=int(self.tokens.expires_in.total_seconds()),
            user=UserResponse.from_document(user),
        )

    def _send(self, channel: OTPChannel, destination: str, code: str) -> bool:
        if channel is OTPChannel.EMAIL:
            sent = self.notifier.send_email_otp(destination, code)
        else:
            sent = self.notifier.send_mobile_otp(destination, code)
        if not sent:
            logger.warning(f"{channel.value} OTP delivery to {destination} failed")
        return sent

    @staticmethod
    def _channel_for(email: Optional[str]) -> OTPChannel:
        return OTPChannel.EMAIL if email else OTPChannel.MOBILE

    def _find_for_channel(self, channel: OTPChannel, email, mobile_number) -> Optional[dict]:
        if channel is OTPChannel.EMAIL:
            return self.store.find_by_email(email)
        return self.store.find_by_mobile(mobile_number)

    @staticmethod
    def validate_registration(form: RegistrationForm, has_image: bool):
        """Raise ValidationError for the first missing or malformed field."""
        if not form.email or not form.mobile_number or not form.password or not form.username:
            raise ValidationError("Email, mobile number, password, and username are required")
        if not has_image:
            raise ValidationError("Profile image is required")
        if not validate_email(form.email):
            raise ValidationError("Please provide a valid email address")
        if not validate_mobile_number(form.mobile_number):
            raise ValidationError("Invalid mobile number format")
        if not validate_password(form.password):
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if not validate_subscription_plan(form.subscription_plan):
            raise ValidationError("Invalid subscription plan")

    def register(self, form: RegistrationForm, image_path: Optional[str]) -> dict:
        """Create an account with both OTP slots issued."""
        logger.info(f"Signup attempt for email: {form.email}")
        try:
            self.validate_registration(form, has_image=bool(image_path))

            document = new_user_document(form, image_to_base64(image_path))
            codes, otp_changes = self.otps.issue_all()
            document.update(otp_changes)

            user = self.store.create(document)

            self._send(OTPChannel.EMAIL, user["email"], codes[OTPChannel.EMAIL])
            self._send(OTPChannel.MOBILE, user["mobile_number"], codes[OTPChannel.MOBILE])

            logger.info(f"User created successfully: {user['email']}")
            return {
                "user_id": str(user["_id"]),
                "email": user["email"],
                "mobile_number": user["mobile_number"],
            }
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Registration error: {str(e)}")
            raise InternalError("Registration failed")

    def login(self, request: UserLogin) -> Token:
        """Authenticate with email and password."""
        logger.info(f"Login attempt for email: {request.email}")
        try:
            if not request.email or not request.password:
                raise ValidationError("Email and password are required")

            user = self.store.find_by_email(request.email)
            if not user or not self.hasher.verify(request.password, user.get("password")):
                logger.warning(f"Failed login for email: {request.email}")
                raise InvalidCredentialsError()

            user = self.store.record_login(user["_id"])
            logger.info(f"User logged in successfully: {user['email']}")
            return self._issue_token(user)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Login error: {str(e)}")
            raise InternalError("Login failed")

    def generate_otp(self, request: OTPRequest) -> dict:
        """Issue a fresh OTP into the slot of the identifier supplied."""
        try:
            if not request.email and not request.mobile_number:
                raise ValidationError("Email or mobile number is required")

            channel = self._channel_for(request.email)
            user = self._find_for_channel(channel, request.email, request.mobile_number)
            if not user:
                raise UserNotFoundError()

            code, changes = self.otps.issue(channel)
            user = self.store.update(user["_id"], changes)

            destination = user[channel.identifier_field]
            self._send(channel, destination, code)
            logger.info(f"{channel.value} OTP generated for user {user['_id']}")

            result = {"type": channel.value, "value": destination}
            if self.settings.is_development:
                result["otp"] = code
            return result
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"OTP generation error: {str(e)}")
            raise InternalError("OTP generation failed")

    def verify_otp(self, request: OTPVerification) -> Token:
        """Log in with an OTP, consuming it on success."""
        try:
            if (not request.email and not request.mobile_number) or not request.otp:
                raise ValidationError("Email/mobile and OTP are required")

            channel = self._channel_for(request.email)
            user = self._find_for_channel(channel, request.email, request.mobile_number)
            if not user:
                raise UserNotFoundError()

            check = self.otps.verify(user, channel, request.otp)
            if not check.valid:
                logger.warning(f"OTP verification failed for user {user['_id']}: {check.reason.value}")
                raise OTPVerificationError(check.reason, check.message)

            # Only the request that still finds the code in the slot consumes it
            user = self.store.record_login(
                user["_id"],
                self.otps.consume(channel),
                guard={channel.otp_field: user[channel.otp_field]},
            )
            if user is None:
                reason = OTPFailureReason.NOT_GENERATED
                raise OTPVerificationError(reason, FAILURE_MESSAGES[reason])
            logger.info(f"OTP login successful for user {user['_id']}")
            return self._issue_token(user)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"OTP verification error: {str(e)}")
            raise InternalError("OTP verification failed")

    def change_password(self, user: dict, request: ChangePasswordRequest):
        """Replace the password of an authenticated user."""
        try:
            if not request.old_password or not request.new_password or not request.confirm_password:
                raise ValidationError("All fields are required")
            if request.new_password != request.confirm_password:
                raise PasswordMismatchError()
            if not validate_password(request.new_password):
                raise ValidationError(
                    f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
                )
            if not self.hasher.verify(request.old_password, user.get("password")):
                raise IncorrectPasswordError()
            if self.hasher.verify(request.new_password, user.get("password")):
                raise PasswordReuseError()

            self.store.update(user["_id"], {"password": request.new_password})
            logger.info(f"Password changed for user {user['_id']}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Password change error: {str(e)}")
            raise InternalError("Password change failed")

    def verify_password(self, request: PasswordCheck) -> dict:
        """Check a password without revealing whether the account exists."""
        try:
            if not request.email or not request.password:
                raise ValidationError("Email and password are required")

            user = self.store.find_by_email(request.email)
            if not user:
                return {"verified": False}
            return {"verified": self.hasher.verify(request.password, user.get("password"))}
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Password verification error: {str(e)}")
            raise InternalError("Password verification failed")
