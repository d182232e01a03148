# useraccounts/services/notification_service.py
# Best-effort OTP delivery over SMTP email and an HTTP SMS gateway

import logging
import smtplib
import ssl
from email.message import EmailMessage

import httpx

from useraccounts.config import Settings

logger = logging.getLogger(__name__)


class NotificationSender:
    """Sends OTPs out of band. Failures are logged and reported as False."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def send_email_otp(self, to_email: str, otp: str) -> bool:
        """Send OTP via email."""
        settings = self.settings
        if not settings.smtp_host or not settings.email_sender:
            logger.warning(f"SMTP not configured; email OTP for {to_email} not delivered")
            return False

        try:
            body = f"""
Hello,

Your OTP (One-Time Password) is: {otp}

This OTP is valid for {settings.otp_expiry_minutes} minutes only. Please do not share this code with anyone.

If you didn't request this OTP, please ignore this email.
            """

            msg = EmailMessage()
            msg["From"] = settings.email_sender
            msg["To"] = to_email
            msg["Subject"] = "Your login OTP"
            msg.set_content(body.strip())

            context = ssl.create_default_context()
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
                server.starttls(context=context)
                if settings.smtp_user:
                    server.login(settings.smtp_user, settings.smtp_pass)
                server.send_message(msg)
            logger.info(f"OTP email sent to {to_email}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send OTP email to {to_email}: {e}")
            return False

    def send_mobile_otp(self, mobile_number: str, otp: str) -> bool:
        """Send OTP via the SMS gateway."""
        settings = self.settings
        if not settings.sms_api_url:
            logger.warning(f"SMS gateway not configured; mobile OTP for {mobile_number} not delivered")
            return False

        payload = {
            "to": mobile_number,
            "message": f"Your OTP is {otp}. It is valid for {settings.otp_expiry_minutes} minutes.",
        }
        headers = {"Content-Type": "application/json"}
        if settings.sms_api_key:
            headers["X-API-KEY"] = settings.sms_api_key

        try:
            response = httpx.post(settings.sms_api_url, json=payload, headers=headers, timeout=10.0)
        except httpx.HTTPError as e:
            logger.error(f"SMS OTP error for {mobile_number}: {e}")
            return False

        if response.status_code in (200, 201, 202):
            logger.info(f"OTP SMS sent to {mobile_number}")
            return True
        logger.warning(f"SMS OTP failed [{response.status_code}]: {response.text}")
        return False
