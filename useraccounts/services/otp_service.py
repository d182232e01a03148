# useraccounts/services/otp_service.py
# One-time passcode issuance and verification

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from useraccounts.utils.constants import OTP_GENERATED_AT_FIELD, OTP_MAX, OTP_MIN, OTPChannel

logger = logging.getLogger(__name__)


class OTPFailureReason(str, Enum):
    NOT_GENERATED = "NOT_GENERATED"
    EXPIRED = "EXPIRED"
    MISMATCH = "MISMATCH"


FAILURE_MESSAGES = {
    OTPFailureReason.NOT_GENERATED: "OTP not generated",
    OTPFailureReason.EXPIRED: "OTP expired",
    OTPFailureReason.MISMATCH: "Invalid OTP",
}


@dataclass(frozen=True)
class OTPCheck:
    valid: bool
    reason: Optional[OTPFailureReason] = None

    @property
    def message(self) -> str:
        if self.valid:
            return "OTP verified successfully"
        return FAILURE_MESSAGES[self.reason]


def generate_otp() -> str:
    """Generate a 6-digit OTP."""
    return str(secrets.randbelow(OTP_MAX - OTP_MIN + 1) + OTP_MIN)


def _as_utc(moment: datetime) -> datetime:
    # MongoDB hands back naive UTC datetimes
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class OTPService:
    """Issues codes into a user's OTP slots and checks candidate codes.

    Both slots share one issuance timestamp, so issuing a code on either
    channel restarts the expiry window of the other.
    """

    def __init__(self, expiry_minutes: int):
        self.expiry_minutes = expiry_minutes

    def issue(self, channel: OTPChannel, now: Optional[datetime] = None) -> Tuple[str, dict]:
        """Return a fresh code and the document changes that store it."""
        code = generate_otp()
        changes = {
            channel.otp_field: code,
            OTP_GENERATED_AT_FIELD: now or datetime.now(timezone.utc),
        }
        return code, changes

    def issue_all(self, now: Optional[datetime] = None) -> Tuple[dict, dict]:
        """Issue codes for every channel under a single timestamp."""
        now = now or datetime.now(timezone.utc)
        codes = {}
        changes = {OTP_GENERATED_AT_FIELD: now}
        for channel in OTPChannel:
            code = generate_otp()
            codes[channel] = code
            changes[channel.otp_field] = code
        return codes, changes

    def verify(
        self,
        user: dict,
        channel: OTPChannel,
        candidate: str,
        now: Optional[datetime] = None,
    ) -> OTPCheck:
        """Check ``candidate`` against the slot without consuming it."""
        generated_at = user.get(OTP_GENERATED_AT_FIELD)
        stored = user.get(channel.otp_field)
        if generated_at is None or stored is None:
            return OTPCheck(valid=False, reason=OTPFailureReason.NOT_GENERATED)

        now = _as_utc(now or datetime.now(timezone.utc))
        elapsed_minutes = int((now - _as_utc(generated_at)).total_seconds() // 60)
        if elapsed_minutes > self.expiry_minutes:
            return OTPCheck(valid=False, reason=OTPFailureReason.EXPIRED)

        if stored != str(candidate).strip():
            return OTPCheck(valid=False, reason=OTPFailureReason.MISMATCH)

        return OTPCheck(valid=True)

    @staticmethod
    def consume(channel: OTPChannel) -> dict:
        """Document changes that clear a verified slot."""
        return {channel.otp_field: None}
