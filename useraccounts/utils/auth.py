# useraccounts/utils/auth.py
# Password hashing, JWT token handling and the bearer-token dependency

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from useraccounts.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10

# HTTP Bearer for token extraction; missing headers are reported as 401 below
security = HTTPBearer(auto_error=False)


class PasswordHasher:
    """One-way bcrypt hashing of stored credentials."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """Verify a password against its hash."""
        if not plain_password or not hashed_password:
            return False
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False


class TokenIssuer:
    """Signs and verifies bearer tokens carrying the user's identity."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_days: int = 7):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = timedelta(days=expire_days)

    def issue(self, claims: dict) -> str:
        """Create a JWT access token."""
        now = datetime.now(timezone.utc)
        to_encode = claims.copy()
        to_encode.update({"iat": now, "exp": now + self.expires_in})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """Verify and decode a JWT token."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise InvalidTokenError()
        if not payload.get("email") or not payload.get("mobile_number"):
            raise InvalidTokenError()
        return payload


def user_claims(user: dict) -> dict:
    return {
        "user_id": str(user["_id"]),
        "email": user["email"],
        "mobile_number": user["mobile_number"],
    }


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Get current authenticated user."""
    if credentials is None:
        raise InvalidTokenError("Access denied. No token provided")

    claims = request.app.state.token_issuer.verify(credentials.credentials)

    user = request.app.state.credential_store.find_by_email_and_mobile(
        claims["email"], claims["mobile_number"]
    )
    if user is None:
        raise InvalidTokenError("User not found")
    return user
