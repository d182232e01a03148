from fastapi import HTTPException, status


class ValidationError(HTTPException):
    def __init__(self, detail="Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail="Account already registered"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail="Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthError(HTTPException):
    def __init__(self, detail="Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InternalError(HTTPException):
    def __init__(self, detail="Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class DuplicateEmailError(ConflictError):
    def __init__(self):
        super().__init__(detail="Email already registered")


class DuplicateMobileError(ConflictError):
    def __init__(self):
        super().__init__(detail="Mobile number already registered")


class UserNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(detail="User not found")


class InvalidCredentialsError(AuthError):
    def __init__(self):
        # Same message for unknown email and wrong password
        super().__init__(detail="Invalid email or password")


class InvalidTokenError(AuthError):
    def __init__(self, detail="Invalid token"):
        super().__init__(detail=detail)


class OTPVerificationError(AuthError):
    def __init__(self, reason, detail):
        self.reason = reason
        super().__init__(detail=detail)


class IncorrectPasswordError(AuthError):
    def __init__(self):
        super().__init__(detail="Old password is incorrect")


class PasswordMismatchError(ValidationError):
    def __init__(self):
        super().__init__(detail="New passwords do not match")


class PasswordReuseError(ValidationError):
    def __init__(self):
        super().__init__(detail="Old password not allowed")
