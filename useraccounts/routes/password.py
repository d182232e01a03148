# useraccounts/routes/password.py
# Password change (authenticated) and password verification routes

from fastapi import APIRouter, Depends

from useraccounts.dependencies import get_account_service
from useraccounts.models.user import ChangePasswordRequest, PasswordCheck
from useraccounts.services.account_service import AccountService
from useraccounts.utils.auth import get_current_user
from useraccounts.utils.response import success_response

router = APIRouter()


@router.post("/change-password")
async def change_password(
    request: ChangePasswordRequest,
    current_user: dict = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Change the password of the authenticated user."""
    service.change_password(current_user, request)
    return success_response("Password changed successfully")


@router.post("/verify-password")
async def verify_password(request: PasswordCheck, service: AccountService = Depends(get_account_service)):
    """Check an email/password pair without requiring a session."""
    data = service.verify_password(request)
    return success_response("Password verification result", data)
