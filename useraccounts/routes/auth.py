# useraccounts/routes/auth.py
# Authentication routes for registration, password login and OTP login

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from useraccounts.dependencies import get_account_service
from useraccounts.exceptions import ValidationError
from useraccounts.models.user import OTPRequest, OTPVerification, RegistrationForm, UserLogin
from useraccounts.services.account_service import AccountService
from useraccounts.services.image_service import temporary_upload
from useraccounts.utils.response import success_response
from useraccounts.utils.validators import validate_image_content_type

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register")
async def register(
    request: Request,
    email: Optional[str] = Form(None),
    mobile_number: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    profession: Optional[str] = Form(None),
    company_name: Optional[str] = Form(None),
    address_line_1: Optional[str] = Form(None),
    country: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    subscription_plan: Optional[str] = Form(None),
    newsletter: Optional[bool] = Form(None),
    file: Optional[UploadFile] = File(None),
    service: AccountService = Depends(get_account_service),
):
    """Register a new user with a profile image and issue both OTPs."""
    form = RegistrationForm(
        email=email,
        mobile_number=mobile_number,
        password=password,
        username=username,
        profession=profession,
        company_name=company_name,
        address_line_1=address_line_1,
        country=country,
        state=state,
        city=city,
        subscription_plan=subscription_plan,
        newsletter=newsletter,
    )

    service.validate_registration(form, has_image=file is not None and bool(file.filename))

    if not validate_image_content_type(file.content_type):
        logger.warning(f"Rejected upload with content type: {file.content_type}")
        raise ValidationError("Not an image! Please upload only images.")

    max_bytes = request.app.state.settings.max_upload_bytes
    contents = await file.read(max_bytes + 1)
    if len(contents) > max_bytes:
        raise ValidationError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB")
    if not contents:
        raise ValidationError("Empty file upload")

    with temporary_upload(
        contents,
        request.app.state.settings.upload_dir,
        original_name=file.filename,
        content_type=file.content_type,
    ) as image_path:
        data = service.register(form, image_path)

    return success_response("User registered successfully", data, status.HTTP_201_CREATED)


@router.post("/login")
async def login(request: UserLogin, service: AccountService = Depends(get_account_service)):
    """Authenticate user with email and password."""
    token = service.login(request)
    return success_response("Login successful", token)


@router.post("/generateOTP")
async def generate_otp(request: OTPRequest, service: AccountService = Depends(get_account_service)):
    """Issue a new OTP to the email or mobile number supplied."""
    data = service.generate_otp(request)
    return success_response("OTP generated successfully", data)


@router.post("/verifyOTP")
async def verify_otp(request: OTPVerification, service: AccountService = Depends(get_account_service)):
    """Verify an OTP and log the user in."""
    token = service.verify_otp(request)
    return success_response("Login successful", token)
