# useraccounts/utils/response.py
# Shared success/failure response envelope

from typing import Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(message: str, data=None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Return a success payload."""
    content = {"success": True, "message": message}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    error: Optional[str] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Return a failure payload; ``error`` carries internal detail in development only."""
    content = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content, headers=headers)
