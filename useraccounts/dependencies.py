from fastapi import Request

from useraccounts.services.account_service import AccountService


def get_account_service(request: Request) -> AccountService:
    return request.app.state.account_service
