"""Account management endpoints."""

from fastapi import APIRouter, Depends
from starlette.requests import Request

from newsdesk.api.deps import SESSION_TOKEN_KEY, bearer_token, get_account_service
from newsdesk.schemas.auth import AccountDeleteRequest
from newsdesk.services.account import AccountService

router = APIRouter()


@router.post("/delete")
def delete_account(
    body: AccountDeleteRequest,
    request: Request,
    svc: AccountService = Depends(get_account_service),
) -> dict[str, bool | str]:
    token = bearer_token(request) or request.session.get(SESSION_TOKEN_KEY)
    svc.delete_account(token, body.confirmation)
    request.session.pop(SESSION_TOKEN_KEY, None)
    return {"success": True, "message": "Account deleted successfully."}
