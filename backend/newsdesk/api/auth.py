"""Sign-up, sign-in and sign-out endpoints backed by Supabase Auth."""

from fastapi import APIRouter, Depends, HTTPException

from newsdesk.api.deps import get_identity_client, get_session_state
from newsdesk.schemas.auth import CredentialsRequest, SessionResponse, UserResponse
from newsdesk.services.identity import IdentityClient, IdentityError
from newsdesk.services.session import SessionState

router = APIRouter()


@router.post("/register", status_code=201)
def register(
    body: CredentialsRequest,
    identity: IdentityClient = Depends(get_identity_client),
) -> dict[str, UserResponse]:
    try:
        user = identity.sign_up(body.email, body.password)
    except IdentityError as exc:
        if exc.status_code is not None and 400 <= exc.status_code < 500:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        raise
    return {"user": UserResponse(**user)}


@router.post("/login")
def login(
    body: CredentialsRequest,
    state: SessionState = Depends(get_session_state),
) -> SessionResponse:
    try:
        result = state.sign_in(body.email, body.password)
    except IdentityError as exc:
        if exc.status_code is not None and 400 <= exc.status_code < 500:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        raise
    return SessionResponse(
        user=UserResponse(**result["user"]),
        access_token=result["access_token"],
        expires_in=result["expires_in"],
    )


@router.post("/logout", status_code=204)
def logout(state: SessionState = Depends(get_session_state)) -> None:
    state.sign_out()


@router.get("/me")
def me(state: SessionState = Depends(get_session_state)) -> dict[str, UserResponse]:
    user = state.require_user()
    return {"user": UserResponse(**user)}
