"""
Signup, login and session endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends
from ..models import SignupRequest, LoginRequest, DataResponse, ErrorResponse
from ..dependencies import get_logger, get_auth_store, get_current_user, get_optional_user
from ...security.tokens import create_token
from ...stores import AuthStore
from ...utils.models import User

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_payload(user: User) -> dict:
    return {"token": create_token({"sub": user.id}), "user": user.to_public_dict()}


@router.post("/signup", response_model=DataResponse,
             responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})
async def signup(req: SignupRequest, auth_store: AuthStore = Depends(get_auth_store)):
    user = auth_store.signup(req.name, req.email, req.password, phone=req.phone, start_session=False)
    get_logger().info("user_registered", user_id=user.id)
    return {"success": True, "message": "Registered", "data": _session_payload(user)}


@router.post("/login", response_model=DataResponse, responses={401: {"model": ErrorResponse}})
async def login(req: LoginRequest, auth_store: AuthStore = Depends(get_auth_store)):
    user = auth_store.authenticate(req.email, req.password)
    get_logger().info("user_logged_in", user_id=user.id)
    return {"success": True, "message": "Logged in", "data": _session_payload(user)}


@router.post("/logout", response_model=DataResponse)
async def logout(user: Optional[User] = Depends(get_optional_user)):
    user_id = user.id if user else None
    get_logger().info("user_logged_out", user_id=user_id)
    return {"success": True, "message": "Logged out", "data": {"user_id": user_id, "logged_out": True}}


@router.get("/me", response_model=DataResponse, responses={401: {"model": ErrorResponse}})
async def me(user: User = Depends(get_current_user)):
    return {"success": True, "message": "Current user", "data": user.to_public_dict()}
