"""
Account administration, verification, wishlist and profile endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from ..models import (
    DataResponse, ListResponse, ErrorResponse, ProfileUpdateRequest,
    VerificationSubmitRequest, VerificationStatusRequest
)
from ..dependencies import get_auth_store, get_property_store, get_current_user
from ...security import permissions
from ...stores import AuthStore, PropertyStore
from ...utils.errors import NotFoundError
from ...utils.models import User, VerificationStatus

router = APIRouter(prefix="/users", tags=["users"])

ADMIN_ERRORS = {401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


def _result(ok: bool, done: str, user_id: str) -> dict:
    return {
        "success": ok,
        "message": done if ok else "No change was made",
        "data": {"user_id": user_id},
    }


@router.get("", response_model=ListResponse, responses=ADMIN_ERRORS)
async def list_users(
    verification: Optional[VerificationStatus] = Query(None, description="Filter by verification status"),
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    permissions.require_super_admin(user)
    users = auth_store.users_by_verification(verification)
    return {"success": True, "message": "Users retrieved", "data": [u.to_public_dict() for u in users]}


@router.get("/me/wishlist", response_model=DataResponse, responses={401: {"model": ErrorResponse}})
async def get_wishlist(
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    listings = [p.to_api_dict() for p in property_store.properties if p.id in user.wishlist]
    return {
        "success": True,
        "message": "Wishlist retrieved",
        "data": {"wishlist": list(user.wishlist), "properties": listings},
    }


@router.post("/me/wishlist/{property_id}", response_model=DataResponse, responses={401: {"model": ErrorResponse}})
async def toggle_wishlist(
    property_id: str,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    wishlist = auth_store.toggle_wishlist(property_id, actor=user)
    return {
        "success": True,
        "message": "Wishlist updated",
        "data": {"wishlist": wishlist, "in_wishlist": property_id in wishlist},
    }


@router.get("/{user_id}", response_model=DataResponse, responses=ADMIN_ERRORS)
async def get_user(
    user_id: str,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    permissions.require_self_or_admin(user, user_id)
    target = auth_store.get_user(user_id) or auth_store.fetch_user(user_id)
    if target is None:
        raise NotFoundError(f"User {user_id} not found")
    return {"success": True, "message": "User retrieved", "data": target.to_public_dict()}


@router.patch("/{user_id}", response_model=DataResponse, responses=ADMIN_ERRORS)
async def update_profile(
    user_id: str,
    req: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    updates = req.model_dump(mode="json", exclude_unset=True)
    ok = auth_store.update_user(user, user_id, updates)
    return _result(ok, "Profile updated", user_id)


@router.post("/{user_id}/verification", response_model=DataResponse, responses=ADMIN_ERRORS)
async def submit_verification(
    user_id: str,
    req: VerificationSubmitRequest,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    ok = auth_store.submit_for_verification(user, user_id, req.document_url)
    return _result(ok, "Verification submitted", user_id)


@router.put("/{user_id}/verification", response_model=DataResponse, responses=ADMIN_ERRORS)
async def update_verification(
    user_id: str,
    req: VerificationStatusRequest,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    ok = auth_store.update_verification_status(user, user_id, req.status)
    return _result(ok, f"Verification {req.status.value}", user_id)


@router.post("/{user_id}/toggle-status", response_model=DataResponse, responses=ADMIN_ERRORS)
async def toggle_status(
    user_id: str,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    ok = auth_store.toggle_user_status(user, user_id)
    return _result(ok, "User status toggled", user_id)


@router.post("/{user_id}/host", response_model=DataResponse, responses=ADMIN_ERRORS)
async def switch_to_host(
    user_id: str,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    ok = auth_store.switch_to_host_role(user, user_id)
    return _result(ok, "Switched to host", user_id)


@router.delete("/{user_id}", response_model=DataResponse, responses=ADMIN_ERRORS)
async def delete_user(
    user_id: str,
    user: User = Depends(get_current_user),
    auth_store: AuthStore = Depends(get_auth_store)
):
    ok = auth_store.delete_user(user, user_id)
    return _result(ok, "User deleted", user_id)
