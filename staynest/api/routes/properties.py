"""
Listing search, hosting and moderation endpoints.
"""
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query
from ..models import (
    DataResponse, ListResponse, ErrorResponse, PropertyRequest, PropertyUpdateRequest,
    PropertyStatusRequest
)
from ..dependencies import get_property_store, get_current_user, get_optional_user
from ...security import permissions
from ...stores import PropertyStore
from ...utils.errors import NotFoundError
from ...utils.models import User, PropertyStatus

router = APIRouter(prefix="/properties", tags=["properties"])

WRITE_ERRORS = {
    401: {"model": ErrorResponse}, 403: {"model": ErrorResponse},
    404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}
}


@router.get("", response_model=ListResponse, summary="Search approved listings")
async def search_properties(
    location: Optional[str] = Query(None, description="Substring of the listing location"),
    guests: Optional[int] = Query(None, ge=1, description="Party size"),
    min_price: float = Query(0, ge=0, description="Lowest nightly price"),
    max_price: Optional[float] = Query(None, ge=0, description="Highest nightly price"),
    amenities: Optional[List[str]] = Query(None, description="Required amenities"),
    property_store: PropertyStore = Depends(get_property_store)
):
    results = property_store.search_properties(
        location=location, guests=guests, min_price=min_price,
        max_price=max_price, amenities=amenities
    )
    return {
        "success": True,
        "message": f"{len(results)} listings found",
        "data": [p.to_api_dict() for p in results],
    }


@router.get("/mine", response_model=ListResponse, responses=WRITE_ERRORS)
async def my_properties(
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    permissions.require_host(user)
    listings = property_store.properties_for_host(user.id)
    return {"success": True, "message": "Listings retrieved", "data": [p.to_api_dict() for p in listings]}


@router.get("/pending", response_model=ListResponse, responses=WRITE_ERRORS)
async def pending_properties(
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    permissions.require_super_admin(user)
    listings = property_store.pending_properties()
    return {"success": True, "message": "Pending listings retrieved", "data": [p.to_api_dict() for p in listings]}


@router.get("/{property_id}", response_model=DataResponse, responses={404: {"model": ErrorResponse}})
async def get_property(
    property_id: str,
    user: Optional[User] = Depends(get_optional_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    prop = property_store.get_property_by_id(property_id)
    visible = prop is not None and (
        prop.status == PropertyStatus.APPROVED
        or (user is not None and (user.is_super_admin or user.id == prop.host.id))
    )
    if not visible:
        raise NotFoundError(f"Property {property_id} not found")
    return {"success": True, "message": "Listing retrieved", "data": prop.to_api_dict()}


@router.post("", response_model=DataResponse, responses=WRITE_ERRORS)
async def create_property(
    req: PropertyRequest,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    property_id = property_store.add_property(user, req.model_dump(mode="json"))
    if property_id is None:
        raise HTTPException(status_code=500, detail={"message": "Failed to add property", "error_code": "CREATION_FAILED"})
    return {"success": True, "message": "Listing submitted for review", "data": {"id": property_id}}


@router.patch("/{property_id}", response_model=DataResponse, responses=WRITE_ERRORS)
async def update_property(
    property_id: str,
    req: PropertyUpdateRequest,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    updates = req.model_dump(mode="json", exclude_unset=True)
    ok = property_store.update_property(user, property_id, updates)
    if not ok:
        raise HTTPException(status_code=500, detail={"message": "Failed to update property", "error_code": "UPDATE_FAILED"})
    return {"success": True, "message": "Listing updated", "data": {"id": property_id, "updated": sorted(updates)}}


@router.delete("/{property_id}", response_model=DataResponse, responses=WRITE_ERRORS)
async def delete_property(
    property_id: str,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    if not property_store.delete_property(user, property_id):
        raise HTTPException(status_code=500, detail={"message": "Failed to delete property", "error_code": "DELETE_FAILED"})
    return {"success": True, "message": "Listing deleted", "data": {"id": property_id}}


@router.put("/{property_id}/status", response_model=DataResponse, responses=WRITE_ERRORS)
async def update_property_status(
    property_id: str,
    req: PropertyStatusRequest,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    if not property_store.update_property_status(user, property_id, req.status):
        raise HTTPException(status_code=500, detail={"message": "Failed to update property status", "error_code": "UPDATE_FAILED"})
    return {"success": True, "message": f"Listing {req.status.value}", "data": {"id": property_id, "status": req.status.value}}
