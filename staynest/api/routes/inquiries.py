"""
Guest-to-host inquiry endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException
from ..models import DataResponse, ListResponse, ErrorResponse, InquiryRequest, InquiryStatusRequest
from ..dependencies import get_property_store, get_current_user
from ...stores import PropertyStore
from ...utils.models import User

router = APIRouter(prefix="/inquiries", tags=["inquiries"])

WRITE_ERRORS = {
    401: {"model": ErrorResponse}, 403: {"model": ErrorResponse},
    404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}
}


@router.post("", response_model=DataResponse, responses=WRITE_ERRORS)
async def create_inquiry(
    req: InquiryRequest,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    inquiry_id = property_store.add_inquiry(user, req.property_id, req.message)
    if inquiry_id is None:
        raise HTTPException(status_code=500, detail={"message": "Failed to send inquiry", "error_code": "CREATION_FAILED"})
    return {"success": True, "message": "Inquiry sent", "data": {"id": inquiry_id}}


@router.get("/mine", response_model=ListResponse, responses={401: {"model": ErrorResponse}})
async def my_inquiries(
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    inquiries = property_store.inquiries_for_guest(user.id)
    return {"success": True, "message": "Inquiries retrieved", "data": [i.to_api_dict() for i in inquiries]}


@router.get("/hosting", response_model=ListResponse, responses={401: {"model": ErrorResponse}})
async def hosting_inquiries(
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    inquiries = property_store.inquiries_for_host(user.id)
    return {"success": True, "message": "Inquiries retrieved", "data": [i.to_api_dict() for i in inquiries]}


@router.put("/{inquiry_id}/status", response_model=DataResponse, responses=WRITE_ERRORS)
async def update_inquiry_status(
    inquiry_id: str,
    req: InquiryStatusRequest,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    if not property_store.update_inquiry_status(user, inquiry_id, req.status):
        raise HTTPException(status_code=500, detail={"message": "Failed to update inquiry", "error_code": "UPDATE_FAILED"})
    return {"success": True, "message": f"Inquiry {req.status.value}", "data": {"id": inquiry_id, "status": req.status.value}}
