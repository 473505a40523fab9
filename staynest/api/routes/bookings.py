"""
Booking API endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from ..models import (
    DataResponse, ListResponse, ErrorResponse, QuoteRequest, CreateBookingRequest,
    BookingStatusRequest, ReviewRequest
)
from ..dependencies import get_logger, get_property_store, get_current_user
from ...pricing import calculate_booking_price
from ...security import permissions
from ...stores import PropertyStore
from ...utils.errors import NotFoundError
from ...utils.models import User


router = APIRouter(prefix="/bookings", tags=["bookings"])

WRITE_ERRORS = {
    401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse},
    409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}
}


@router.post(
    "/quote",
    response_model=DataResponse,
    summary="Price a stay",
    description="Itemized price for a date range; a range without nights cannot be booked",
    responses={404: {"model": ErrorResponse}}
)
async def quote(req: QuoteRequest, property_store: PropertyStore = Depends(get_property_store)):
    prop = property_store.get_property_by_id(req.property_id)
    if prop is None:
        raise NotFoundError(f"Property {req.property_id} not found")
    breakdown = calculate_booking_price(req.check_in, req.check_out, prop)
    return {"success": True, "message": "Price calculated", "data": breakdown.to_dict()}


@router.post(
    "",
    response_model=DataResponse,
    summary="Request a booking",
    responses=WRITE_ERRORS
)
async def create_booking(
    req: CreateBookingRequest,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    """
    Request a booking for the current user.

    The total is priced server-side from the listing's current rates.
    """
    booking_id = property_store.add_booking(
        user, req.property_id, req.check_in, req.check_out, req.guests, req.payment_method
    )
    if booking_id is None:
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to create booking", "error_code": "CREATION_FAILED"}
        )
    booking = property_store.get_booking_by_id(booking_id)
    data = booking.to_api_dict() if booking else {"id": booking_id}
    return {"success": True, "message": "Booking requested", "data": data}


@router.get(
    "",
    response_model=ListResponse,
    summary="All bookings",
    description="Every booking on the marketplace, newest first, with its invoice id; super-admin only",
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}}
)
async def all_bookings(
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    permissions.require_super_admin(user)
    bookings = property_store.bookings
    return {"success": True, "message": "Bookings retrieved", "data": [b.to_api_dict() for b in bookings]}


@router.get("/mine", response_model=ListResponse, responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})
async def my_bookings(
    tab: Optional[str] = Query(None, description="upcoming, completed or cancelled"),
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    bookings = property_store.bookings_for_guest(user.id, tab)
    return {"success": True, "message": "Bookings retrieved", "data": [b.to_api_dict() for b in bookings]}


@router.get("/hosting", response_model=ListResponse, responses={401: {"model": ErrorResponse}})
async def hosting_bookings(
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    bookings = property_store.bookings_for_host(user.id)
    return {"success": True, "message": "Bookings retrieved", "data": [b.to_api_dict() for b in bookings]}


@router.put("/{booking_id}/status", response_model=DataResponse, responses=WRITE_ERRORS)
async def update_booking_status(
    booking_id: str,
    req: BookingStatusRequest,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    if not property_store.update_booking_status(user, booking_id, req.status):
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to update booking status", "error_code": "UPDATE_FAILED"}
        )
    return {"success": True, "message": f"Booking {req.status.value}", "data": {"id": booking_id, "status": req.status.value}}


@router.post("/{booking_id}/review", response_model=DataResponse, responses=WRITE_ERRORS)
async def review_booking(
    booking_id: str,
    req: ReviewRequest,
    user: User = Depends(get_current_user),
    property_store: PropertyStore = Depends(get_property_store)
):
    new_rating = property_store.add_review_and_rating(
        user, booking_id, req.property_id, req.rating, req.comment
    )
    get_logger().info("review_submitted", booking_id=booking_id, user_id=user.id)
    return {
        "success": True,
        "message": "Thank you for your review!",
        "data": {"booking_id": booking_id, "property_id": req.property_id, "rating": new_rating},
    }
