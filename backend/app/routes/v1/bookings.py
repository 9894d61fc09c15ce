# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService.

Guests book without an account, so creation, lookup by id and lookup by
email are public. Everything that changes a booking is admin-only.

Endpoints:
    POST / - Create a booking (guest or signed-in user)
    GET / - List bookings with filters and pagination (admin)
    GET /stats - Booking statistics (admin)
    GET /availability - Is a counselor slot free
    GET /upcoming - Upcoming bookings across counselors (admin)
    POST /send-reminders - Run the reminder scan now (admin)
    GET /status/{status} - Bookings in one status (admin)
    GET /email/{email} - Bookings made with a guest email
    GET /upcoming/email/{email} - Upcoming bookings for a guest email
    GET /user/{user_id} - Bookings of a user (that user or admin)
    GET /upcoming/user/{user_id} - Upcoming bookings of a user (that user or admin)
    GET /counselor/{counselor_id} - Bookings of a counselor (admin)
    GET /counselor/{counselor_id}/date/{booking_date} - Counselor day view (admin)
    GET /upcoming/counselor/{counselor_id} - Upcoming for a counselor (admin)
    GET /{booking_id} - Booking details
    PATCH /{booking_id} - Reschedule or edit topic (admin)
    POST /{booking_id}/confirm - Confirm with meeting link (admin)
    POST /{booking_id}/cancel - Cancel (admin)
    POST /{booking_id}/complete - Mark completed (admin)
    POST /{booking_id}/no-show - Mark no-show (admin)
    DELETE /{booking_id} - Hard delete (admin)
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import (
    get_booking_service,
    get_current_caller,
    get_current_caller_optional,
    require_admin,
)
from ...core.enums import BookingStatus
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.booking import (
    AvailabilityResponse,
    BookingCancel,
    BookingConfirm,
    BookingCreate,
    BookingUpdate,
)
from ...services.booking_service import BookingService
from .common import drop_none, pagination_params, run_service

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def _ensure_self_or_admin(caller: Caller, user_id: str) -> None:
    if caller.id != user_id and not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own bookings",
        )


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_booking(
    booking_data: BookingCreate,
    caller: Optional[Caller] = Depends(get_current_caller_optional),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """Create a pending booking; the confirmation email is sent best-effort."""
    return await run_service(booking_service.create_booking, booking_data.to_payload(), caller)


@router.get("/", response_model=PageResponse)
async def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    counselor_id: Optional[str] = Query(None, alias="counselorId"),
    user_id: Optional[str] = Query(None, alias="userId"),
    guest_email: Optional[str] = Query(None, alias="guestEmail"),
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    filters = drop_none(
        status=status_filter.value if status_filter else None,
        counselorId=counselor_id,
        userId=user_id,
        guestEmail=guest_email.strip().lower() if guest_email else None,
    )
    page = await run_service(booking_service.list_bookings, filters, options, search)
    return page.to_dict()


@router.get("/stats", response_model=Dict[str, Any])
async def get_booking_stats(
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    return await run_service(booking_service.get_stats)


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    counselor_id: str = Query(..., alias="counselorId"),
    booking_date: str = Query(..., alias="bookingDate"),
    booking_time: str = Query(..., alias="bookingTime"),
    booking_service: BookingService = Depends(get_booking_service),
) -> AvailabilityResponse:
    available = await run_service(
        booking_service.check_availability, counselor_id, booking_date, booking_time
    )
    return AvailabilityResponse(available=available)


@router.get("/upcoming", response_model=List[Dict[str, Any]])
async def get_upcoming_bookings(
    limit: int = Query(10, ge=1, le=100),
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[Dict[str, Any]]:
    return await run_service(booking_service.get_upcoming_bookings, limit=limit)


@router.post("/send-reminders", response_model=MessageResponse)
async def send_reminders(
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> MessageResponse:
    sent = await run_service(booking_service.send_reminders)
    return MessageResponse(message=f"Sent {sent} reminder(s)")


# ============================================================================
# SECTION 2: Collection lookups
# ============================================================================


@router.get("/status/{booking_status}", response_model=PageResponse)
async def get_bookings_by_status(
    booking_status: BookingStatus,
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    page = await run_service(
        booking_service.list_bookings, {"status": booking_status.value}, options
    )
    return page.to_dict()


@router.get("/email/{email}", response_model=PageResponse)
async def get_bookings_by_email(
    email: str,
    options: PaginationOptions = Depends(pagination_params),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    page = await run_service(booking_service.get_bookings_by_email, email, options)
    return page.to_dict()


@router.get("/upcoming/email/{email}", response_model=List[Dict[str, Any]])
async def get_upcoming_by_email(
    email: str,
    limit: int = Query(10, ge=1, le=100),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[Dict[str, Any]]:
    return await run_service(booking_service.get_upcoming_bookings, email=email, limit=limit)


@router.get("/user/{user_id}", response_model=PageResponse)
async def get_user_bookings(
    user_id: str,
    options: PaginationOptions = Depends(pagination_params),
    caller: Caller = Depends(get_current_caller),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    _ensure_self_or_admin(caller, user_id)
    page = await run_service(booking_service.get_user_bookings, user_id, options)
    return page.to_dict()


@router.get("/upcoming/user/{user_id}", response_model=List[Dict[str, Any]])
async def get_upcoming_by_user(
    user_id: str,
    limit: int = Query(10, ge=1, le=100),
    caller: Caller = Depends(get_current_caller),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[Dict[str, Any]]:
    _ensure_self_or_admin(caller, user_id)
    return await run_service(booking_service.get_upcoming_bookings, user_id=user_id, limit=limit)


@router.get("/counselor/{counselor_id}", response_model=PageResponse)
async def get_counselor_bookings(
    counselor_id: str,
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    page = await run_service(booking_service.get_counselor_bookings, counselor_id, options)
    return page.to_dict()


@router.get("/counselor/{counselor_id}/date/{booking_date}", response_model=List[Dict[str, Any]])
async def get_counselor_bookings_for_date(
    counselor_id: str,
    booking_date: str,
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[Dict[str, Any]]:
    return await run_service(
        booking_service.get_counselor_bookings_for_date, counselor_id, booking_date
    )


@router.get("/upcoming/counselor/{counselor_id}", response_model=List[Dict[str, Any]])
async def get_upcoming_by_counselor(
    counselor_id: str,
    limit: int = Query(10, ge=1, le=100),
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[Dict[str, Any]]:
    return await run_service(
        booking_service.get_upcoming_bookings, counselor_id=counselor_id, limit=limit
    )


# ============================================================================
# SECTION 3: Single booking
# ============================================================================


@router.get("/{booking_id}", response_model=Dict[str, Any])
async def get_booking(
    booking_id: str,
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    return await run_service(booking_service.get_booking, booking_id)


@router.patch("/{booking_id}", response_model=Dict[str, Any])
async def update_booking(
    booking_id: str,
    update_data: BookingUpdate,
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    return await run_service(booking_service.update_booking, booking_id, update_data.to_payload())


@router.post("/{booking_id}/confirm", response_model=Dict[str, Any])
async def confirm_booking(
    booking_id: str,
    confirm_data: BookingConfirm,
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    return await run_service(booking_service.confirm_booking, booking_id, confirm_data.meeting_link)


@router.post("/{booking_id}/cancel", response_model=Dict[str, Any])
async def cancel_booking(
    booking_id: str,
    cancel_data: BookingCancel,
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    return await run_service(
        booking_service.cancel_booking, booking_id, cancel_data.reason, cancel_data.cancelled_by
    )


@router.post("/{booking_id}/complete", response_model=Dict[str, Any])
async def complete_booking(
    booking_id: str,
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    return await run_service(booking_service.complete_booking, booking_id)


@router.post("/{booking_id}/no-show", response_model=Dict[str, Any])
async def mark_no_show(
    booking_id: str,
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    return await run_service(booking_service.mark_no_show, booking_id)


@router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: str,
    _: Caller = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> MessageResponse:
    await run_service(booking_service.delete_booking, booking_id)
    return MessageResponse(message="Booking deleted successfully")
