import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from slotbook.api.deps import get_booking_store, get_owner_config
from slotbook.api.schemas.booking import BookRequest, BookResponse, CancelResponse
from slotbook.models.booking import Booking
from slotbook.models.config import OwnerConfig
from slotbook.services.booking_service import (
    BookingConflictError,
    BookingStore,
    BookingStoreError,
    BookingValidationError,
    cancel_booking,
    create_booking,
)
from slotbook.services.email_service import send_booking_emails

logger = logging.getLogger(__name__)
router = APIRouter(tags=["bookings"])


def _storage_unavailable(e: BookingStoreError) -> HTTPException:
    logger.error("Refusing to modify bookings: %s", e)
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Bookings storage unavailable")


@router.post("/book", response_model=BookResponse)
async def book(
    background_tasks: BackgroundTasks,
    body: BookRequest | None = None,
    config: OwnerConfig = Depends(get_owner_config),
    store: BookingStore = Depends(get_booking_store),
) -> BookResponse:
    body = body or BookRequest()
    missing = body.missing_required()
    if missing:
        logger.debug("Booking rejected, missing: %s", ", ".join(missing))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    try:
        booking = create_booking(
            store,
            config,
            name=body.name,
            email=body.email,
            start_time=body.start_time,
            end_time=body.end_time,
            meeting_type=body.meeting_type,
            notes=body.notes,
        )
    except BookingValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except BookingConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slot already booked") from e
    except BookingStoreError as e:
        raise _storage_unavailable(e) from e
    # Sync SMTP, so off the request path
    background_tasks.add_task(send_booking_emails, config, booking)
    return BookResponse(booking=booking)


@router.get("/bookings", response_model=list[Booking])
async def list_bookings(store: BookingStore = Depends(get_booking_store)) -> list[Booking]:
    return store.load_all()


@router.delete("/bookings/{booking_id}", response_model=CancelResponse)
async def cancel(booking_id: str, store: BookingStore = Depends(get_booking_store)) -> CancelResponse:
    try:
        cancelled = cancel_booking(store, booking_id)
    except BookingStoreError as e:
        raise _storage_unavailable(e) from e
    if not cancelled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return CancelResponse(cancelled=cancelled)
