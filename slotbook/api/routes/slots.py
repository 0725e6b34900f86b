import re
from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status

from slotbook.api.deps import get_booking_store, get_owner_config
from slotbook.api.schemas.config import SlotsResponse
from slotbook.core.config import settings
from slotbook.models.config import OwnerConfig
from slotbook.services.booking_service import BookingStore
from slotbook.services.slot_service import compute_slots

router = APIRouter(prefix="/slots", tags=["slots"])

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def _parse_datetime(value: str, name: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name} date",
        ) from None


def _parse_duration(value: str | None, default: int) -> int:
    """Leading integer minutes ("45min" -> 45); anything non-positive falls back to the default."""
    match = _LEADING_INT.match(value or "")
    duration = int(match.group()) if match else 0
    return duration if duration > 0 else default


@router.get("", response_model=SlotsResponse)
async def available_slots(
    start: str | None = Query(None),
    end: str | None = Query(None),
    duration: str | None = Query(None),
    config: OwnerConfig = Depends(get_owner_config),
    store: BookingStore = Depends(get_booking_store),
) -> SlotsResponse:
    """Open slots between start and end (default: now .. now + slot_window_days)."""
    now = datetime.now(UTC)
    start_dt = _parse_datetime(start, "start") if start else now
    end_dt = _parse_datetime(end, "end") if end else now + timedelta(days=settings.slot_window_days)
    slots = compute_slots(
        start_dt,
        end_dt,
        _parse_duration(duration, config.meeting_duration),
        config,
        store.load_all(),
        now=now,
    )
    return SlotsResponse(slots=slots, timezone=config.timezone)
