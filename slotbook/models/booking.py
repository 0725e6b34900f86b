import uuid
from datetime import UTC, datetime, tzinfo

from pydantic import Field, field_serializer

from slotbook.models.base import CamelModel


def _utc_now() -> datetime:
    return datetime.now(UTC)


def new_booking_id() -> str:
    return uuid.uuid4().hex


class Booking(CamelModel):
    id: str = Field(default_factory=new_booking_id)
    name: str
    email: str
    start_time: datetime
    end_time: datetime
    meeting_type: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)

    def localized(self, tz: tzinfo) -> "Booking":
        """Copy with naive start/end read as wall-clock time in tz."""
        update = {}
        if self.start_time.tzinfo is None:
            update["start_time"] = self.start_time.replace(tzinfo=tz)
        if self.end_time.tzinfo is None:
            update["end_time"] = self.end_time.replace(tzinfo=tz)
        return self.model_copy(update=update) if update else self

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open interval intersection with [start, end)."""
        return start < self.end_time and end > self.start_time


class Slot(CamelModel):
    start: datetime
    end: datetime

    @field_serializer("start", "end")
    def _utc_iso(self, value: datetime) -> str:
        return value.astimezone(UTC).isoformat().replace("+00:00", "Z")
