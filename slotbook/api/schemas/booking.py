from slotbook.models.base import CamelModel
from slotbook.models.booking import Booking


class BookRequest(CamelModel):
    # All optional so missing fields map to our own 400 instead of a 422
    name: str | None = None
    email: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    meeting_type: str | None = None
    notes: str | None = None

    def missing_required(self) -> list[str]:
        required = {
            "name": self.name,
            "email": self.email,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }
        return [field for field, value in required.items() if not (value and value.strip())]


class BookResponse(CamelModel):
    success: bool = True
    booking: Booking


class CancelResponse(CamelModel):
    success: bool = True
    cancelled: Booking
