from slotbook.models.booking import Booking, Slot
from slotbook.models.config import (
    DEFAULT_CONFIG,
    WEEKDAYS,
    AvailabilityTemplate,
    DayHours,
    MeetingType,
    OwnerConfig,
    SmtpSettings,
)

__all__ = [
    "Booking",
    "Slot",
    "DEFAULT_CONFIG",
    "WEEKDAYS",
    "AvailabilityTemplate",
    "DayHours",
    "MeetingType",
    "OwnerConfig",
    "SmtpSettings",
]
