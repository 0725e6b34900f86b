import re
from datetime import time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ConfigDict, Field, field_serializer, field_validator, model_validator

from slotbook.models.base import CamelModel

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_CLOCK = re.compile(r"(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)")


class DayHours(CamelModel):
    """Open interval for one weekday, local wall-clock."""

    start: time
    end: time

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_clock(cls, value):
        # Hand-edited files use "9:00" as often as "09:00"
        if isinstance(value, str):
            match = _CLOCK.fullmatch(value.strip())
            if match:
                return time(int(match["hour"]), int(match["minute"]))
        return value

    @model_validator(mode="after")
    def _start_before_end(self) -> "DayHours":
        if self.start >= self.end:
            raise ValueError(f"start ({self.start:%H:%M}) must be before end ({self.end:%H:%M})")
        return self

    @field_serializer("start", "end")
    def _hhmm(self, value: time) -> str:
        return value.strftime("%H:%M")


class MeetingType(CamelModel):
    id: str
    name: str
    duration: int = Field(gt=0)
    description: str = ""


class SmtpSettings(CamelModel):
    host: str = "smtp.gmail.com"
    port: int = 587
    user: str = ""
    password: str = Field(default="", alias="pass")

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.user and self.password)


AvailabilityTemplate = dict[str, DayHours | None]


class OwnerConfig(CamelModel):
    """The owner's scheduling configuration, as stored in config.json."""

    # Keep keys we don't know about (hand-edited files)
    model_config = ConfigDict(extra="allow")

    owner_name: str = "Your Name"
    owner_email: str = "you@example.com"
    calendar_id: str = "primary"
    meeting_duration: int = Field(default=30, gt=0)
    buffer_time: int = Field(default=15, ge=0)
    availability: AvailabilityTemplate
    timezone: str = "Europe/Madrid"
    brand_color: str = "#4F46E5"
    logo_url: str | None = None
    meeting_types: list[MeetingType] = Field(default_factory=list)
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)

    @field_validator("availability")
    @classmethod
    def _weekday_keys(cls, value: AvailabilityTemplate) -> AvailabilityTemplate:
        normalized = {k.lower(): v for k, v in value.items()}
        unknown = set(normalized) - set(WEEKDAYS)
        if unknown:
            raise ValueError(f"unknown weekday(s) in availability: {', '.join(sorted(unknown))}")
        # Absent days are closed
        return {day: normalized.get(day) for day in WEEKDAYS}

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def meeting_type(self, type_id: str) -> MeetingType | None:
        return next((m for m in self.meeting_types if m.id == type_id), None)


_WORKDAY = {"start": "09:00", "end": "17:00"}

# Written to disk on first run; camelCase like the stored document.
DEFAULT_CONFIG: dict = {
    "ownerName": "Your Name",
    "ownerEmail": "you@example.com",
    "calendarId": "primary",
    "meetingDuration": 30,
    "bufferTime": 15,
    "availability": {
        "monday": dict(_WORKDAY),
        "tuesday": dict(_WORKDAY),
        "wednesday": dict(_WORKDAY),
        "thursday": dict(_WORKDAY),
        "friday": dict(_WORKDAY),
        "saturday": None,
        "sunday": None,
    },
    "timezone": "Europe/Madrid",
    "brandColor": "#4F46E5",
    "logoUrl": None,
    "meetingTypes": [
        {"id": "intro", "name": "Intro Call", "duration": 30, "description": "Quick intro call"},
        {"id": "deep-dive", "name": "Deep Dive", "duration": 60, "description": "In-depth session"},
    ],
    "smtp": {"host": "smtp.gmail.com", "port": 587, "user": "", "pass": ""},
}
