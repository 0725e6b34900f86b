from datetime import UTC, datetime, timedelta

from slotbook.models.booking import Booking, Slot
from slotbook.models.config import WEEKDAYS, OwnerConfig


def _local(dt: datetime, config: OwnerConfig) -> datetime:
    """Aware datetime in the owner's timezone; naive input is taken as owner wall-clock."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=config.tz)
    return dt.astimezone(config.tz)


def compute_slots(
    start: datetime,
    end: datetime,
    duration: int,
    config: OwnerConfig,
    bookings: list[Booking],
    now: datetime | None = None,
) -> list[Slot]:
    """Bookable slots between start (inclusive) and end (exclusive day walk).

    Each open day is sliced into `duration`-minute slots spaced
    `duration + buffer_time` minutes apart. The step is taken whether or not the
    previous candidate was emitted, so a conflict does not realign the rest of the day.
    Slots starting at or before `now`, or intersecting a booking, are skipped.
    """
    step_minutes = duration + config.buffer_time
    if duration <= 0 or step_minutes <= 0:
        raise ValueError(f"duration must be positive (duration={duration}, buffer={config.buffer_time})")

    tz = config.tz
    now = _local(now or datetime.now(UTC), config).astimezone(UTC)
    current = _local(start, config)
    end = _local(end, config).astimezone(UTC)
    busy = [b.localized(tz) for b in bookings]
    length = timedelta(minutes=duration)
    step = timedelta(minutes=step_minutes)

    slots: list[Slot] = []
    while current.astimezone(UTC) < end:
        hours = config.availability.get(WEEKDAYS[current.weekday()])
        if hours:
            day = current.date()
            # Open hours are wall-clock; slot arithmetic is on real elapsed time
            day_start = datetime.combine(day, hours.start, tzinfo=tz).astimezone(UTC)
            day_end = datetime.combine(day, hours.end, tzinfo=tz).astimezone(UTC)

            slot_start = day_start
            while slot_start < day_end:
                slot_end = slot_start + length
                if slot_end <= day_end:
                    booked = any(b.overlaps(slot_start, slot_end) for b in busy)
                    if not booked and slot_start > now:
                        slots.append(Slot(start=slot_start.astimezone(tz), end=slot_end.astimezone(tz)))
                slot_start += step
        # Same tzinfo, so this is wall-clock: same local time on the next calendar day
        current += timedelta(days=1)
    return slots
