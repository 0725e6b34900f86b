import logging
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from slotbook.core.storage import lock_for, read_json, write_json
from slotbook.models.booking import Booking
from slotbook.models.config import OwnerConfig

logger = logging.getLogger(__name__)


class BookingValidationError(ValueError):
    pass


class BookingConflictError(Exception):
    def __init__(self, existing: Booking) -> None:
        super().__init__(f"overlaps booking {existing.id}")
        self.existing = existing


class BookingStoreError(Exception):
    """The bookings file exists but can't be read as a list of records."""


class BookingStore:
    """Bookings persisted as one JSON list, rewritten whole on every mutation.

    Every read-modify-write runs under a per-file lock so concurrent requests
    can't overwrite each other's changes. Records that don't validate are skipped
    when reading but written back untouched, and a file that can't be parsed at
    all is never overwritten.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.lock = lock_for(self.path)

    def _read_records(self) -> list:
        try:
            data = read_json(self.path)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            raise BookingStoreError(f"cannot read bookings from {self.path}: {e}") from e
        if not isinstance(data, list):
            raise BookingStoreError(f"bookings file {self.path} does not hold a JSON list")
        return data

    def _parse(self, record, index: int) -> Booking | None:
        try:
            return Booking.model_validate(record)
        except ValidationError as e:
            logger.warning("Skipping malformed booking #%d in %s: %s", index, self.path, e)
            return None

    def load_existing(self) -> list[Booking]:
        """Valid bookings in insertion order. Raises BookingStoreError if the file is unreadable."""
        bookings = (self._parse(record, i) for i, record in enumerate(self._read_records()))
        return [b for b in bookings if b is not None]

    def load_all(self) -> list[Booking]:
        try:
            return self.load_existing()
        except BookingStoreError as e:
            logger.warning("%s, treating as empty", e)
            return []

    def append(self, booking: Booking) -> Booking:
        with self.lock:
            records = self._read_records()
            records.append(booking.to_json_dict())
            write_json(self.path, records)
        return booking

    def remove_by_id(self, booking_id: str) -> Booking | None:
        with self.lock:
            records = self._read_records()
            for index, record in enumerate(records):
                if not isinstance(record, dict) or record.get("id") != booking_id:
                    continue
                removed = self._parse(record, index)
                if removed is None:
                    continue
                del records[index]
                write_json(self.path, records)
                return removed
        return None


def _parse_time(value: str | datetime, field: str, config: OwnerConfig) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            raise BookingValidationError(f"Invalid {field}") from None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=config.tz)
    return dt


def create_booking(
    store: BookingStore,
    config: OwnerConfig,
    *,
    name: str,
    email: str,
    start_time: str | datetime,
    end_time: str | datetime,
    meeting_type: str | None = None,
    notes: str | None = None,
) -> Booking:
    """Validate and persist a new booking. Rejects overlaps with existing bookings."""
    start = _parse_time(start_time, "startTime", config)
    end = _parse_time(end_time, "endTime", config)
    if start >= end:
        raise BookingValidationError("startTime must be before endTime")
    if meeting_type and config.meeting_types and config.meeting_type(meeting_type) is None:
        raise BookingValidationError(f"Unknown meeting type: {meeting_type}")

    booking = Booking(
        name=name,
        email=email,
        start_time=start,
        end_time=end,
        meeting_type=meeting_type,
        notes=notes,
    )
    # Check and append under the same lock
    with store.lock:
        for existing in store.load_existing():
            if existing.localized(config.tz).overlaps(start, end):
                raise BookingConflictError(existing)
        store.append(booking)
    logger.info("Booked %s for %s (%s - %s)", booking.id, booking.email, start.isoformat(), end.isoformat())
    return booking


def cancel_booking(store: BookingStore, booking_id: str) -> Booking | None:
    cancelled = store.remove_by_id(booking_id)
    if cancelled:
        logger.info("Cancelled booking %s", booking_id)
    return cancelled
