from fastapi import Depends

from slotbook.core.config import settings
from slotbook.models.config import OwnerConfig
from slotbook.services.booking_service import BookingStore
from slotbook.services.config_service import ConfigStore


def get_config_store() -> ConfigStore:
    return ConfigStore(settings.config_path)


def get_booking_store() -> BookingStore:
    return BookingStore(settings.bookings_path)


def get_owner_config(store: ConfigStore = Depends(get_config_store)) -> OwnerConfig:
    """Config is re-read from disk on every request."""
    return store.load()
