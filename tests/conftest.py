"""Shared fixtures: owner configs, stores on tmp_path, an API client wired to them."""
import copy

import pytest
from fastapi.testclient import TestClient

from slotbook.api.deps import get_booking_store, get_config_store
from slotbook.core.storage import write_json
from slotbook.main import app
from slotbook.models.config import DEFAULT_CONFIG, OwnerConfig
from slotbook.services.booking_service import BookingStore
from slotbook.services.config_service import ConfigStore


def _make_config(**overrides) -> OwnerConfig:
    data = copy.deepcopy(DEFAULT_CONFIG)
    data.update(overrides)
    return OwnerConfig.model_validate(data)


@pytest.fixture
def make_config():
    """Factory for owner configs: defaults plus camelCase top-level overrides."""
    return _make_config


@pytest.fixture
def owner_config(make_config) -> OwnerConfig:
    return make_config(ownerName="Ada Owner")


@pytest.fixture
def config_store(tmp_path, owner_config) -> ConfigStore:
    store = ConfigStore(tmp_path / "config.json")
    write_json(store.path, owner_config.to_json_dict())
    return store


@pytest.fixture
def booking_store(tmp_path) -> BookingStore:
    return BookingStore(tmp_path / "bookings.json")


@pytest.fixture
def client(config_store, booking_store):
    app.dependency_overrides[get_config_store] = lambda: config_store
    app.dependency_overrides[get_booking_store] = lambda: booking_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture background email sends instead of talking to SMTP."""
    sent = []
    monkeypatch.setattr(
        "slotbook.api.routes.bookings.send_booking_emails",
        lambda config, booking: sent.append((config, booking)),
    )
    return sent
