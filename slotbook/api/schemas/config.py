from slotbook.models.base import CamelModel
from slotbook.models.booking import Slot
from slotbook.models.config import MeetingType


class PublicConfig(CamelModel):
    """The subset of the owner config a booking page needs."""

    owner_name: str
    meeting_types: list[MeetingType]
    timezone: str
    brand_color: str


class SlotsResponse(CamelModel):
    slots: list[Slot]
    timezone: str
