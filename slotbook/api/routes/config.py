from fastapi import APIRouter, Depends

from slotbook.api.deps import get_owner_config
from slotbook.api.schemas.config import PublicConfig
from slotbook.models.config import OwnerConfig

router = APIRouter(prefix="/config", tags=["config"])


@router.get("", response_model=PublicConfig)
async def public_config(config: OwnerConfig = Depends(get_owner_config)) -> PublicConfig:
    return PublicConfig(
        owner_name=config.owner_name,
        meeting_types=config.meeting_types,
        timezone=config.timezone,
        brand_color=config.brand_color,
    )
