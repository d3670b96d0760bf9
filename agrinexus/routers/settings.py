from fastapi import APIRouter, Depends

from agrinexus.dependencies import Nexus, get_nexus
from agrinexus.models import FarmSettings

router = APIRouter(prefix="/api/settings")


@router.get("")
async def get_settings(nexus: Nexus = Depends(get_nexus)):
    return nexus.settings.model_dump(by_alias=True)


@router.put("")
async def save_settings(settings: FarmSettings, nexus: Nexus = Depends(get_nexus)):
    nexus.update_settings(settings)
    return {"status": "success", "settings": settings.model_dump(by_alias=True)}
