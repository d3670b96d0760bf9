from fastapi import APIRouter, Depends, HTTPException, Request

from agrinexus.config import AI_RATE_LIMIT
from agrinexus.dependencies import Nexus, get_nexus
from agrinexus.utils.rate_limiter import limiter

router = APIRouter(prefix="/api/identity")


@router.post("")
@limiter.limit(AI_RATE_LIMIT)
async def generate_identity(request: Request, nexus: Nexus = Depends(get_nexus)):
    identity = await nexus.identity.generate(nexus.settings)
    if identity is None:
        raise HTTPException(status_code=502, detail=nexus.identity.alert or "Identity generation failed")
    return identity.model_dump(by_alias=True)
