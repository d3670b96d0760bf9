import logging
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from agrinexus.config import AI_RATE_LIMIT
from agrinexus.dependencies import Nexus, get_nexus
from agrinexus.utils.images import to_jpeg
from agrinexus.utils.rate_limiter import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scan")


@router.post("")
@limiter.limit(AI_RATE_LIMIT)
async def scan_crop(request: Request, image: UploadFile = File(...), nexus: Nexus = Depends(get_nexus)):
    raw = await image.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty image upload")
    try:
        jpeg = to_jpeg(raw)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = await nexus.scanner.scan(jpeg)
    if result is None:
        raise HTTPException(status_code=502, detail=nexus.scanner.alert or "Diagnosis failed")
    return result.model_dump(by_alias=True)


@router.get("")
async def current_result(nexus: Nexus = Depends(get_nexus)):
    result = nexus.scanner.result
    return {
        "analyzing": nexus.scanner.analyzing,
        "result": result.model_dump(by_alias=True) if result else None
    }


@router.delete("")
async def reset_scan(nexus: Nexus = Depends(get_nexus)):
    nexus.scanner.reset()
    return {"status": "success"}
