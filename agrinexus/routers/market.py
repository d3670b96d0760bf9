import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from agrinexus.config import AI_RATE_LIMIT
from agrinexus.dependencies import Nexus, get_nexus
from agrinexus.models import AlertRequest, MarketRequest
from agrinexus.utils.rate_limiter import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/market/{crop}/intelligence")
@limiter.limit(AI_RATE_LIMIT)
async def market_intelligence(request: Request, crop: str, body: MarketRequest, nexus: Nexus = Depends(get_nexus)):
    text = await nexus.market.analyze(crop, body.trends)
    if text is None:
        raise HTTPException(status_code=502, detail=nexus.market.alert or "Market analysis failed")
    return {"crop": crop, "commentary": text}


# ============================================================================#
# Price alerts
# ============================================================================#


@router.get("/alerts")
async def list_alerts(nexus: Nexus = Depends(get_nexus)):
    return [a.model_dump(by_alias=True) for a in nexus.alerts.alerts]


@router.put("/alerts/{crop}")
async def set_alert(crop: str, body: AlertRequest, nexus: Nexus = Depends(get_nexus)):
    alert = nexus.alerts.set_alert(crop, body.target_price, body.condition)
    return alert.model_dump(by_alias=True)


@router.delete("/alerts/{crop}")
async def remove_alert(crop: str, nexus: Nexus = Depends(get_nexus)):
    if not nexus.alerts.remove_alert(crop):
        raise HTTPException(status_code=404, detail=f"No alert for {crop}")
    return {"status": "success"}
