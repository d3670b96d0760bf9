# Agridoctor Nexus API v1.0.0
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from agrinexus.dependencies import get_nexus
from agrinexus.routers import assistant, diagnosis, health, identity, market, settings
from agrinexus.utils.rate_limiter import limiter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================================================#
# Lifespan Events
# ============================================================================#


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    # Startup: settings and alerts are read once here
    nexus = app_instance.dependency_overrides.get(get_nexus, get_nexus)()
    logger.info("=" * 60)
    logger.info("Starting Agridoctor Nexus")
    logger.info(f"Gemini (OpenRouter): {'✓' if nexus.gateway.text_client else '✗'}")
    logger.info(f"Speech (OpenAI): {'✓' if nexus.gateway.speech_client else '✗ (fallback voice only)'}")
    logger.info(f"Storage: {type(nexus.store).__name__}")
    logger.info(f"Location: {nexus.settings.location} | Alerts: {len(nexus.alerts.alerts)}")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down gracefully...")


# Initialize FastAPI app
app = FastAPI(
    title="Agridoctor Nexus",
    description="AI crop diagnosis, market intelligence and farmer identity agent",
    version="1.0.0",
    lifespan=lifespan
)

# Initialize Rate Limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# The mobile web client is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(diagnosis.router)
app.include_router(assistant.router)
app.include_router(identity.router)
app.include_router(market.router)
app.include_router(settings.router)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    uvicorn.run('agrinexus.main:app', host='0.0.0.0', port=port, reload=True)
