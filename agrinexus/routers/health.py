import logging
from fastapi import APIRouter, Depends

from agrinexus.dependencies import Nexus, get_nexus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def root():
    return {
        "status": "online",
        "service": "Agridoctor Nexus",
        "version": "1.0.0",
        "features": [
            "Vision Crop Diagnosis",
            "Agri-Nexus Chat Agent",
            "Market Intelligence",
            "Farmer Digital Identity",
            "Agent Voice Synthesis"
        ]
    }


@router.get("/health")
async def health_check(nexus: Nexus = Depends(get_nexus)):
    return {
        "status": "healthy",
        "version": "1.0.0",
        "services": {
            "gemini": bool(nexus.gateway.text_client),
            "speech": bool(nexus.gateway.speech_client),
            "storage": type(nexus.store).__name__
        }
    }


@router.get("/api/agent/state")
async def agent_state(nexus: Nexus = Depends(get_nexus)):
    return {
        **nexus.tracker.snapshot().model_dump(by_alias=True),
        "isSpeaking": nexus.speaker.is_speaking
    }
