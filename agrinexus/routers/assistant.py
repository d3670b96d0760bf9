import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from agrinexus.config import AI_RATE_LIMIT
from agrinexus.dependencies import Nexus, get_nexus
from agrinexus.models import ChatRequest, SpeakRequest
from agrinexus.utils.rate_limiter import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/chat/{session_id}")
@limiter.limit(AI_RATE_LIMIT)
async def send_chat(request: Request, session_id: str, body: ChatRequest, nexus: Nexus = Depends(get_nexus)):
    if not body.message.strip():
        raise HTTPException(status_code=400, detail="Message is empty")
    session = nexus.chat_session(session_id)
    if session.loading:
        raise HTTPException(status_code=409, detail="A message is already being processed")

    reply = await session.send(body.message)
    if reply is None:
        raise HTTPException(status_code=502, detail=session.alert or "Chat failed")
    return {
        "reply": reply.model_dump(),
        "messages": [m.model_dump() for m in session.messages]
    }


@router.get("/chat/{session_id}")
async def get_transcript(session_id: str, nexus: Nexus = Depends(get_nexus)):
    session = nexus.find_session(session_id)
    if session is None:
        return {"messages": []}
    return {"messages": [m.model_dump() for m in session.messages]}


@router.post("/speak")
async def speak(body: SpeakRequest, nexus: Nexus = Depends(get_nexus)):
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="Text is empty")
    accepted = nexus.speaker.request(body.text)
    return {"accepted": accepted, "isSpeaking": nexus.speaker.is_speaking}
