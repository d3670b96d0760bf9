"""
AI Gateway
The only module that talks to the generative-AI services.

Every operation returns an already-validated value:
- diagnose / generate_identity: tolerant parsing, missing fields are defaulted
- chat / market_commentary: raw reply text ("" when the service sends nothing)
- synthesize_speech: raw PCM bytes, or None when the caller should use the fallback voice

Transport failures of the content operations raise ServiceError.
"""
import base64
import json
import logging
from typing import Any, Dict, Optional

from agrinexus.config import (
    DIAGNOSIS_MODEL,
    CHAT_MODEL,
    MARKET_MODEL,
    IDENTITY_MODEL,
    SPEECH_MODEL,
    SPEECH_VOICE,
    SPEECH_MAX_CHARS,
)
from agrinexus.models import DiagnosisResult, FarmerIdentity, FarmSettings
from agrinexus.prompts import (
    DIAGNOSIS_PROMPT,
    DIAGNOSIS_SCHEMA,
    CHAT_SYSTEM_INSTRUCTION,
    MARKET_PROMPT,
    IDENTITY_PROMPT,
    IDENTITY_SCHEMA,
    SPEECH_INSTRUCTION,
)
from agrinexus.services.errors import ServiceError
from agrinexus.utils.text_processing import extract_json_object, truncate

logger = logging.getLogger(__name__)


def _json_schema_format(name: str, schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "json_schema", "json_schema": {"name": name, "schema": schema}}


def _first_message(response):
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    return choices[0].message


class AIGateway:
    """Typed wrapper around the AI operations"""

    def __init__(self, text_client=None, speech_client=None):
        self.text_client = text_client
        self.speech_client = speech_client

    async def _complete(self, operation: str, **request) -> str:
        """Run a chat completion on the text client and return the reply text"""
        if not self.text_client:
            logger.error(f"{operation}: OpenRouter API key not configured")
            raise ServiceError(operation)

        try:
            response = await self.text_client.chat.completions.create(**request)
        except Exception as e:
            logger.error(f"{operation} request failed: {e}", exc_info=True)
            raise ServiceError(operation, e) from e

        message = _first_message(response)
        raw_text = (message.content if message else None) or ""
        logger.info(f"{operation} raw response: {raw_text[:200]}...")
        return raw_text

    # ------------------------------------------------------------------
    # Content operations
    # ------------------------------------------------------------------

    async def diagnose(self, image_bytes: bytes) -> DiagnosisResult:
        """Diagnose a crop disease from JPEG image bytes"""
        logger.info(f"Starting crop diagnosis ({len(image_bytes)} bytes)")
        base64_image = base64.b64encode(image_bytes).decode("utf-8")

        raw_text = await self._complete(
            "diagnose",
            model=DIAGNOSIS_MODEL,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:image/jpeg;base64,{base64_image}"},
                        },
                        {"type": "text", "text": DIAGNOSIS_PROMPT},
                    ],
                }
            ],
            response_format=_json_schema_format("diagnosis", DIAGNOSIS_SCHEMA),
        )

        data = extract_json_object(raw_text)
        result = DiagnosisResult.model_validate(data)
        if not result.disease:
            logger.warning("Diagnosis response had no disease name, returning defaulted result")
        else:
            logger.info(f"Disease detected: {result.disease} (confidence: {result.confidence:.2f})")
        return result

    async def chat(self, message: str) -> str:
        """Single-turn reply with the Agri-Nexus persona"""
        return await self._complete(
            "chat",
            model=CHAT_MODEL,
            messages=[
                {"role": "system", "content": CHAT_SYSTEM_INSTRUCTION},
                {"role": "user", "content": message},
            ],
        )

    async def market_commentary(self, crop_data: Any) -> str:
        """Free-text market analysis of the given crop data"""
        payload = json.dumps(crop_data, ensure_ascii=False, default=str)
        return await self._complete(
            "market_commentary",
            model=MARKET_MODEL,
            messages=[{"role": "user", "content": MARKET_PROMPT.format(data=payload)}],
        )

    async def generate_identity(self, settings: FarmSettings) -> FarmerIdentity:
        """Generate the farmer's digital identity from their farm settings"""
        context = {
            "altitude": settings.altitude,
            "primaryCrops": settings.primary_crops,
            "farmSize": settings.farm_size,
            "soilType": settings.soil_type,
            "language": settings.language,
        }
        raw_text = await self._complete(
            "generate_identity",
            model=IDENTITY_MODEL,
            messages=[
                {
                    "role": "user",
                    "content": IDENTITY_PROMPT.format(
                        location=settings.location,
                        context=json.dumps(context, ensure_ascii=False),
                    ),
                }
            ],
            response_format=_json_schema_format("farmer_identity", IDENTITY_SCHEMA),
        )

        data = extract_json_object(raw_text)
        identity = FarmerIdentity.model_validate(data)
        if not identity.verified_location:
            identity.verified_location = settings.location
        return identity

    # ------------------------------------------------------------------
    # Speech
    # ------------------------------------------------------------------

    async def synthesize_speech(self, text: str) -> Optional[bytes]:
        """
        Synthesize speech for the first SPEECH_MAX_CHARS characters of text.

        Returns raw 16-bit little-endian mono PCM at 24kHz, or None when the
        caller should use the fallback voice. Never raises.
        """
        if not self.speech_client:
            logger.warning("Speech synthesis unavailable (OpenAI not configured), using fallback voice")
            return None

        try:
            response = await self.speech_client.chat.completions.create(
                model=SPEECH_MODEL,
                modalities=["text", "audio"],
                audio={"voice": SPEECH_VOICE, "format": "pcm16"},
                messages=[
                    {"role": "system", "content": SPEECH_INSTRUCTION},
                    {"role": "user", "content": truncate(text, SPEECH_MAX_CHARS)},
                ],
            )
            message = _first_message(response)
            audio = getattr(message, "audio", None) if message else None
            base64_audio = getattr(audio, "data", None) if audio else None
            if not base64_audio:
                logger.warning("Speech synthesis returned no audio payload, using fallback voice")
                return None
            return base64.b64decode(base64_audio)
        except Exception as e:
            logger.warning(f"Speech synthesis request failed, using fallback voice: {e}")
            return None


_gateway: Optional[AIGateway] = None


def get_gateway() -> AIGateway:
    """Shared gateway built from the configured clients"""
    global _gateway
    if _gateway is None:
        from agrinexus.services.services import gemini_client, openai_client
        _gateway = AIGateway(text_client=gemini_client, speech_client=openai_client)
    return _gateway
