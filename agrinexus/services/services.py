import logging
import httpx
from openai import AsyncOpenAI
from supabase import create_client, Client

from agrinexus.config import (
    OPENAI_API_KEY,
    OPENROUTER_API_KEY,
    OPENROUTER_BASE_URL,
    SUPABASE_URL,
    SUPABASE_KEY,
    API_TIMEOUT,
    API_CONNECT_TIMEOUT,
)

logger = logging.getLogger(__name__)


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=API_CONNECT_TIMEOUT,
            read=API_TIMEOUT,
            write=API_TIMEOUT,
            pool=API_TIMEOUT
        )
    )


# Initialize OpenRouter client for Gemini (vision / text / structured output)
gemini_client = None
if OPENROUTER_API_KEY:
    gemini_client = AsyncOpenAI(
        base_url=OPENROUTER_BASE_URL,
        api_key=OPENROUTER_API_KEY,
        http_client=_http_client(),
    )
    logger.info(f"OpenRouter (Gemini) initialized with {API_TIMEOUT}s timeout")

# Initialize OpenAI (speech synthesis)
openai_client = None
if OPENAI_API_KEY:
    openai_client = AsyncOpenAI(api_key=OPENAI_API_KEY, http_client=_http_client())
    logger.info("OpenAI initialized successfully")

# Initialize Supabase (optional persistent storage)
supabase_client: Client = None
if SUPABASE_URL and SUPABASE_KEY:
    try:
        supabase_client = create_client(SUPABASE_URL, SUPABASE_KEY)
        logger.info("Supabase initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize Supabase: {e}")
