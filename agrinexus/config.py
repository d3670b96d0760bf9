import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ============================================================================#
# ENVIRONMENT / SERVICES
# ============================================================================#
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")  # Speech synthesis (audio output)
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")  # Gemini models (vision / text)
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# ============================================================================#
# MODELS
# ============================================================================#
DIAGNOSIS_MODEL = os.getenv("DIAGNOSIS_MODEL", "google/gemini-3-flash-preview")
CHAT_MODEL = os.getenv("CHAT_MODEL", "google/gemini-3-pro-preview")
MARKET_MODEL = os.getenv("MARKET_MODEL", "google/gemini-3-flash-preview")
IDENTITY_MODEL = os.getenv("IDENTITY_MODEL", "google/gemini-3-flash-preview")
SPEECH_MODEL = os.getenv("SPEECH_MODEL", "gpt-4o-mini-audio-preview")
SPEECH_VOICE = os.getenv("SPEECH_VOICE", "alloy")
FALLBACK_VOICE = os.getenv("FALLBACK_VOICE", "en-US-AvaNeural")

# Timeouts for API calls (seconds)
API_TIMEOUT = 60
API_CONNECT_TIMEOUT = 15

# Speech
SPEECH_MAX_CHARS = 300  # Request-size limit for speech synthesis
SPEECH_SAMPLE_RATE = 24000  # pcm16 output is mono 24kHz

# ============================================================================#
# STORAGE
# ============================================================================#
STORAGE_DIR = os.getenv("STORAGE_DIR", ".nexus_storage")
STORAGE_TABLE = os.getenv("STORAGE_TABLE", "app_storage")
SETTINGS_KEY = "agridoctor_settings_v3"
ALERTS_KEY = "nexus_price_alerts"

# Rate limiting for AI endpoints
AI_RATE_LIMIT = os.getenv("AI_RATE_LIMIT", "20/minute")

# Chat sessions kept in memory (least recently used idle sessions are evicted)
MAX_CHAT_SESSIONS = int(os.getenv("MAX_CHAT_SESSIONS", "200"))
