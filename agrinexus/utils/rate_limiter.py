from slowapi import Limiter
from slowapi.util import get_remote_address

# Shared limiter for the AI endpoints (each call costs an API request)
limiter = Limiter(key_func=get_remote_address)
