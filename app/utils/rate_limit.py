from slowapi import Limiter
from slowapi.util import get_remote_address

from config.settings import settings

# Limiter compartido: main.py lo registra en app.state
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
