"""
🗄️ SERVICIO DE CACHÉ - GESTIÓN REDIS
====================================

Interfaz simplificada sobre Redis para datos temporales con TTL.

🎯 PROPÓSITO:
- Gestionar la conexión asíncrona a Redis
- Contar intentos fallidos de login por usuario (bloqueo temporal)
- Degradar sin errores cuando Redis no está disponible

🔧 OPERACIONES SOPORTADAS:
- get(): Obtener valor por clave
- incr_with_ttl(): Incrementar contador con expiración
- delete(): Borrar una clave

🛡️ ROBUSTEZ:
- Conexión opcional (no bloquea la app si Redis falla)
- Sin Redis: get() devuelve None e incr_with_ttl() devuelve 0,
  por lo que el bloqueo de login queda deshabilitado

📝 EJEMPLO DE USO:
    fallos = await cache_service.incr_with_ttl("login_fail:admin", 900)
    if fallos >= settings.LOGIN_MAX_FAILURES:
        # usuario bloqueado hasta que venza la clave
        pass
"""

from __future__ import annotations
import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from config.settings import settings

logger = logging.getLogger(__name__)

class CacheService:
    def __init__(self, url: Optional[str], enabled: bool = True):
        self.url = url
        self.enabled = enabled
        self.redis: Optional[Redis] = None

    async def connect(self):
        if not self.enabled or not self.url:
            logger.warning("Redis deshabilitado (sin URL o REDIS_ENABLED=False)")
            return
        if self.redis is None:
            self.redis = Redis.from_url(self.url, decode_responses=True)
            try:
                await self.redis.ping()
                logger.info("Conectado a Redis")
            except (RedisError, OSError) as e:
                logger.warning(f"No se pudo conectar a Redis: {e}")
                self.redis = None

    async def close(self):
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def get(self, key: str) -> Optional[str]:
        if not self.redis:
            return None
        try:
            return await self.redis.get(key)
        except RedisError as e:
            logger.warning(f"Redis get falló ({key}): {e}")
            return None

    async def delete(self, key: str) -> None:
        if not self.redis:
            return
        try:
            await self.redis.delete(key)
        except RedisError as e:
            logger.warning(f"Redis delete falló ({key}): {e}")

    # INCR con TTL en la misma clave
    async def incr_with_ttl(self, key: str, ttl_seconds: int) -> int:
        if not self.redis:
            return 0
        try:
            pipe = self.redis.pipeline()
            pipe.incr(key)
            pipe.expire(key, ttl_seconds)
            res = await pipe.execute()
            return int(res[0])
        except RedisError as e:
            logger.warning(f"Redis incr falló ({key}): {e}")
            return 0

cache_service = CacheService(settings.REDIS_URL, enabled=settings.REDIS_ENABLED)
