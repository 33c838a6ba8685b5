import anyio
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import logging

from app.errors import TooManyAttemptsError, UnauthorizedError
from app.schemas.auth import LoginRequest, LoginResponse
from app.services.auth_service import authenticate, create_access_token, decode_token
from app.services.cache_service import cache_service
from app.utils.rate_limit import limiter
from config.settings import settings
from database.connection import get_db

router = APIRouter()
logger = logging.getLogger(__name__)


def _fail_key(username: str) -> str:
    return f"login_fail:{username.lower()}"


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)  # SlowAPI
async def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)):
    key = _fail_key(body.username)

    fallos = await cache_service.get(key)
    if fallos and int(fallos) >= settings.LOGIN_MAX_FAILURES:
        logger.warning("🔒 Login bloqueado | user=%s", body.username)
        raise TooManyAttemptsError("Demasiados intentos fallidos. Espere unos minutos.")

    # Query + bcrypt son bloqueantes: fuera del event loop
    usuario = await anyio.to_thread.run_sync(authenticate, db, body.username, body.password)
    if not usuario:
        await cache_service.incr_with_ttl(key, settings.LOGIN_LOCKOUT_SECONDS)
        logger.warning("❌ Login inválido | user=%s", body.username)
        raise UnauthorizedError("Credenciales inválidas")

    await cache_service.delete(key)
    logger.info("✅ Login OK | user=%s", usuario.username)
    return LoginResponse(token=create_access_token(usuario), username=usuario.username)


@router.get("/verify")
async def verify(request: Request):
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return JSONResponse(status_code=401, content={"valid": False})
    try:
        decode_token(token.strip())
    except UnauthorizedError:
        return JSONResponse(status_code=401, content={"valid": False})
    return {"valid": True}
