"""
Autenticación: usuario/clave con hash bcrypt y tokens JWT firmados.

El token lleva el usuario en `sub`, su id en `uid` y vence a las
ACCESS_TOKEN_EXPIRE_HOURS horas. Todas las rutas salvo login/verify
dependen de get_current_user.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.errors import UnauthorizedError, ValidationError
from app.models.usuario import Usuario
from config.settings import settings
from database.connection import get_db

logger = logging.getLogger(__name__)

# Contexto para hashear contraseñas
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Security scheme (sin auto_error: el 401 lo arma UnauthorizedError)
security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def authenticate(db: Session, username: str, password: str) -> Optional[Usuario]:
    """Devuelve el usuario si la clave coincide, None si no"""
    usuario = db.query(Usuario).filter(Usuario.username == username).first()
    if not usuario or not verify_password(password, usuario.password_hash):
        return None
    return usuario


def create_access_token(usuario: Usuario, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    payload = {"sub": usuario.username, "uid": usuario.id, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Valida firma y vencimiento; UnauthorizedError si algo falla"""
    if not token:
        raise UnauthorizedError("Token requerido")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Token inválido o expirado")
    if not payload.get("sub"):
        raise UnauthorizedError("Token inválido o expirado")
    return payload


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Usuario:
    """Dependencia FastAPI: usuario autenticado por bearer token"""
    if credentials is None:
        raise UnauthorizedError("Token requerido")

    payload = decode_token(credentials.credentials)
    usuario = db.query(Usuario).filter(Usuario.username == payload["sub"]).first()
    if not usuario:
        raise UnauthorizedError("Token inválido o expirado")
    return usuario


def create_user(db: Session, username: str, password: str) -> Usuario:
    """Crea un usuario (seed / administración)"""
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Usuario y clave son obligatorios")
    if db.query(Usuario).filter(Usuario.username == username).first():
        raise ValidationError(f"El usuario '{username}' ya existe")

    usuario = Usuario(username=username, password_hash=hash_password(password))
    db.add(usuario)
    db.commit()
    logger.info("🔐 Usuario %s creado", username)
    return usuario
