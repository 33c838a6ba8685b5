"""
🔧 DECORADORES DE TRANSACCIONES PARA LOS SERVICIOS
==================================================

Decoradores simples para manejar transacciones de manera consistente y
evitar repetir try/commit/rollback en cada método de servicio.

ANTES (código repetitivo):
    def mi_metodo(self, ...):
        try:
            # lógica de negocio
            self.db.commit()
            return resultado
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error: {e}")
            raise

DESPUÉS (con decorador):
    @db_transaction
    def mi_metodo(self, ...):
        # solo lógica de negocio
        return resultado  # commit automático

Los errores de dominio (app.errors.AppError) se propagan tal cual. Una
violación de unicidad/integridad se convierte en ConflictError y cualquier
otro error de SQLAlchemy en ServerError, para que el router responda con el
status correcto.
"""

import logging
import re
from functools import wraps
from typing import Callable, Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.errors import AppError, ConflictError, ServerError

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = ("password", "token", "secret", "password_hash")


def _mask_sensitive_data(data: Any) -> str:
    """
    🔒 Enmascara datos sensibles en logs (claves, tokens)

    Args:
        data: Datos a enmascarar (args, kwargs, etc.)

    Returns:
        String seguro para logging sin datos sensibles
    """
    data_str = str(data)

    for field in SENSITIVE_FIELDS:
        # 'password': 'x'  |  password='x'
        data_str = re.sub(rf"('{field}':\s*)'[^']*'", r"\1'***MASKED***'", data_str, flags=re.IGNORECASE)
        data_str = re.sub(rf"(\b{field}=)'[^']*'", r"\1'***MASKED***'", data_str, flags=re.IGNORECASE)

    # Bearer tokens sueltos
    data_str = re.sub(r"eyJ[\w-]+\.[\w-]+\.[\w-]+", "***MASKED***", data_str)
    return data_str


def _log_failure(kind: str, func: Callable, error: Exception, args, kwargs) -> None:
    logger.error(f"❌ Error en {kind} {func.__name__}: {error}")
    logger.debug(f"   Args: {_mask_sensitive_data(args)}")
    logger.debug(f"   Kwargs: {_mask_sensitive_data(kwargs)}")


def db_transaction(func: Callable) -> Callable:
    """
    🎯 Decorador principal para manejo automático de transacciones

    ✅ QUÉ HACE:
    - Ejecuta la función original
    - Hace commit si terminó sin excepción
    - Hace rollback si hubo cualquier excepción y la vuelve a lanzar
    - IntegrityError → ConflictError, SQLAlchemyError → ServerError

    ⚠️ CUÁNDO NO USAR:
    - Métodos de solo lectura (usar @read_only)
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs) -> Any:
        try:
            result = func(self, *args, **kwargs)
            self.db.commit()
            logger.debug(f"✅ Transacción exitosa en {func.__name__}")
            return result

        except AppError as e:
            self.db.rollback()
            logger.debug(f"🔄 Rollback en {func.__name__}: {e.message}")
            raise

        except IntegrityError as e:
            self.db.rollback()
            _log_failure("transacción", func, e, args, kwargs)
            raise ConflictError("El registro entra en conflicto con uno existente") from e

        except SQLAlchemyError as e:
            self.db.rollback()
            _log_failure("transacción", func, e, args, kwargs)
            raise ServerError("Error durante operación de base de datos") from e

        except Exception as e:
            self.db.rollback()
            _log_failure("transacción", func, e, args, kwargs)
            raise

    return wrapper


def read_only(func: Callable) -> Callable:
    """
    📖 Decorador para operaciones de solo lectura

    - NO hace commit (no modifica datos)
    - SÍ hace rollback si hay error (limpia la transacción)
    - Errores de SQLAlchemy → ServerError
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs) -> Any:
        try:
            return func(self, *args, **kwargs)

        except AppError:
            self.db.rollback()
            raise

        except SQLAlchemyError as e:
            self.db.rollback()
            _log_failure("consulta", func, e, args, kwargs)
            raise ServerError("Error durante consulta de base de datos") from e

    return wrapper


