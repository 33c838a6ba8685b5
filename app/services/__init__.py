from .auth_service import authenticate, create_access_token, decode_token, get_current_user
from .cache_service import CacheService, cache_service
from .cliente_service import ClienteService
from .empresa_service import EmpresaService
from .pedido_service import PedidoService

__all__ = [
    "authenticate", "create_access_token", "decode_token", "get_current_user",
    "CacheService", "cache_service",
    "ClienteService",
    "EmpresaService",
    "PedidoService",
]
