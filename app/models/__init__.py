from .cliente import Cliente, CondicionIva
from .empresa import Empresa
from .folio_counter import FolioCounter
from .pedido import Pedido, PedidoItem, EstadoPedido, ESTADOS_CERRADOS, MONTO_MAXIMO, CANTIDAD_MAXIMA
from .usuario import Usuario

__all__ = [
    "Cliente", "CondicionIva",
    "Empresa",
    "FolioCounter",
    "Pedido", "PedidoItem", "EstadoPedido", "ESTADOS_CERRADOS", "MONTO_MAXIMO", "CANTIDAD_MAXIMA",
    "Usuario",
]
