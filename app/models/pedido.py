"""
📦 MODELO DE PEDIDOS - ESTRUCTURA DE ÓRDENES
============================================

Define la estructura de datos de los pedidos de iluminación: estados,
ítems con subtotales derivados y la referencia al cliente.

📊 ESTRUCTURA PRINCIPAL:

🛒 TABLA PEDIDOS:
- ID único del pedido
- Folio legible PED-<año>-<NNNN>, único e inmutable
- Referencia al cliente (débil: sin FK, como en el sistema de origen)
- Estado actual (pendiente → cobrado / cancelado)
- Total derivado con precisión decimal
- Fechas de pedido y de entrega estimada
- Notas y marca de baja lógica (activo)

🔍 TABLA PEDIDO_ITEMS:
- Descripción libre del producto
- Cantidad (>= 1) y precio unitario (>= 0)
- Subtotal = round(cantidad × precio_unitario, 2)
- Posición para conservar el orden de carga

📋 ESTADOS DE PEDIDO:
- PENDIENTE: recién cargado
- EN_PRODUCCION: en taller
- LISTO: terminado, esperando entrega
- ENTREGADO: entregado al cliente
- COBRADO: entregado y cobrado (cuenta para la facturación del mes)
- CANCELADO: anulado

Cualquier estado puede pasar a cualquier otro mediante una actualización.

🛡️ VALIDACIONES A NIVEL DB:
- Total, precios y subtotales no negativos
- Cantidades >= 1
- Folio único
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Text, Numeric
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import CheckConstraint, Index
from sqlalchemy.orm import relationship
from database.connection import Base
from app.models.mixins import TimestampMixin
from enum import Enum


class EstadoPedido(Enum):
    PENDIENTE = "pendiente"
    EN_PRODUCCION = "en_produccion"
    LISTO = "listo"
    ENTREGADO = "entregado"
    COBRADO = "cobrado"
    CANCELADO = "cancelado"


# Estados que ya no cuentan como "en curso" en el tablero
ESTADOS_CERRADOS = (EstadoPedido.ENTREGADO, EstadoPedido.COBRADO, EstadoPedido.CANCELADO)

# Mayor importe que entra en Numeric(12, 2)
MONTO_MAXIMO = Decimal("9999999999.99")
CANTIDAD_MAXIMA = 1_000_000


# Modelo de pedido
class Pedido(TimestampMixin, Base):
    __tablename__ = "pedidos"

    id = Column(Integer, primary_key=True, index=True)
    folio = Column(String(20), unique=True, nullable=False)
    cliente_id = Column(Integer, nullable=False, index=True)
    fecha_pedido = Column(DateTime, nullable=False, default=datetime.now)
    fecha_entrega = Column(DateTime, nullable=True)
    estado = Column(
        SQLEnum(
            EstadoPedido,
            name="estado_pedido",
            values_callable=lambda e: [m.value for m in e],
            validate_strings=True,
        ),
        default=EstadoPedido.PENDIENTE,
        nullable=False,
    )
    total = Column(Numeric(12, 2), nullable=False, default=0)
    notas = Column(Text, nullable=False, default="")
    activo = Column(Boolean, nullable=False, default=True)

    # Proyección de solo lectura sobre el cliente (referencia sin integridad referencial)
    cliente = relationship(
        "Cliente",
        primaryjoin="foreign(Pedido.cliente_id) == Cliente.id",
        viewonly=True,
        lazy="joined",
    )

    items = relationship(
        "PedidoItem",
        back_populates="pedido",
        cascade="all, delete-orphan",
        order_by="PedidoItem.posicion",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_pedido_total_nonneg"),
        Index("ix_pedidos_activo_estado", "activo", "estado"),
        Index("ix_pedidos_activo_fecha", "activo", "fecha_pedido"),
    )

    def __repr__(self):
        return f"<Pedido(folio='{self.folio}', cliente_id={self.cliente_id}, total={self.total})>"


# Modelo de ítem de pedido
class PedidoItem(Base):
    __tablename__ = "pedido_items"

    id = Column(Integer, primary_key=True, index=True)
    pedido_id = Column(Integer, ForeignKey("pedidos.id", ondelete="CASCADE"), nullable=False, index=True)
    posicion = Column(Integer, nullable=False, default=0)

    descripcion = Column(String(300), nullable=False)
    cantidad = Column(Integer, nullable=False, default=1)
    precio_unitario = Column(Numeric(12, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)  # cantidad × precio_unitario

    pedido = relationship("Pedido", back_populates="items")

    __table_args__ = (
        CheckConstraint("cantidad >= 1", name="ck_item_cantidad_positive"),
        CheckConstraint("precio_unitario >= 0 AND subtotal >= 0", name="ck_item_precios_nonneg"),
    )

    def __repr__(self):
        return f"<PedidoItem(pedido_id={self.pedido_id}, descripcion='{self.descripcion}', cantidad={self.cantidad})>"
