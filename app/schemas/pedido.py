from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.pedido import EstadoPedido, MONTO_MAXIMO, CANTIDAD_MAXIMA
from app.schemas.cliente import ClienteResumen
from app.schemas.common import PaginationOut


class PedidoItemIn(BaseModel):
    descripcion: str = Field(..., min_length=1, max_length=300)
    cantidad: int = Field(..., ge=1, le=CANTIDAD_MAXIMA)
    precio_unitario: Decimal = Field(..., ge=0, le=MONTO_MAXIMO)

    @field_validator("descripcion", mode="before")
    @classmethod
    def strip_descripcion(cls, v):
        return v.strip() if isinstance(v, str) else v


class PedidoCreate(BaseModel):
    cliente_id: int
    fecha_pedido: Optional[datetime] = None
    fecha_entrega: Optional[datetime] = None
    estado: EstadoPedido = EstadoPedido.PENDIENTE
    items: List[PedidoItemIn] = Field(..., min_length=1)
    notas: str = ""


class PedidoUpdate(BaseModel):
    """Actualización parcial: solo se aplican los campos enviados"""
    cliente_id: Optional[int] = None
    fecha_pedido: Optional[datetime] = None
    fecha_entrega: Optional[datetime] = None
    estado: Optional[EstadoPedido] = None
    items: Optional[List[PedidoItemIn]] = Field(None, min_length=1)
    notas: Optional[str] = None


class PedidoItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    descripcion: str
    cantidad: int
    precio_unitario: float  # float solo para la respuesta JSON
    subtotal: float


class PedidoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    folio: str
    cliente_id: int
    cliente: Optional[ClienteResumen] = None
    fecha_pedido: datetime
    fecha_entrega: Optional[datetime] = None
    estado: EstadoPedido
    items: List[PedidoItemOut]
    total: float
    notas: str
    activo: bool
    created_at: datetime
    updated_at: datetime


class PedidoListOut(BaseModel):
    data: List[PedidoOut]
    pagination: PaginationOut


class PedidoMessageOut(BaseModel):
    message: str
    pedido: PedidoOut


class StatsOut(BaseModel):
    totalClientes: int
    pedidosActivos: int
    pedidosMes: int
    montoMes: float
    porEstado: Dict[str, int]
    recientes: List[PedidoOut]
