from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.schemas.common import parse_activo_filter
from app.schemas.pedido import PedidoCreate, PedidoListOut, PedidoMessageOut, PedidoOut, PedidoUpdate, StatsOut
from app.services.pedido_service import PedidoService
from config.settings import settings
from database.connection import get_db

router = APIRouter()


@router.get("", response_model=PedidoListOut)
def list_pedidos(
    search: Optional[str] = None,
    estado: Optional[str] = None,
    activo: Optional[str] = None,
    fecha_desde: Optional[date] = None,
    fecha_hasta: Optional[date] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return PedidoService(db).list(
        search=(search or "").strip() or None,
        estado=estado or None,
        activo=parse_activo_filter(activo),
        fecha_desde=fecha_desde,
        fecha_hasta=fecha_hasta,
        page=page,
        limit=limit,
    )


# Antes de /{pedido_id} para que "stats" no se tome como id
@router.get("/stats", response_model=StatsOut)
def pedidos_stats(db: Session = Depends(get_db)):
    return PedidoService(db).stats()


@router.get("/{pedido_id}", response_model=PedidoOut)
def get_pedido(pedido_id: int, db: Session = Depends(get_db)):
    return PedidoService(db).get(pedido_id)


@router.post("", response_model=PedidoOut, status_code=201)
def create_pedido(body: PedidoCreate, db: Session = Depends(get_db)):
    return PedidoService(db).create(body.model_dump())


@router.put("/{pedido_id}", response_model=PedidoOut)
def update_pedido(pedido_id: int, body: PedidoUpdate, db: Session = Depends(get_db)):
    return PedidoService(db).update(pedido_id, body.model_dump(exclude_unset=True))


@router.delete("/{pedido_id}", response_model=PedidoMessageOut)
def delete_pedido(pedido_id: int, db: Session = Depends(get_db)):
    pedido = PedidoService(db).soft_delete(pedido_id)
    return {"message": "Pedido desactivado", "pedido": pedido}


@router.patch("/{pedido_id}/reactivar", response_model=PedidoMessageOut)
def reactivar_pedido(pedido_id: int, db: Session = Depends(get_db)):
    pedido = PedidoService(db).reactivate(pedido_id)
    return {"message": "Pedido reactivado", "pedido": pedido}
