from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.schemas.cliente import (
    ClienteCreate, ClienteListOut, ClienteMessageOut, ClienteOut, ClienteResumen, ClienteUpdate,
)
from app.schemas.common import parse_activo_filter
from app.services.cliente_service import ClienteService
from config.settings import settings
from database.connection import get_db

router = APIRouter()


@router.get("", response_model=ClienteListOut)
def list_clientes(
    search: Optional[str] = None,
    activo: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return ClienteService(db).list(
        search=(search or "").strip() or None,
        activo=parse_activo_filter(activo),
        page=page,
        limit=limit,
    )


@router.get("/all", response_model=List[ClienteResumen])
def list_clientes_activos(db: Session = Depends(get_db)):
    return ClienteService(db).list_activos()


@router.get("/{cliente_id}", response_model=ClienteOut)
def get_cliente(cliente_id: int, db: Session = Depends(get_db)):
    return ClienteService(db).get(cliente_id)


@router.post("", response_model=ClienteOut, status_code=201)
def create_cliente(body: ClienteCreate, db: Session = Depends(get_db)):
    return ClienteService(db).create(body.model_dump())


@router.put("/{cliente_id}", response_model=ClienteOut)
def update_cliente(cliente_id: int, body: ClienteUpdate, db: Session = Depends(get_db)):
    return ClienteService(db).update(cliente_id, body.model_dump(exclude_unset=True))


@router.delete("/{cliente_id}", response_model=ClienteMessageOut)
def delete_cliente(cliente_id: int, db: Session = Depends(get_db)):
    cliente = ClienteService(db).soft_delete(cliente_id)
    return {"message": "Cliente desactivado", "cliente": cliente}


@router.patch("/{cliente_id}/reactivar", response_model=ClienteMessageOut)
def reactivar_cliente(cliente_id: int, db: Session = Depends(get_db)):
    cliente = ClienteService(db).reactivate(cliente_id)
    return {"message": "Cliente reactivado", "cliente": cliente}
