from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.schemas.empresa import EmpresaOut, EmpresaUpdate
from app.services.empresa_service import EmpresaService
from database.connection import get_db

router = APIRouter()


@router.get("", response_model=EmpresaOut)
def get_empresa(db: Session = Depends(get_db)):
    return EmpresaService(db).get_or_create()


@router.put("", response_model=EmpresaOut)
def update_empresa(body: EmpresaUpdate, db: Session = Depends(get_db)):
    return EmpresaService(db).update(body.model_dump(exclude_unset=True))
