import logging
from math import ceil
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.errors import NotFoundError, ValidationError
from app.models.cliente import Cliente, CondicionIva
from app.utils.decorators import db_transaction, read_only

logger = logging.getLogger(__name__)

# Columnas sobre las que busca el listado
CAMPOS_BUSQUEDA = ("razon_social", "cuit", "email", "contacto", "localidad")


class ClienteService:
    """Registro de clientes: ABM con baja lógica"""

    def __init__(self, db: Session):
        self.db = db

    def _get_or_404(self, cliente_id: int) -> Cliente:
        cliente = self.db.get(Cliente, cliente_id)
        if not cliente:
            raise NotFoundError("Cliente no encontrado")
        return cliente

    def _apply(self, cliente: Cliente, data: Dict[str, Any]) -> None:
        for campo, valor in data.items():
            if campo in ("id", "activo", "created_at", "updated_at") or not hasattr(Cliente, campo):
                continue
            if campo == "condicion_iva":
                valor = self._condicion_iva(valor)
            elif valor is None:
                continue
            setattr(cliente, campo, valor.strip() if isinstance(valor, str) else valor)

        if not (cliente.razon_social or "").strip():
            raise ValidationError("La razón social es obligatoria")

    def _condicion_iva(self, value: Any) -> str:
        if isinstance(value, CondicionIva):
            return value.value
        try:
            return CondicionIva(value or "").value
        except ValueError:
            raise ValidationError(f"Condición de IVA inválida: {value}")

    @read_only
    def list(
        self,
        search: Optional[str] = None,
        activo: Optional[bool] = True,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        query = self.db.query(Cliente)

        if activo is not None:
            query = query.filter(Cliente.activo.is_(activo))

        if search:
            query = query.filter(or_(*(
                getattr(Cliente, campo).icontains(search, autoescape=True)
                for campo in CAMPOS_BUSQUEDA
            )))

        total = query.count()
        clientes = (query
                    .order_by(Cliente.created_at.desc(), Cliente.id.desc())
                    .offset((page - 1) * limit)
                    .limit(limit)
                    .all())

        return {
            "data": clientes,
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": ceil(total / limit),
            },
        }

    @read_only
    def list_activos(self) -> List[Cliente]:
        """Clientes activos ordenados por razón social (para selectores)"""
        return (self.db.query(Cliente)
                .filter(Cliente.activo.is_(True))
                .order_by(Cliente.razon_social.asc())
                .all())

    @read_only
    def count_activos(self) -> int:
        return self.db.query(func.count(Cliente.id)).filter(Cliente.activo.is_(True)).scalar()

    @read_only
    def get(self, cliente_id: int) -> Cliente:
        return self._get_or_404(cliente_id)

    @db_transaction
    def create(self, data: Dict[str, Any]) -> Cliente:
        cliente = Cliente(activo=True)
        self._apply(cliente, data)
        self.db.add(cliente)
        self.db.flush()
        logger.info("👤 Cliente %s creado (id=%s)", cliente.razon_social, cliente.id)
        return cliente

    @db_transaction
    def update(self, cliente_id: int, data: Dict[str, Any]) -> Cliente:
        cliente = self._get_or_404(cliente_id)
        self._apply(cliente, data)
        self.db.flush()
        return cliente

    @db_transaction
    def soft_delete(self, cliente_id: int) -> Cliente:
        cliente = self._get_or_404(cliente_id)
        cliente.activo = False
        logger.info("🗑️ Cliente %s desactivado", cliente.id)
        return cliente

    @db_transaction
    def reactivate(self, cliente_id: int) -> Cliente:
        cliente = self._get_or_404(cliente_id)
        cliente.activo = True
        logger.info("♻️ Cliente %s reactivado", cliente.id)
        return cliente
