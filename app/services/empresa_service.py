import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.models.cliente import CondicionIva
from app.models.empresa import Empresa
from app.utils.decorators import db_transaction
from config.settings import settings

logger = logging.getLogger(__name__)


class EmpresaService:
    """Perfil de la empresa: un único registro creado a demanda"""

    def __init__(self, db: Session):
        self.db = db

    def _get_or_init(self) -> Empresa:
        empresa = self.db.query(Empresa).order_by(Empresa.id.asc()).first()
        if not empresa:
            empresa = Empresa(razon_social=settings.EMPRESA_RAZON_SOCIAL)
            self.db.add(empresa)
            self.db.flush()
            logger.info("🏢 Perfil de empresa inicializado (%s)", empresa.razon_social)
        return empresa

    @db_transaction
    def get_or_create(self) -> Empresa:
        return self._get_or_init()

    @db_transaction
    def update(self, data: Dict[str, Any]) -> Empresa:
        empresa = self._get_or_init()
        for campo, valor in data.items():
            if valor is None or campo in ("id", "created_at", "updated_at") or not hasattr(Empresa, campo):
                continue
            if campo == "condicion_iva":
                valor = valor.value if isinstance(valor, CondicionIva) else valor
                if valor not in {c.value for c in CondicionIva}:
                    raise ValidationError(f"Condición de IVA inválida: {valor}")
            setattr(empresa, campo, valor.strip() if isinstance(valor, str) else valor)

        if not empresa.razon_social:
            raise ValidationError("La razón social es obligatoria")
        self.db.flush()
        return empresa
