from typing import Optional
from pydantic import BaseModel

from app.errors import ValidationError

# Valores del filtro que significan "sin filtrar"
TODOS = ("", "all", "todos")


class PaginationOut(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


def parse_activo_filter(value: Optional[str]) -> Optional[bool]:
    """
    Traduce el query param `activo` a un filtro.

    None (no enviado) → solo activos; "true"/"false" → ese valor;
    "all"/"todos"/"" → sin filtro.
    """
    if value is None:
        return True
    normalized = value.strip().lower()
    if normalized in TODOS:
        return None
    if normalized in ("true", "1"):
        return True
    if normalized in ("false", "0"):
        return False
    raise ValidationError(f"Valor de 'activo' inválido: {value}")
