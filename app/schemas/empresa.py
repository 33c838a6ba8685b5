from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.cliente import CondicionIva


class EmpresaUpdate(BaseModel):
    razon_social: Optional[str] = Field(None, min_length=1, max_length=200)
    cuit: Optional[str] = Field(None, max_length=20)
    condicion_iva: Optional[CondicionIva] = None
    domicilio_fiscal: Optional[str] = Field(None, max_length=200)
    localidad: Optional[str] = Field(None, max_length=100)
    provincia: Optional[str] = Field(None, max_length=100)
    codigo_postal: Optional[str] = Field(None, max_length=10)
    email: Optional[str] = Field(None, max_length=150)
    telefono: Optional[str] = Field(None, max_length=50)
    contacto: Optional[str] = Field(None, max_length=150)
    notas: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class EmpresaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    razon_social: str
    cuit: str
    condicion_iva: str
    domicilio_fiscal: str
    localidad: str
    provincia: str
    codigo_postal: str
    email: str
    telefono: str
    contacto: str
    notas: str
    created_at: datetime
    updated_at: datetime
