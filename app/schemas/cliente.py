from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.cliente import CondicionIva
from app.schemas.common import PaginationOut


class ClienteBase(BaseModel):
    cuit: str = Field("", max_length=20)
    condicion_iva: CondicionIva = CondicionIva.SIN_ESPECIFICAR
    domicilio_fiscal: str = Field("", max_length=200)
    localidad: str = Field("", max_length=100)
    provincia: str = Field("Buenos Aires", max_length=100)
    codigo_postal: str = Field("", max_length=10)
    email: str = Field("", max_length=150)
    telefono: str = Field("", max_length=50)
    contacto: str = Field("", max_length=150)
    transporte: str = Field("", max_length=150)
    notas: str = ""

    @field_validator(
        "cuit", "domicilio_fiscal", "localidad", "provincia", "codigo_postal",
        "email", "telefono", "contacto", "transporte", "notas",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class ClienteCreate(ClienteBase):
    razon_social: str = Field(..., min_length=1, max_length=200)

    @field_validator("razon_social", mode="before")
    @classmethod
    def strip_razon_social(cls, v):
        return v.strip() if isinstance(v, str) else v


class ClienteUpdate(BaseModel):
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
    transporte: Optional[str] = Field(None, max_length=150)
    notas: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class ClienteOut(BaseModel):
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
    transporte: str
    notas: str
    activo: bool
    created_at: datetime
    updated_at: datetime


class ClienteResumen(BaseModel):
    """Proyección mínima para selectores y para los pedidos"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    razon_social: str
    cuit: str


class ClienteListOut(BaseModel):
    data: List[ClienteOut]
    pagination: PaginationOut


class ClienteMessageOut(BaseModel):
    message: str
    cliente: ClienteOut
