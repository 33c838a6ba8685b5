from enum import Enum
from sqlalchemy import Column, Integer, String, Text, Boolean, Index
from database.connection import Base
from app.models.mixins import TimestampMixin


class CondicionIva(Enum):
    RESPONSABLE_INSCRIPTO = "Responsable Inscripto"
    MONOTRIBUTISTA = "Monotributista"
    EXENTO = "Exento"
    CONSUMIDOR_FINAL = "Consumidor Final"
    SIN_ESPECIFICAR = ""


# Modelo de cliente
class Cliente(TimestampMixin, Base):
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)
    razon_social = Column(String(200), nullable=False)
    cuit = Column(String(20), nullable=False, default="")
    condicion_iva = Column(String(30), nullable=False, default="")
    domicilio_fiscal = Column(String(200), nullable=False, default="")
    localidad = Column(String(100), nullable=False, default="")
    provincia = Column(String(100), nullable=False, default="Buenos Aires")
    codigo_postal = Column(String(10), nullable=False, default="")
    email = Column(String(150), nullable=False, default="")
    telefono = Column(String(50), nullable=False, default="")
    contacto = Column(String(150), nullable=False, default="")
    transporte = Column(String(150), nullable=False, default="")
    notas = Column(Text, nullable=False, default="")
    activo = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_clientes_activo_razon_social", "activo", "razon_social"),
    )

    def __repr__(self):
        return f"<Cliente(id={self.id}, razon_social='{self.razon_social}', activo={self.activo})>"
