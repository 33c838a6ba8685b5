from sqlalchemy import Column, Integer, String, Text
from database.connection import Base
from app.models.mixins import TimestampMixin


# Perfil de la empresa (registro único)
class Empresa(TimestampMixin, Base):
    __tablename__ = "empresa"

    id = Column(Integer, primary_key=True)
    razon_social = Column(String(200), nullable=False, default="BM Iluminación")
    cuit = Column(String(20), nullable=False, default="")
    condicion_iva = Column(String(30), nullable=False, default="")
    domicilio_fiscal = Column(String(200), nullable=False, default="")
    localidad = Column(String(100), nullable=False, default="")
    provincia = Column(String(100), nullable=False, default="Buenos Aires")
    codigo_postal = Column(String(10), nullable=False, default="")
    email = Column(String(150), nullable=False, default="")
    telefono = Column(String(50), nullable=False, default="")
    contacto = Column(String(150), nullable=False, default="")
    notas = Column(Text, nullable=False, default="")

    def __repr__(self):
        return f"<Empresa(razon_social='{self.razon_social}', cuit='{self.cuit}')>"
