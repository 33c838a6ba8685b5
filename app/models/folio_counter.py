from sqlalchemy import Column, Integer
from database.connection import Base


class FolioCounter(Base):
    """Último número de folio emitido por año calendario"""
    __tablename__ = "folio_counters"

    anio = Column(Integer, primary_key=True, autoincrement=False)
    ultimo_numero = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<FolioCounter(anio={self.anio}, ultimo_numero={self.ultimo_numero})>"
