from datetime import datetime
from sqlalchemy import Column, DateTime


class TimestampMixin:
    # Marcas de tiempo del lado de Python: precisión de microsegundos en todos los motores
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
