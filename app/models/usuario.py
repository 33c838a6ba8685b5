from sqlalchemy import Column, Integer, String
from database.connection import Base
from app.models.mixins import TimestampMixin


class Usuario(TimestampMixin, Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)  # hash bcrypt, nunca la clave en claro

    def __repr__(self):
        return f"<Usuario(username='{self.username}')>"
