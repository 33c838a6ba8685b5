import logging
import os
import sys
from datetime import timedelta
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))) #Agregar ruta del proyecto

from sqlalchemy.orm import Session

import app.models  # noqa: F401  registra todas las tablas en Base.metadata
from app.models.cliente import Cliente, CondicionIva
from app.models.pedido import EstadoPedido
from app.models.usuario import Usuario
from app.services.auth_service import create_user
from app.services.cliente_service import ClienteService
from app.services.pedido_service import PedidoService
from config.settings import settings
from database.connection import Base, SessionLocal, engine

logger = logging.getLogger(__name__)

CLIENTES_EJEMPLO = [
    {
        "razon_social": "Electricidad López S.R.L.",
        "cuit": "30-71234567-0",
        "condicion_iva": CondicionIva.RESPONSABLE_INSCRIPTO,
        "domicilio_fiscal": "Av. Rivadavia 1234",
        "localidad": "Morón",
        "provincia": "Buenos Aires",
        "codigo_postal": "1708",
        "email": "info@lopezelectricidad.com.ar",
        "telefono": "011-4567-8901",
        "contacto": "Juan López",
    },
    {
        "razon_social": "Decoración Interior BA",
        "cuit": "20-34567890-5",
        "condicion_iva": CondicionIva.MONOTRIBUTISTA,
        "domicilio_fiscal": "Calle 50 Nro 789",
        "localidad": "La Plata",
        "provincia": "Buenos Aires",
        "codigo_postal": "1900",
        "email": "contacto@decoracionba.com.ar",
        "telefono": "0221-456-7890",
        "contacto": "María García",
    },
    {
        "razon_social": "Construcciones Roca S.A.",
        "cuit": "30-98765432-1",
        "condicion_iva": CondicionIva.RESPONSABLE_INSCRIPTO,
        "domicilio_fiscal": "Belgrano 456",
        "localidad": "Quilmes",
        "provincia": "Buenos Aires",
        "codigo_postal": "1878",
        "email": "compras@construccionesroca.com",
        "telefono": "011-4253-1234",
        "contacto": "Carlos Roca",
    },
]


def init_database():
    """Crear todas las tablas en la base de datos"""
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Base de datos inicializada correctamente")


def seed(db: Session) -> dict:
    """Crea el usuario admin y, si no hay clientes, datos de ejemplo"""
    resumen = {"usuario": False, "clientes": 0, "pedidos": 0}

    if not db.query(Usuario).filter(Usuario.username == settings.ADMIN_USERNAME).first():
        create_user(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        resumen["usuario"] = True
    else:
        logger.info("ℹ️ Usuario %s ya existe", settings.ADMIN_USERNAME)

    if db.query(Cliente).first():
        logger.info("ℹ️ Ya existen datos de ejemplo")
        return resumen

    clientes_svc = ClienteService(db)
    clientes = [clientes_svc.create(data) for data in CLIENTES_EJEMPLO]
    resumen["clientes"] = len(clientes)

    pedidos_svc = PedidoService(db)
    ahora = pedidos_svc.clock()
    pedidos_svc.create({
        "cliente_id": clientes[0].id,
        "fecha_entrega": ahora + timedelta(days=7),
        "estado": EstadoPedido.PENDIENTE,
        "items": [
            {"descripcion": "Lámpara LED empotrable 18W", "cantidad": 20, "precio_unitario": 4500},
            {"descripcion": "Panel LED 60x60 40W", "cantidad": 10, "precio_unitario": 12000},
        ],
        "notas": "Entrega en obra, Av. Mitre 890",
    })
    pedidos_svc.create({
        "cliente_id": clientes[1].id,
        "fecha_entrega": ahora + timedelta(days=14),
        "estado": EstadoPedido.EN_PRODUCCION,
        "items": [
            {"descripcion": "Aplique de pared decorativo", "cantidad": 8, "precio_unitario": 8500},
            {"descripcion": "Colgante industrial vintage", "cantidad": 4, "precio_unitario": 15000},
            {"descripcion": "Tira LED RGB 5m", "cantidad": 6, "precio_unitario": 7200},
        ],
        "notas": "Cliente solicita envío a domicilio",
    })
    resumen["pedidos"] = 2
    logger.info("✅ %s clientes y %s pedidos de ejemplo creados", resumen["clientes"], resumen["pedidos"])
    return resumen


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(message)s")
    init_database()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()
