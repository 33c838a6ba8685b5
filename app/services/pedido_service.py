"""
📦 PEDIDO SERVICE - LIBRO DE PEDIDOS
====================================

Este módulo es el corazón del sistema: maneja el ciclo de vida de los pedidos
desde el alta (con asignación de folio) hasta la baja lógica, y responde las
consultas del tablero.

🎯 PROPÓSITO PRINCIPAL:
- Crear pedidos con folio PED-<año>-<NNNN> y total calculado
- Actualizar pedidos recalculando subtotales y total
- Baja lógica y reactivación (nunca se borra un pedido)
- Listados filtrados y paginados
- Estadísticas del mes para el tablero

💰 CÁLCULOS MONETARIOS:
- subtotal = round(cantidad × precio_unitario, 2) con ROUND_HALF_UP
- total = suma de los subtotales
- Todo en Decimal; se convierte a float solo al serializar

🔢 FOLIOS:
- Un contador por año (tabla folio_counters) incrementado con un UPDATE
  atómico dentro de la misma transacción que inserta el pedido
- Si el contador del año no existe se siembra con la cantidad de folios
  ya emitidos ese año
- Un choque de unicidad (dos altas sembrando el mismo año a la vez) se
  reintenta hasta 3 veces y luego responde 409

🔄 FLUJO TÍPICO:
1. Router valida el body con pydantic → create(data)
2. _build_items() valida ítems y calcula subtotales
3. _next_folio() toma el siguiente número del año
4. @db_transaction hace commit o rollback
"""
import calendar
import logging
from datetime import datetime, date, time
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from math import ceil
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import and_, func, or_, update
from sqlalchemy.orm import Session

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.folio_counter import FolioCounter
from app.models.pedido import (
    Pedido, PedidoItem, EstadoPedido, ESTADOS_CERRADOS, MONTO_MAXIMO, CANTIDAD_MAXIMA,
)
from app.services.cliente_service import ClienteService
from app.utils.decorators import db_transaction, read_only
from app.utils.retry import retry

logger = logging.getLogger(__name__)

FOLIO_PREFIX = "PED"
FOLIO_ATTEMPTS = 3
RECIENTES_LIMIT = 5


def money(amount: Decimal) -> Decimal:
    """Redondea cantidades monetarias a 2 decimales"""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calcular_subtotal(cantidad, precio_unitario) -> Decimal:
    return money(Decimal(str(cantidad)) * Decimal(str(precio_unitario)))


def calcular_total(subtotales: Iterable[Decimal]) -> Decimal:
    return money(sum(subtotales, Decimal("0")))


def formatear_folio(anio: int, numero: int) -> str:
    return f"{FOLIO_PREFIX}-{anio}-{numero:04d}"


def naive_local(value: Optional[datetime]) -> Optional[datetime]:
    """Las fechas se guardan en hora local sin zona"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def month_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """Primer día 00:00:00 y último día 23:59:59 del mes de `now`"""
    ultimo_dia = calendar.monthrange(now.year, now.month)[1]
    inicio = datetime(now.year, now.month, 1)
    fin = datetime(now.year, now.month, ultimo_dia, 23, 59, 59)
    return inicio, fin


class PedidoService:
    """Servicio para crear, modificar y consultar pedidos"""

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.clock = clock

    # ==========================================
    # VALIDACIÓN Y CÁLCULO
    # ==========================================

    def _build_items(self, items: Optional[List[Any]]) -> List[PedidoItem]:
        """
        Valida los ítems y crea las filas con su subtotal

        Args:
            items: Lista de dicts (o modelos pydantic) con descripcion,
                cantidad y precio_unitario

        Returns:
            Lista de PedidoItem listos para asociar al pedido
        """
        if not items or not isinstance(items, list):
            raise ValidationError("El pedido debe tener al menos un ítem")

        built = []
        for i, item in enumerate(items):
            if hasattr(item, "model_dump"):
                item = item.model_dump()
            if not isinstance(item, dict):
                raise ValidationError(f"Ítem {i + 1}: formato inválido")

            descripcion = str(item.get("descripcion") or "").strip()
            if not descripcion:
                raise ValidationError(f"Ítem {i + 1}: la descripción es obligatoria")

            try:
                cantidad = Decimal(str(item.get("cantidad")))
                precio_unitario = Decimal(str(item.get("precio_unitario")))
            except InvalidOperation:
                raise ValidationError(f"Ítem {i + 1}: cantidad y precio deben ser numéricos")

            if not cantidad.is_finite() or cantidad != cantidad.to_integral_value() or cantidad < 1:
                raise ValidationError(f"Ítem {i + 1}: la cantidad debe ser un entero mayor o igual a 1")
            if cantidad > CANTIDAD_MAXIMA:
                raise ValidationError(f"Ítem {i + 1}: la cantidad no puede superar {CANTIDAD_MAXIMA}")
            if not precio_unitario.is_finite() or precio_unitario < 0:
                raise ValidationError(f"Ítem {i + 1}: el precio unitario no puede ser negativo")
            if precio_unitario > MONTO_MAXIMO:
                raise ValidationError(f"Ítem {i + 1}: el precio unitario supera el máximo permitido")

            precio_unitario = money(precio_unitario)
            subtotal = calcular_subtotal(cantidad, precio_unitario)
            if subtotal > MONTO_MAXIMO:
                raise ValidationError(f"Ítem {i + 1}: el subtotal supera el máximo permitido")
            built.append(PedidoItem(
                posicion=i,
                descripcion=descripcion,
                cantidad=int(cantidad),
                precio_unitario=precio_unitario,
                subtotal=subtotal,
            ))

        if calcular_total(item.subtotal for item in built) > MONTO_MAXIMO:
            raise ValidationError("El total del pedido supera el máximo permitido")
        return built

    def _parse_estado(self, value: Any) -> EstadoPedido:
        if isinstance(value, EstadoPedido):
            return value
        try:
            return EstadoPedido(value)
        except ValueError:
            raise ValidationError(f"Estado inválido: {value}")

    def _get_or_404(self, pedido_id: int) -> Pedido:
        pedido = self.db.get(Pedido, pedido_id)
        if not pedido:
            raise NotFoundError("Pedido no encontrado")
        return pedido

    # ==========================================
    # FOLIOS
    # ==========================================

    def _next_folio(self, anio: int) -> str:
        """Toma el siguiente número del año dentro de la transacción en curso"""
        result = self.db.execute(
            update(FolioCounter)
            .where(FolioCounter.anio == anio)
            .values(ultimo_numero=FolioCounter.ultimo_numero + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # Primer pedido del año con contador: continuar la numeración existente
            emitidos = (self.db.query(func.count(Pedido.id))
                        .filter(Pedido.folio.like(f"{FOLIO_PREFIX}-{anio}-%"))
                        .scalar())
            self.db.add(FolioCounter(anio=anio, ultimo_numero=emitidos + 1))
            self.db.flush()

        numero = (self.db.query(FolioCounter.ultimo_numero)
                  .filter(FolioCounter.anio == anio)
                  .scalar())
        return formatear_folio(anio, numero)

    # ==========================================
    # ESCRITURA
    # ==========================================

    def create(self, data: Dict[str, Any]) -> Pedido:
        """
        Crea un pedido con folio y total calculado

        Args:
            data: cliente_id, items, y opcionalmente fecha_pedido,
                fecha_entrega, estado y notas

        Returns:
            Pedido persistido

        Raises:
            ValidationError: falta el cliente o no hay ítems válidos
            ConflictError: el folio chocó con otro en todos los intentos
        """
        try:
            return retry(lambda: self._create_once(data), attempts=FOLIO_ATTEMPTS, exc=(ConflictError,))
        except ConflictError:
            logger.warning("⚠️ No se pudo asignar folio tras %s intentos", FOLIO_ATTEMPTS)
            raise ConflictError("No se pudo asignar un folio único al pedido, intente nuevamente")

    @db_transaction
    def _create_once(self, data: Dict[str, Any]) -> Pedido:
        cliente_id = data.get("cliente_id")
        if not cliente_id:
            raise ValidationError("El cliente es obligatorio")

        items = self._build_items(data.get("items"))
        estado = self._parse_estado(data.get("estado") or EstadoPedido.PENDIENTE)
        now = self.clock()

        pedido = Pedido(
            folio=self._next_folio(now.year),
            cliente_id=cliente_id,
            fecha_pedido=naive_local(data.get("fecha_pedido")) or now,
            fecha_entrega=naive_local(data.get("fecha_entrega")),
            estado=estado,
            notas=(data.get("notas") or "").strip(),
            activo=True,
            items=items,
            total=calcular_total(item.subtotal for item in items),
        )
        self.db.add(pedido)
        self.db.flush()

        logger.info("🧾 Pedido %s creado | cliente=%s | total=%s", pedido.folio, cliente_id, pedido.total)
        return pedido

    @db_transaction
    def update(self, pedido_id: int, data: Dict[str, Any]) -> Pedido:
        """
        Actualiza un pedido existente; el folio nunca cambia

        Si vienen ítems se reemplazan todos y se recalculan subtotales y total.
        """
        pedido = self._get_or_404(pedido_id)

        if data.get("items") is not None:
            items = self._build_items(data["items"])
            pedido.items = items
            pedido.total = calcular_total(item.subtotal for item in items)

        if "cliente_id" in data:
            if not data["cliente_id"]:
                raise ValidationError("El cliente es obligatorio")
            pedido.cliente_id = data["cliente_id"]

        if data.get("estado") is not None:
            pedido.estado = self._parse_estado(data["estado"])

        if data.get("fecha_pedido") is not None:
            pedido.fecha_pedido = naive_local(data["fecha_pedido"])
        if "fecha_entrega" in data:
            pedido.fecha_entrega = naive_local(data["fecha_entrega"])

        if "notas" in data:
            pedido.notas = (data["notas"] or "").strip()

        self.db.flush()
        logger.info("✏️ Pedido %s actualizado | total=%s | estado=%s", pedido.folio, pedido.total, pedido.estado.value)
        return pedido

    @db_transaction
    def soft_delete(self, pedido_id: int) -> Pedido:
        pedido = self._get_or_404(pedido_id)
        pedido.activo = False
        logger.info("🗑️ Pedido %s desactivado", pedido.folio)
        return pedido

    @db_transaction
    def reactivate(self, pedido_id: int) -> Pedido:
        pedido = self._get_or_404(pedido_id)
        pedido.activo = True
        logger.info("♻️ Pedido %s reactivado", pedido.folio)
        return pedido

    # ==========================================
    # CONSULTAS
    # ==========================================

    @read_only
    def get(self, pedido_id: int) -> Pedido:
        return self._get_or_404(pedido_id)

    @read_only
    def list(
        self,
        search: Optional[str] = None,
        estado: Optional[str] = None,
        activo: Optional[bool] = True,
        fecha_desde: Optional[date] = None,
        fecha_hasta: Optional[date] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        """
        Listado paginado, del más nuevo al más viejo

        Args:
            search: texto a buscar en folio y notas (sin distinguir mayúsculas)
            estado: estado exacto, o "todos"/"all"/None para no filtrar
            activo: True/False, o None para incluir todos
            fecha_desde: incluye desde las 00:00:00 de ese día
            fecha_hasta: incluye hasta el final de ese día
            page: página (empieza en 1)
            limit: tamaño de página

        Returns:
            Dict con data (pedidos) y pagination
        """
        query = self.db.query(Pedido)

        if activo is not None:
            query = query.filter(Pedido.activo.is_(activo))

        if estado and estado not in ("todos", "all"):
            query = query.filter(Pedido.estado == self._parse_estado(estado))

        if search:
            query = query.filter(or_(
                Pedido.folio.icontains(search, autoescape=True),
                Pedido.notas.icontains(search, autoescape=True),
            ))

        if fecha_desde:
            query = query.filter(Pedido.fecha_pedido >= datetime.combine(fecha_desde, time.min))
        if fecha_hasta:
            query = query.filter(Pedido.fecha_pedido <= datetime.combine(fecha_hasta, time.max))

        total = query.count()
        pedidos = (query
                   .order_by(Pedido.created_at.desc(), Pedido.id.desc())
                   .offset((page - 1) * limit)
                   .limit(limit)
                   .all())

        return {
            "data": pedidos,
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": ceil(total / limit),
            },
        }

    @read_only
    def stats(self) -> Dict[str, Any]:
        """
        Agregados del tablero, solo sobre pedidos activos

        Returns:
            Dict con totalClientes, pedidosActivos, pedidosMes, montoMes,
            porEstado (estados sin pedidos no aparecen) y recientes
        """
        inicio, fin = month_bounds(self.clock())
        activos = Pedido.activo.is_(True)
        en_mes = and_(Pedido.fecha_pedido >= inicio, Pedido.fecha_pedido <= fin)

        total_clientes = ClienteService(self.db).count_activos()

        pedidos_activos = (self.db.query(func.count(Pedido.id))
                           .filter(activos, Pedido.estado.notin_(ESTADOS_CERRADOS))
                           .scalar())

        pedidos_mes = (self.db.query(func.count(Pedido.id))
                       .filter(activos, en_mes)
                       .scalar())

        monto_mes = (self.db.query(func.coalesce(func.sum(Pedido.total), 0))
                     .filter(activos, Pedido.estado == EstadoPedido.COBRADO, en_mes)
                     .scalar())

        por_estado = {
            estado.value: count
            for estado, count in (self.db.query(Pedido.estado, func.count(Pedido.id))
                                  .filter(activos)
                                  .group_by(Pedido.estado)
                                  .all())
        }

        recientes = (self.db.query(Pedido)
                     .filter(activos)
                     .order_by(Pedido.created_at.desc(), Pedido.id.desc())
                     .limit(RECIENTES_LIMIT)
                     .all())

        return {
            "totalClientes": total_clientes,
            "pedidosActivos": pedidos_activos,
            "pedidosMes": pedidos_mes,
            "montoMes": money(Decimal(str(monto_mes))),
            "porEstado": por_estado,
            "recientes": recientes,
        }
