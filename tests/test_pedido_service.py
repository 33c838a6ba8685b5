from datetime import date, datetime
from decimal import Decimal

import pytest

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.cliente import Cliente
from app.models.folio_counter import FolioCounter
from app.models.pedido import EstadoPedido, Pedido
from app.services.pedido_service import (
    PedidoService, calcular_subtotal, calcular_total, formatear_folio, month_bounds,
)

AHORA = datetime(2026, 10, 19, 12, 30)


@pytest.fixture
def service(db_session):
    return PedidoService(db_session, clock=lambda: AHORA)


@pytest.fixture
def cliente(db_session):
    cliente = Cliente(razon_social="Electricidad López S.R.L.", cuit="30-71234567-0")
    db_session.add(cliente)
    db_session.commit()
    return cliente


def _pedido(cliente_id, items=None, **extra):
    data = {
        "cliente_id": cliente_id,
        "items": items or [
            {"descripcion": "Lámpara LED empotrable 18W", "cantidad": 20, "precio_unitario": 4500},
            {"descripcion": "Panel LED 60x60 40W", "cantidad": 10, "precio_unitario": 12000},
        ],
    }
    data.update(extra)
    return data


def test_calcular_subtotal_redondea_a_dos_decimales():
    assert calcular_subtotal(3, Decimal("0.335")) == Decimal("1.01")
    assert calcular_subtotal(20, 4500) == Decimal("90000.00")


def test_calcular_total_suma_subtotales():
    assert calcular_total([Decimal("90000"), Decimal("120000")]) == Decimal("210000.00")
    assert calcular_total([]) == Decimal("0.00")


def test_month_bounds_cubre_todo_el_mes():
    inicio, fin = month_bounds(datetime(2024, 2, 10, 8, 0))
    assert inicio == datetime(2024, 2, 1, 0, 0, 0)
    assert fin == datetime(2024, 2, 29, 23, 59, 59)


def test_create_calcula_subtotales_total_y_folio(service, cliente):
    pedido = service.create(_pedido(cliente.id))

    assert [item.subtotal for item in pedido.items] == [Decimal("90000.00"), Decimal("120000.00")]
    assert pedido.total == Decimal("210000.00")
    assert pedido.folio == "PED-2026-0001"
    assert pedido.estado == EstadoPedido.PENDIENTE
    assert pedido.activo is True
    assert pedido.fecha_pedido == AHORA


def test_folios_secuenciales_y_contiguos(service, cliente):
    folios = [service.create(_pedido(cliente.id)).folio for _ in range(5)]

    assert folios == [formatear_folio(2026, n) for n in range(1, 6)]
    assert len(set(folios)) == 5


def test_folio_reinicia_por_anio(db_session, cliente):
    PedidoService(db_session, clock=lambda: datetime(2025, 12, 31, 23, 0)).create(_pedido(cliente.id))
    pedido = PedidoService(db_session, clock=lambda: datetime(2026, 1, 1, 9, 0)).create(_pedido(cliente.id))

    assert pedido.folio == "PED-2026-0001"


def test_contador_continua_folios_existentes(db_session, service, cliente):
    # Pedidos cargados antes de existir el contador del año
    for folio in ("PED-2026-0001", "PED-2026-0002"):
        db_session.add(Pedido(folio=folio, cliente_id=cliente.id, total=0))
    db_session.commit()

    assert service.create(_pedido(cliente.id)).folio == "PED-2026-0003"


def test_folio_tomado_termina_en_conflicto(db_session, service, cliente):
    db_session.add(Pedido(folio="PED-2026-0001", cliente_id=cliente.id, total=0))
    db_session.add(FolioCounter(anio=2026, ultimo_numero=0))
    db_session.commit()

    with pytest.raises(ConflictError):
        service.create(_pedido(cliente.id))

    # El rollback no deja pedidos a medio crear
    assert db_session.query(Pedido).count() == 1


def test_folio_en_conflicto_se_reintenta_y_sigue_la_secuencia(db_session, service, cliente, monkeypatch):
    folio_tomado = service.create(_pedido(cliente.id)).folio
    next_folio = service._next_folio
    llamadas = []

    def folio_repetido_una_vez(anio):
        llamadas.append(anio)
        folio = next_folio(anio)
        # El primer intento choca con el folio ya emitido
        return folio_tomado if len(llamadas) == 1 else folio

    monkeypatch.setattr(service, "_next_folio", folio_repetido_una_vez)

    segundo = service.create(_pedido(cliente.id, notas="reintento"))

    assert len(llamadas) == 2
    assert segundo.folio == "PED-2026-0002"
    assert segundo.total == Decimal("210000")
    assert db_session.query(Pedido).count() == 2
    assert db_session.get(FolioCounter, 2026).ultimo_numero == 2


def test_create_sin_cliente_falla(service):
    with pytest.raises(ValidationError):
        service.create(_pedido(None))


def test_create_sin_items_falla(service, cliente):
    with pytest.raises(ValidationError):
        service.create({"cliente_id": cliente.id, "items": []})


@pytest.mark.parametrize("item", [
    {"descripcion": "  ", "cantidad": 1, "precio_unitario": 10},
    {"descripcion": "Dicroica", "cantidad": 0, "precio_unitario": 10},
    {"descripcion": "Dicroica", "cantidad": -2, "precio_unitario": 10},
    {"descripcion": "Dicroica", "cantidad": 1.5, "precio_unitario": 10},
    {"descripcion": "Dicroica", "cantidad": 1, "precio_unitario": -1},
    {"descripcion": "Dicroica", "cantidad": 1, "precio_unitario": "abc"},
    {"descripcion": "Dicroica", "cantidad": 1_000_001, "precio_unitario": 1},
    {"descripcion": "Dicroica", "cantidad": 1, "precio_unitario": "1e30"},
    {"descripcion": "Dicroica", "cantidad": 10000, "precio_unitario": 1000000},
])
def test_create_rechaza_items_invalidos(service, cliente, item):
    with pytest.raises(ValidationError):
        service.create(_pedido(cliente.id, items=[item]))


def test_create_rechaza_total_fuera_de_rango(db_session, service, cliente):
    items = [{"descripcion": "Tablero", "cantidad": 1, "precio_unitario": "6000000000"}] * 2

    with pytest.raises(ValidationError):
        service.create(_pedido(cliente.id, items=items))
    assert db_session.query(Pedido).count() == 0


def test_create_no_referencia_cliente_existente(service):
    # La referencia al cliente es débil: no se valida su existencia
    pedido = service.create(_pedido(999))
    assert pedido.cliente_id == 999
    assert pedido.cliente is None


def test_update_recalcula_items_y_conserva_folio(service, cliente):
    pedido = service.create(_pedido(cliente.id))

    actualizado = service.update(pedido.id, {"items": [
        {"descripcion": "Lámpara LED empotrable 18W", "cantidad": 25, "precio_unitario": 4500},
        {"descripcion": "Panel LED 60x60 40W", "cantidad": 10, "precio_unitario": 12000},
    ]})

    assert actualizado.items[0].subtotal == Decimal("112500.00")
    assert actualizado.total == Decimal("232500.00")
    assert actualizado.folio == "PED-2026-0001"
    assert len(actualizado.items) == 2


def test_update_sin_items_no_toca_total(service, cliente):
    pedido = service.create(_pedido(cliente.id))

    actualizado = service.update(pedido.id, {"estado": "cobrado", "notas": " pagó en efectivo "})

    assert actualizado.estado == EstadoPedido.COBRADO
    assert actualizado.notas == "pagó en efectivo"
    assert actualizado.total == Decimal("210000.00")


def test_update_permite_cualquier_transicion(service, cliente):
    pedido = service.create(_pedido(cliente.id, estado="cancelado"))
    assert service.update(pedido.id, {"estado": "pendiente"}).estado == EstadoPedido.PENDIENTE


def test_update_inexistente(service):
    with pytest.raises(NotFoundError):
        service.update(123, {"notas": "x"})


def test_update_rechaza_precio_negativo(service, cliente):
    pedido = service.create(_pedido(cliente.id))
    with pytest.raises(ValidationError):
        service.update(pedido.id, {"items": [{"descripcion": "Spot", "cantidad": 1, "precio_unitario": -5}]})

    assert service.get(pedido.id).total == Decimal("210000.00")


def test_soft_delete_y_reactivar_idempotentes(service, cliente):
    pedido = service.create(_pedido(cliente.id))

    assert service.soft_delete(pedido.id).activo is False
    assert service.soft_delete(pedido.id).activo is False
    assert service.reactivate(pedido.id).activo is True
    assert service.reactivate(pedido.id).activo is True

    with pytest.raises(NotFoundError):
        service.soft_delete(999)
    with pytest.raises(NotFoundError):
        service.reactivate(999)


def test_list_filtra_activos_por_defecto(service, cliente):
    visible = service.create(_pedido(cliente.id))
    oculto = service.create(_pedido(cliente.id))
    service.soft_delete(oculto.id)

    assert [p.id for p in service.list()["data"]] == [visible.id]
    assert [p.id for p in service.list(activo=False)["data"]] == [oculto.id]
    assert {p.id for p in service.list(activo=None)["data"]} == {visible.id, oculto.id}


def test_list_busca_en_folio_y_notas(service, cliente):
    service.create(_pedido(cliente.id, notas="Entrega en obra, Av. Mitre 890"))
    segundo = service.create(_pedido(cliente.id, notas="Retira en local"))

    assert [p.notas for p in service.list(search="MITRE")["data"]] == ["Entrega en obra, Av. Mitre 890"]
    assert [p.id for p in service.list(search="0002")["data"]] == [segundo.id]
    assert service.list(search="100%")["pagination"]["total"] == 0


def test_list_filtra_estado(service, cliente):
    service.create(_pedido(cliente.id))
    listo = service.create(_pedido(cliente.id, estado="listo"))

    assert [p.id for p in service.list(estado="listo")["data"]] == [listo.id]
    assert service.list(estado="todos")["pagination"]["total"] == 2
    with pytest.raises(ValidationError):
        service.list(estado="archivado")


def test_list_rango_de_fechas_incluye_fin_de_dia(service, cliente):
    service.create(_pedido(cliente.id, fecha_pedido=datetime(2026, 10, 5, 10, 0)))
    tarde = service.create(_pedido(cliente.id, fecha_pedido=datetime(2026, 10, 20, 23, 30)))
    service.create(_pedido(cliente.id, fecha_pedido=datetime(2026, 10, 21, 0, 0)))

    result = service.list(fecha_desde=date(2026, 10, 6), fecha_hasta=date(2026, 10, 20))

    assert [p.id for p in result["data"]] == [tarde.id]


def test_list_paginado_del_mas_nuevo_al_mas_viejo(service, cliente):
    ids = [service.create(_pedido(cliente.id)).id for _ in range(5)]

    page1 = service.list(page=1, limit=2)
    page3 = service.list(page=3, limit=2)

    assert [p.id for p in page1["data"]] == [ids[4], ids[3]]
    assert [p.id for p in page3["data"]] == [ids[0]]
    assert page1["pagination"] == {"total": 5, "page": 1, "limit": 2, "pages": 3}


def test_list_incluye_proyeccion_del_cliente(service, cliente):
    service.create(_pedido(cliente.id))
    pedido = service.list()["data"][0]

    assert pedido.cliente.razon_social == "Electricidad López S.R.L."
    assert pedido.cliente.cuit == "30-71234567-0"


def test_stats(db_session, service, cliente):
    inactivo_cliente = Cliente(razon_social="Dada de baja", activo=False)
    db_session.add(inactivo_cliente)
    db_session.commit()

    service.create(_pedido(cliente.id, estado="cobrado", items=[
        {"descripcion": "Lámpara LED empotrable 18W", "cantidad": 20, "precio_unitario": 4500},
    ]))
    service.create(_pedido(cliente.id, estado="cobrado", items=[
        {"descripcion": "Aplique de pared decorativo", "cantidad": 8, "precio_unitario": 8500},
        {"descripcion": "Colgante industrial vintage", "cantidad": 4, "precio_unitario": 15000},
        {"descripcion": "Tira LED RGB 5m", "cantidad": 6, "precio_unitario": 7200},
    ]))
    service.create(_pedido(cliente.id, estado="en_produccion"))
    # Cobrado pero del mes anterior: no suma al monto del mes
    service.create(_pedido(cliente.id, estado="cobrado", fecha_pedido=datetime(2026, 9, 30, 23, 59, 59)))
    # Dado de baja: fuera de todas las cuentas
    baja = service.create(_pedido(cliente.id, estado="cobrado"))
    service.soft_delete(baja.id)

    stats = service.stats()

    assert stats["totalClientes"] == 1
    assert stats["pedidosActivos"] == 1
    assert stats["pedidosMes"] == 3
    assert stats["montoMes"] == Decimal("261200.00")
    assert stats["porEstado"] == {"cobrado": 3, "en_produccion": 1}
    assert sum(stats["porEstado"].values()) == db_session.query(Pedido).filter(Pedido.activo.is_(True)).count()
    assert len(stats["recientes"]) == 4
    assert baja.id not in [p.id for p in stats["recientes"]]


def test_stats_recientes_limita_a_cinco(service, cliente):
    ids = [service.create(_pedido(cliente.id)).id for _ in range(7)]

    recientes = service.stats()["recientes"]

    assert [p.id for p in recientes] == list(reversed(ids))[:5]


def test_stats_sin_pedidos(service):
    stats = service.stats()

    assert stats["porEstado"] == {}
    assert stats["montoMes"] == Decimal("0.00")
    assert stats["recientes"] == []
