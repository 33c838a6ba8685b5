from app.models.empresa import Empresa


def test_empresa_se_crea_en_la_primera_lectura(client, auth_headers, db_session):
    assert db_session.query(Empresa).count() == 0

    res = client.get("/api/empresa", headers=auth_headers)

    assert res.status_code == 200
    assert res.json()["razon_social"] == "BM Iluminación"
    assert db_session.query(Empresa).count() == 1

    # Segunda lectura: mismo registro
    assert client.get("/api/empresa", headers=auth_headers).json()["id"] == res.json()["id"]
    assert db_session.query(Empresa).count() == 1


def test_actualizar_empresa(client, auth_headers):
    res = client.put(
        "/api/empresa",
        json={"cuit": "30-11111111-1", "condicion_iva": "Responsable Inscripto"},
        headers=auth_headers,
    )

    assert res.status_code == 200
    assert res.json()["cuit"] == "30-11111111-1"
    assert res.json()["razon_social"] == "BM Iluminación"

    invalido = client.put("/api/empresa", json={"condicion_iva": "Otra"}, headers=auth_headers)
    assert invalido.status_code == 400


def test_empresa_requiere_token(client):
    assert client.get("/api/empresa").status_code == 401
