import os

# Configuración de test antes de importar la app (settings se lee al importar)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "False"
os.environ["REDIS_ENABLED"] = "False"
os.environ["DEBUG"] = "True"
os.environ["SECRET_KEY"] = "test_secret_key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.services.auth_service import create_user
from database.connection import Base, get_db
from main import app as fastapi_app

TEST_USER = "tester"
TEST_PASSWORD = "clave_de_prueba"


@pytest.fixture
def engine():
    """Base SQLite en memoria nueva para cada test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Sesión con la misma configuración que SessionLocal."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    yield db
    db.close()


@pytest.fixture
def client(engine):
    """Cliente de test con get_db apuntando a la base en memoria."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def usuario(db_session):
    return create_user(db_session, TEST_USER, TEST_PASSWORD)


@pytest.fixture
def auth_headers(client, usuario):
    """Headers con un token obtenido por el login real."""
    res = client.post("/api/auth/login", json={"username": TEST_USER, "password": TEST_PASSWORD})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}
