"""
Pytest fixtures for service and API tests.

Every test runs against a small in-memory dataset instead of the file
configured in ``DATA_PATH``, and the explorer talks to a fake
text-generation client instead of the real service.
"""
import copy

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_explorador, get_store
from app.main import app
from app.services.dataset_service import DatasetStore, dataset_desde_dict
from app.services.explorador_service import ExploradorService

DATOS = {
    "articulos": [
        {"codigo": 1001, "descripcion_articulo": "ARROZ BLANCO", "unidad_medida": "KILOGRAMO",
         "partida_especifica": 22101, "precio_medio": 28.5, "ultima_fecha": "14/03/2025"},
        {"codigo": 1002, "descripcion_articulo": "FRIJOL NEGRO", "unidad_medida": "KILOGRAMO",
         "partida_especifica": 22101, "precio_medio": "SIN PRECIO", "ultima_fecha": ""},
    ],
    "proveedores": [
        {"id_proveedor": 1, "proveedor": "ALFA", "domicilio": "AV. UNO 1",
         "ciudad": "GUADALAJARA", "giro_comercial": "ABARROTES"},
        {"id_proveedor": 2, "proveedor": "beta", "domicilio": "CALLE DOS 2",
         "ciudad": "ZAPOPAN", "giro_comercial": "PAPELERIA"},
    ],
    "contratos": [
        {"id_contrato": 1, "licitacion_fk": "LA-001", "contrato": "C-1", "proveedor_fk": "ALFA",
         "monto_maximo": 100, "inicio_vigencia": "01/01/2020", "fin_vigencia": "31/12/2020"},
        {"id_contrato": 2, "licitacion_fk": "LA-001", "contrato": "C-2", "proveedor_fk": "ALFA",
         "monto_maximo": 200, "inicio_vigencia": "1 de enero de 2024",
         "fin_vigencia": "31 de diciembre de 2099"},
        {"id_contrato": 3, "licitacion_fk": "LA-002", "contrato": "C-3",
         "proveedor_fk": "FANTASMA", "monto_maximo": 50, "inicio_vigencia": "01/01/2024",
         "fin_vigencia": "POR DEFINIR"},
        {"id_contrato": 4, "licitacion_fk": "LA-002", "contrato": "C-4", "proveedor_fk": "beta",
         "monto_maximo": 1000, "inicio_vigencia": "01/01/2023",
         "fin_vigencia": "15 de enero de 2024"},
    ],
    "adjudicados": [
        {"id_adjudicado": 1, "contrato_fk": "C-1", "codigo_fk": 1001, "cantidad_maxima": 10,
         "precio_unitario": 1.0, "importe_maximo": 10},
        {"id_adjudicado": 2, "contrato_fk": "C-1", "codigo_fk": 9999, "cantidad_maxima": 5,
         "precio_unitario": 1.0, "importe_maximo": 5},
        {"id_adjudicado": 3, "contrato_fk": "C-2", "codigo_fk": 1002, "cantidad_maxima": 20,
         "precio_unitario": 1.0, "importe_maximo": 20},
    ],
    "licitaciones": [
        {"id_licitacion": 1, "licitacion": "LA-001", "denominacion": "VIVERES",
         "fecha_convocatoria": "15/01/2020"},
    ],
    "usuarios": [
        {"rud": 501, "nombre": "MARIA", "contrasena": 1234, "rol": "ADMINISTRADOR"},
        {"rud": 502, "nombre": "JOSE", "contrasena": 5678, "rol": "CONSULTA"},
    ],
}


class FakeGenerador:
    """Text-generation stand-in that records prompts.

    ``respuesta`` is returned as-is; when it is an exception it is raised.
    """

    def __init__(self, respuesta="[]"):
        self.respuesta = respuesta
        self.prompts = []

    def generar(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.respuesta, Exception):
            raise self.respuesta
        return self.respuesta


@pytest.fixture
def datos():
    """Raw table rows, fresh for every test."""
    return copy.deepcopy(DATOS)


@pytest.fixture
def base(datos):
    """Validated fixture dataset."""
    return dataset_desde_dict(datos)


@pytest.fixture
def store(base):
    return DatasetStore(base)


@pytest.fixture
def vista(store):
    """Joined view of the fixture dataset."""
    return store.vista()


@pytest.fixture
def generador():
    return FakeGenerador()


@pytest.fixture
def explorador(generador):
    return ExploradorService(generador, max_filas=100)


@pytest.fixture
def client(store, explorador):
    """Test client wired to the fixture dataset and the fake explorer."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_explorador] = lambda: explorador
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def base_url():
    """Base URL for API endpoints."""
    return "/api"
