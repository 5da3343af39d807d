"""
Tests for Excel export.
"""
import io

from openpyxl import load_workbook

from app.services import exportacion_service
from app.services.tabla_service import TABLAS, SortConfig


def _valores(contenido):
    hoja = load_workbook(io.BytesIO(contenido)).active
    return hoja, [valor for fila in hoja.iter_rows(values_only=True) for valor in fila]


class TestExportExcelService:
    """Tests for exportacion_service.export_excel."""

    def test_returns_xlsx(self, vista):
        contenido = exportacion_service.export_excel(TABLAS["contratos"], vista)
        assert contenido[:2] == b"PK"

    def test_sheet_contents(self, vista):
        contenido = exportacion_service.export_excel(
            TABLAS["contratos"], vista, SortConfig("monto_maximo", "desc"), "alfa"
        )
        hoja, valores = _valores(contenido)
        assert hoja.title == "Contratos"
        assert "Monto Máximo" in valores
        assert "C-2" in valores and "C-1" in valores
        assert "C-4" not in valores
        # Amounts stay numeric
        assert 200 in valores
        assert "alfa" in valores

    def test_dangling_supplier_text(self, vista):
        contenido = exportacion_service.export_excel(TABLAS["contratos"], vista)
        _, valores = _valores(contenido)
        assert "FANTASMA" in valores

    def test_users_view(self, vista):
        contenido = exportacion_service.export_excel(TABLAS["usuarios"], vista)
        _, valores = _valores(contenido)
        assert "MARIA" in valores


class TestExportEndpoint:
    """Tests for GET /exportar/{vista}/excel."""

    def test_export(self, client, base_url):
        response = client.get(f"{base_url}/exportar/contratos/excel?sort_key=contrato")
        assert response.status_code == 200
        assert "spreadsheetml" in response.headers["content-type"]
        disposicion = response.headers.get("content-disposition", "")
        assert "attachment" in disposicion
        assert "savfaa_contratos_" in disposicion
        assert response.content[:2] == b"PK"

    def test_unknown_view(self, client, base_url):
        response = client.get(f"{base_url}/exportar/no_existe/excel")
        assert response.status_code == 404

    def test_unknown_sort_key(self, client, base_url):
        response = client.get(f"{base_url}/exportar/productos/excel?sort_key=x")
        assert response.status_code == 400
