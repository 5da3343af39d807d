"""
Tests for the sortable/searchable table engine and the /tablas endpoints.
"""
import pytest

from app.services.tabla_service import (
    TABLAS,
    SortConfig,
    Tabla,
    comparar_valores,
    construir_tabla,
    filtrar,
    id_fila,
    ordenar,
    solicitar_orden,
)

FILAS = [
    {"id_proveedor": 1, "proveedor": "beta", "ciudad": None, "monto": 30},
    {"id_proveedor": 2, "proveedor": "Alfa", "ciudad": "Zapopan", "monto": 10},
    {"id_proveedor": 3, "proveedor": "gamma", "ciudad": "guadalajara", "monto": None},
    {"id_proveedor": 4, "proveedor": "ALFA", "ciudad": "Tlaquepaque", "monto": 20},
]


class TestSolicitarOrden:
    """Tests for the header-click sort transitions."""

    def test_first_request_is_ascending(self):
        assert solicitar_orden(None, "proveedor") == SortConfig("proveedor", "asc")

    def test_same_key_toggles(self):
        orden = solicitar_orden(None, "proveedor")
        orden = solicitar_orden(orden, "proveedor")
        assert orden.direction == "desc"
        orden = solicitar_orden(orden, "proveedor")
        assert orden.direction == "asc"

    def test_new_key_resets_to_ascending(self):
        orden = SortConfig("proveedor", "asc")
        assert solicitar_orden(orden, "ciudad") == SortConfig("ciudad", "asc")

    def test_new_key_from_descending(self):
        orden = SortConfig("proveedor", "desc")
        assert solicitar_orden(orden, "ciudad") == SortConfig("ciudad", "asc")


class TestCompararValores:
    """Tests for comparar_valores."""

    @pytest.mark.parametrize("direccion", ["asc", "desc"])
    def test_none_sorts_last(self, direccion):
        assert comparar_valores(None, 1, direccion) == 1
        assert comparar_valores(1, None, direccion) == -1

    def test_both_none_equal(self):
        assert comparar_valores(None, None, "asc") == 0

    def test_strings_case_insensitive(self):
        assert comparar_valores("alfa", "BETA", "asc") == -1
        assert comparar_valores("alfa", "BETA", "desc") == 1
        assert comparar_valores("Alfa", "ALFA", "asc") == 0

    def test_numbers(self):
        assert comparar_valores(2, 10, "asc") == -1
        assert comparar_valores(2.5, 1, "desc") == -1

    def test_mixed_types_equal(self):
        assert comparar_valores(1, "1", "asc") == 0
        assert comparar_valores(True, 2, "asc") == 0


class TestOrdenar:
    """Tests for ordenar."""

    def test_no_sort_keeps_input_order(self):
        assert ordenar(FILAS, None) == FILAS

    def test_returns_copy(self):
        resultado = ordenar(FILAS, SortConfig("monto", "asc"))
        assert resultado is not FILAS
        assert [f["id_proveedor"] for f in FILAS] == [1, 2, 3, 4]

    def test_ascending_none_last(self):
        ids = [f["id_proveedor"] for f in ordenar(FILAS, SortConfig("monto", "asc"))]
        assert ids == [2, 4, 1, 3]

    def test_descending_none_last(self):
        ids = [f["id_proveedor"] for f in ordenar(FILAS, SortConfig("monto", "desc"))]
        assert ids == [1, 4, 2, 3]

    def test_stable_for_equal_keys(self):
        """'Alfa' and 'ALFA' compare equal and keep their input order."""
        ids = [f["id_proveedor"] for f in ordenar(FILAS, SortConfig("proveedor", "asc"))]
        assert ids == [2, 4, 1, 3]
        ids = [f["id_proveedor"] for f in ordenar(FILAS, SortConfig("proveedor", "desc"))]
        assert ids == [3, 1, 2, 4]

    def test_descending_reverses_ascending_for_distinct_values(self):
        asc = ordenar(FILAS, SortConfig("id_proveedor", "asc"))
        desc = ordenar(FILAS, SortConfig("id_proveedor", "desc"))
        assert desc == list(reversed(asc))

    def test_idempotent(self):
        sort = SortConfig("ciudad", "asc")
        assert ordenar(ordenar(FILAS, sort), sort) == ordenar(FILAS, sort)

    def test_missing_key_keeps_order(self):
        assert ordenar(FILAS, SortConfig("no_existe", "asc")) == FILAS


class TestFiltrar:
    """Tests for filtrar."""

    def test_empty_term_keeps_everything(self):
        assert filtrar(FILAS, "", ["proveedor"]) == FILAS

    def test_case_insensitive_substring(self):
        ids = [f["id_proveedor"] for f in filtrar(FILAS, "alf", ["proveedor"])]
        assert ids == [2, 4]

    def test_any_key_matches(self):
        ids = [f["id_proveedor"] for f in filtrar(FILAS, "zapo", ["proveedor", "ciudad"])]
        assert ids == [2]

    def test_non_string_values_are_stringified(self):
        ids = [f["id_proveedor"] for f in filtrar(FILAS, "3", ["id_proveedor"])]
        assert ids == [3]

    def test_none_never_matches(self):
        assert filtrar(FILAS, "none", ["ciudad"]) == []

    def test_no_match(self):
        assert filtrar(FILAS, "zzz", ["proveedor", "ciudad"]) == []


class TestIdFila:
    """Tests for id_fila."""

    def test_first_natural_key(self):
        assert id_fila({"id_contrato": 7, "codigo": 5}, 0) == 7

    def test_falsy_key_is_skipped(self):
        assert id_fila({"id_contrato": 0, "codigo": 5}, 0) == 5

    def test_user_rud(self):
        assert id_fila({"rud": 501}, 0) == 501

    def test_falls_back_to_position(self):
        assert id_fila({"nombre": "x"}, 3) == 3


class TestTabla:
    """Tests for the stateful Tabla."""

    def test_sort_then_filter(self):
        tabla = Tabla(TABLAS["proveedores"], FILAS)
        tabla.solicitar_orden("proveedor")
        tabla.solicitar_orden("proveedor")
        tabla.buscar("a")
        ordenadas = ordenar(FILAS, SortConfig("proveedor", "desc"))
        esperadas = [f for f in ordenadas if f in tabla.filas]
        assert tabla.filas == esperadas
        assert tabla.sort == SortConfig("proveedor", "desc")

    def test_clearing_search_restores_rows(self):
        tabla = Tabla(TABLAS["proveedores"], FILAS)
        tabla.buscar("zzz")
        assert tabla.filas == []
        tabla.buscar("")
        assert len(tabla.filas) == len(FILAS)

    def test_filas_is_repeatable(self):
        tabla = Tabla(TABLAS["proveedores"], FILAS)
        tabla.solicitar_orden("ciudad")
        assert tabla.filas == tabla.filas


class TestConstruirTabla:
    """Tests for construir_tabla over the joined dataset."""

    def test_contracts_render_supplier_and_money(self, vista):
        tabla = construir_tabla(TABLAS["contratos"], vista)
        primera = tabla.filas[0]
        assert primera.id == 1
        assert primera.celdas["proveedor_fk"] == "ALFA"
        assert primera.celdas["monto_maximo"] == "$100.00"

    def test_dangling_supplier_shows_raw_key(self, vista):
        tabla = construir_tabla(TABLAS["contratos"], vista)
        assert tabla.filas[2].celdas["proveedor_fk"] == "FANTASMA"

    def test_price_marker_is_kept(self, vista):
        tabla = construir_tabla(TABLAS["productos"], vista)
        precios = [f.celdas["precio_medio"] for f in tabla.filas]
        assert precios == ["$28.50", "SIN PRECIO"]

    def test_users_do_not_expose_passwords(self, vista):
        tabla = construir_tabla(TABLAS["usuarios"], vista)
        assert [c.key for c in tabla.columnas] == ["rud", "nombre", "rol"]
        assert tabla.filas[0].id == 501

    def test_header_state(self, vista):
        tabla = construir_tabla(TABLAS["contratos"], vista, SortConfig("monto_maximo", "asc"))
        columnas = {c.key: c for c in tabla.columnas}
        assert columnas["monto_maximo"].activa
        assert columnas["monto_maximo"].direccion == "asc"
        assert columnas["monto_maximo"].siguiente_direccion == "desc"
        assert not columnas["contrato"].activa
        assert columnas["contrato"].direccion is None
        assert columnas["contrato"].siguiente_direccion == "asc"

    def test_totals(self, vista):
        tabla = construir_tabla(TABLAS["contratos"], vista, termino="alfa")
        assert tabla.total == 2
        assert tabla.total_sin_filtro == 4
        assert tabla.busqueda == "alfa"


class TestTablasEndpoints:
    """Tests for GET /tablas and GET /tablas/{vista}."""

    def test_list_views(self, client, base_url):
        response = client.get(f"{base_url}/tablas")
        assert response.status_code == 200
        vistas = [v["vista"] for v in response.json()]
        assert vistas == ["contratos", "productos", "proveedores", "usuarios", "licitaciones"]

    def test_default_order(self, client, base_url):
        response = client.get(f"{base_url}/tablas/contratos")
        assert response.status_code == 200
        data = response.json()
        assert [f["celdas"]["contrato"] for f in data["filas"]] == ["C-1", "C-2", "C-3", "C-4"]
        assert data["orden"] is None

    def test_sorted_descending(self, client, base_url):
        response = client.get(
            f"{base_url}/tablas/contratos?sort_key=monto_maximo&sort_dir=desc"
        )
        assert response.status_code == 200
        data = response.json()
        assert [f["celdas"]["monto_maximo"] for f in data["filas"]] == [
            "$1,000.00", "$200.00", "$100.00", "$50.00",
        ]
        assert data["orden"] == {"key": "monto_maximo", "direccion": "desc"}

    def test_search(self, client, base_url):
        response = client.get(f"{base_url}/tablas/proveedores?q=PAPEL")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["filas"][0]["celdas"]["proveedor"] == "beta"

    def test_search_without_match(self, client, base_url):
        response = client.get(f"{base_url}/tablas/productos?q=zzz")
        assert response.status_code == 200
        assert response.json()["filas"] == []

    def test_view_name_is_case_insensitive(self, client, base_url):
        response = client.get(f"{base_url}/tablas/Usuarios")
        assert response.status_code == 200
        assert response.json()["vista"] == "usuarios"

    def test_unknown_view(self, client, base_url):
        response = client.get(f"{base_url}/tablas/no_existe")
        assert response.status_code == 404

    def test_unknown_sort_key(self, client, base_url):
        response = client.get(f"{base_url}/tablas/contratos?sort_key=contrasena")
        assert response.status_code == 400

    def test_invalid_sort_direction(self, client, base_url):
        response = client.get(f"{base_url}/tablas/contratos?sort_key=contrato&sort_dir=up")
        assert response.status_code == 422
