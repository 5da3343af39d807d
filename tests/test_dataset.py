"""
Tests for dataset loading, the join layer and the dataset store.
"""
import json

import pandas as pd
import pytest
from pydantic import ValidationError

from app.schemas.catalogo import Contrato, DatasetBase, Proveedor
from app.services.dataset_service import DatasetStore, cargar_dataset, dataset_desde_dict
from app.services.join_service import construir_vista, mapa_proveedores


class TestDatasetDesdeDict:
    """Tests for dataset_desde_dict."""

    def test_row_counts(self, base):
        assert len(base.articulos) == 2
        assert len(base.contratos) == 4
        assert len(base.adjudicados) == 3

    def test_missing_tables_load_empty(self, datos):
        base = dataset_desde_dict({"contratos": datos["contratos"]})
        assert base.proveedores == ()
        assert len(base.contratos) == 4

    def test_passwords_are_dropped(self, base):
        usuario = base.usuarios[0]
        assert "contrasena" not in usuario.model_dump()

    def test_numeric_text_cells_are_coerced(self):
        base = dataset_desde_dict({
            "proveedores": [{"id_proveedor": 1, "proveedor": "X", "telefono": 3312345678}],
        })
        assert base.proveedores[0].telefono == "3312345678"

    def test_invalid_row_raises(self):
        with pytest.raises(ValidationError):
            dataset_desde_dict({"contratos": [{"id_contrato": 1}]})

    def test_records_are_frozen(self, base):
        with pytest.raises(ValidationError):
            base.contratos[0].monto_maximo = 1


class TestCargarDataset:
    """Tests for cargar_dataset."""

    def test_json(self, tmp_path, datos):
        ruta = tmp_path / "dataset.json"
        ruta.write_text(json.dumps(datos), encoding="utf-8")
        base = cargar_dataset(ruta)
        assert len(base.contratos) == 4
        assert base.contratos[2].proveedor_fk == "FANTASMA"

    def test_excel_one_sheet_per_table(self, tmp_path, datos):
        ruta = tmp_path / "dataset.xlsx"
        with pd.ExcelWriter(ruta, engine="openpyxl") as writer:
            for tabla in ("articulos", "proveedores", "contratos", "adjudicados", "usuarios"):
                pd.DataFrame(datos[tabla]).to_excel(writer, sheet_name=tabla, index=False)
            pd.DataFrame([{"x": 1}]).to_excel(writer, sheet_name="notas", index=False)

        base = cargar_dataset(ruta)
        assert len(base.contratos) == 4
        assert len(base.adjudicados) == 3
        assert base.licitaciones == ()
        # Empty cells become None rather than NaN
        assert base.proveedores[0].correo_electronico is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            cargar_dataset(tmp_path / "no_existe.json")

    def test_unsupported_extension(self, tmp_path):
        ruta = tmp_path / "dataset.csv"
        ruta.write_text("a,b\n1,2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            cargar_dataset(ruta)

    def test_json_root_must_be_object(self, tmp_path):
        ruta = tmp_path / "dataset.json"
        ruta.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError):
            cargar_dataset(ruta)


class TestConstruirVista:
    """Tests for the contract/supplier/article join."""

    def test_supplier_resolved_by_name(self, vista):
        assert vista.contratos[0].proveedor is not None
        assert vista.contratos[0].proveedor.id_proveedor == 1

    def test_dangling_supplier(self, vista):
        contrato = vista.contratos[2]
        assert contrato.proveedor is None
        assert contrato.proveedor_fk == "FANTASMA"
        assert contrato.nombre_proveedor == "FANTASMA"

    def test_awards_grouped_by_contract(self, vista):
        por_codigo = {c.contrato: [a.id_adjudicado for a in c.adjudicados] for c in vista.contratos}
        assert por_codigo == {"C-1": [1, 2], "C-2": [3], "C-3": [], "C-4": []}

    def test_dangling_article(self, vista):
        adjudicados = vista.contratos[0].adjudicados
        assert adjudicados[0].articulo.descripcion_articulo == "ARROZ BLANCO"
        assert adjudicados[1].articulo is None
        assert adjudicados[1].codigo_fk == 9999

    def test_order_preserved(self, vista):
        assert [c.contrato for c in vista.contratos] == ["C-1", "C-2", "C-3", "C-4"]
        assert [a.id_adjudicado for a in vista.adjudicados] == [1, 2, 3]

    def test_award_totals_match(self, vista):
        """Every award lands in exactly one contract when its key matches."""
        total_contratos = sum(a.importe_maximo for c in vista.contratos for a in c.adjudicados)
        total_adjudicados = sum(a.importe_maximo for a in vista.adjudicados)
        assert total_contratos == total_adjudicados == 35

    def test_reference_tables_shared(self, base, vista):
        assert vista.articulos == base.articulos
        assert vista.usuarios == base.usuarios

    def test_duplicate_supplier_name_last_wins(self):
        proveedores = (
            Proveedor(id_proveedor=1, proveedor="ALFA"),
            Proveedor(id_proveedor=2, proveedor="ALFA"),
        )
        assert mapa_proveedores(proveedores)["ALFA"].id_proveedor == 2

    def test_empty_dataset(self):
        vista = construir_vista(DatasetBase())
        assert vista.contratos == ()

    def test_contract_without_awards_or_supplier(self):
        base = DatasetBase(
            contratos=(Contrato(id_contrato=1, contrato="X", proveedor_fk="NADIE"),),
        )
        contrato = construir_vista(base).contratos[0]
        assert contrato.proveedor is None
        assert contrato.adjudicados == ()


class TestDatasetStore:
    """Tests for the memoised join view."""

    def test_empty_by_default(self):
        assert DatasetStore().vista().contratos == ()

    def test_view_is_memoised(self, store):
        assert store.vista() is store.vista()

    def test_view_rebuilt_after_replace(self, store, datos):
        anterior = store.vista()
        store.reemplazar(dataset_desde_dict({"contratos": datos["contratos"][:1]}))
        nueva = store.vista()
        assert nueva is not anterior
        assert len(nueva.contratos) == 1

    def test_cargar(self, tmp_path, datos):
        ruta = tmp_path / "dataset.json"
        ruta.write_text(json.dumps(datos), encoding="utf-8")
        store = DatasetStore()
        store.cargar(ruta)
        assert len(store.vista().contratos) == 4
