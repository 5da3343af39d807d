"""
Pydantic v2 schemas for the procurement dataset.

Base records mirror the rows of the static dataset one-to-one.  Joined
records (``AdjudicadoConArticulo``, ``ContratoConProveedor``) extend them
with the references resolved by ``app.services.join_service``.

Every model is frozen: the dataset is loaded once and the join view is a
derived, read-only snapshot.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _fecha_a_texto(valor: Any) -> Any:
    """Normalise real date cells (Excel) to ``dd/mm/yyyy`` text."""
    if isinstance(valor, (datetime, date)):
        return valor.strftime("%d/%m/%Y")
    return valor


class _Registro(BaseModel):
    """Common config for dataset rows.

    Numbers are accepted for text columns because spreadsheet exports
    often store codes such as ``"001"`` as numeric cells.  Unknown columns
    are ignored.
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True, extra="ignore")


# ---------------------------------------------------------------------------
# Reference tables
# ---------------------------------------------------------------------------


class Articulo(_Registro):
    """Product catalogue entry.

    Attributes:
        codigo: Unique article code (join key for awards).
        descripcion_articulo: Product description.
        unidad_medida: Unit of measure, e.g. ``"KILOGRAMO"``.
        partida_especifica: Budget line the article is charged to.
        precio_medio: Average price, or a text marker such as ``"SIN PRECIO"``.
        ultima_fecha: Date the price was last updated (free text).
        estatus: Catalogue status.
        imagen_producto: Optional image reference.
    """

    codigo: int
    descripcion_articulo: str
    unidad_medida: str | None = None
    partida_especifica: int | None = None
    precio_medio: float | str | None = None
    ultima_fecha: str | None = None
    estatus: str | None = None
    imagen_producto: str | None = None

    @field_validator("ultima_fecha", mode="before")
    @classmethod
    def normalizar_fecha(cls, valor: Any) -> Any:
        return _fecha_a_texto(valor)


class Proveedor(_Registro):
    """Supplier registered in the catalogue.

    ``proveedor`` (the name) is the key contracts reference.
    """

    id_proveedor: int
    proveedor: str
    domicilio: str | None = None
    ciudad: str | None = None
    correo_electronico: str | None = None
    telefono: str | None = None
    giro_comercial: str | None = None
    logotipo_imagen: str | None = None


# ---------------------------------------------------------------------------
# Fact tables
# ---------------------------------------------------------------------------


class Contrato(_Registro):
    """Framework contract awarded to a supplier.

    Attributes:
        id_contrato: Primary key.
        licitacion_fk: Bidding process the contract came from.
        contrato: Contract code (join key for awards).
        proveedor_fk: Supplier name (join key to ``Proveedor.proveedor``).
        monto_maximo: Contract ceiling in MXN.
        inicio_vigencia: Validity start, free-text Spanish date.
        fin_vigencia: Validity end, free-text Spanish date.
    """

    id_contrato: int
    licitacion_fk: str | None = None
    contrato: str
    proveedor_fk: str
    monto_maximo: float = 0.0
    inicio_vigencia: str | None = None
    fin_vigencia: str | None = None

    @field_validator("inicio_vigencia", "fin_vigencia", mode="before")
    @classmethod
    def normalizar_fechas(cls, valor: Any) -> Any:
        return _fecha_a_texto(valor)


class Adjudicado(_Registro):
    """Awarded line item: one article within one contract."""

    id_adjudicado: int
    contrato_fk: str
    codigo_fk: int
    cantidad_minima: float = 0.0
    cantidad_maxima: float = 0.0
    cantidad_consumida: float = 0.0
    cantidad_disponible: float = 0.0
    estatus_cantidad: str | None = None
    precio_unitario: float = 0.0
    iva: float = 0.0
    ieps: float = 0.0
    importe_maximo: float = 0.0


class Licitacion(_Registro):
    """Bidding process metadata and its published documents."""

    id_licitacion: int
    licitacion: str
    denominacion: str | None = None
    bases_pdf: str | None = None
    fecha_convocatoria: str | None = None
    aclaracion_dudas_pdf: str | None = None
    fecha_dudas: str | None = None
    apertura_propuestas_pdf: str | None = None
    fecha_apertura: str | None = None
    acta_fallo_pdf: str | None = None
    fecha_fallo: str | None = None

    @field_validator(
        "fecha_convocatoria", "fecha_dudas", "fecha_apertura", "fecha_fallo", mode="before"
    )
    @classmethod
    def normalizar_fechas(cls, valor: Any) -> Any:
        return _fecha_a_texto(valor)


class Usuario(_Registro):
    """System user as shown in the users table.

    The dataset's ``contrasena`` column is dropped on load.
    """

    rud: int
    nombre: str
    correo_electronico: str | None = None
    rol: str | None = None


# ---------------------------------------------------------------------------
# Joined records
# ---------------------------------------------------------------------------


class AdjudicadoConArticulo(Adjudicado):
    """Award with its article resolved (``None`` when ``codigo_fk`` dangles)."""

    articulo: Articulo | None = None


class ContratoConProveedor(Contrato):
    """Contract with its supplier and awards resolved.

    ``proveedor`` is ``None`` when ``proveedor_fk`` matches no supplier;
    the raw key stays available in ``proveedor_fk``.
    """

    proveedor: Proveedor | None = None
    adjudicados: tuple[AdjudicadoConArticulo, ...] = ()

    @property
    def nombre_proveedor(self) -> str:
        """Resolved supplier name, falling back to the raw foreign key."""
        if self.proveedor is not None:
            return self.proveedor.proveedor
        return self.proveedor_fk


# ---------------------------------------------------------------------------
# Dataset containers
# ---------------------------------------------------------------------------


class DatasetBase(BaseModel):
    """Immutable snapshot of the static dataset as loaded."""

    articulos: tuple[Articulo, ...] = ()
    proveedores: tuple[Proveedor, ...] = ()
    contratos: tuple[Contrato, ...] = ()
    adjudicados: tuple[Adjudicado, ...] = ()
    licitaciones: tuple[Licitacion, ...] = ()
    usuarios: tuple[Usuario, ...] = ()

    model_config = ConfigDict(frozen=True)


class VistaDatos(BaseModel):
    """Denormalised view derived from a ``DatasetBase``."""

    articulos: tuple[Articulo, ...] = ()
    proveedores: tuple[Proveedor, ...] = ()
    contratos: tuple[ContratoConProveedor, ...] = ()
    adjudicados: tuple[AdjudicadoConArticulo, ...] = ()
    licitaciones: tuple[Licitacion, ...] = ()
    usuarios: tuple[Usuario, ...] = ()

    model_config = ConfigDict(frozen=True)


class ContratoDetalleResponse(BaseModel):
    """Single joined contract as returned by ``GET /api/contratos/{contrato}``."""

    contrato: ContratoConProveedor
    nombre_proveedor: str = Field(..., description="Proveedor resuelto o clave sin resolver.")
    proveedor_resuelto: bool
    total_adjudicados: int = Field(..., ge=0)
    importe_adjudicado: float = Field(..., description="Suma de importe_maximo de las partidas.")
