"""Generate a synthetic procurement dataset as JSON and as an Excel workbook.

Both files carry the same six tables (articulos, proveedores, contratos,
adjudicados, licitaciones, usuarios) in the layout the dataset loader
expects: a JSON object with one key per table, and a workbook with one
sheet per table whose first row holds the column names.

A few contracts deliberately reference a supplier that is not registered
and a few awards reference an unknown article code, so the dashboard's
fallback rendering can be exercised with the generated data.

Usage:
    py generate_example_data.py [--out data] [--contratos 40] [--seed 42]
"""
from __future__ import annotations

import argparse
import json
import random
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

DEFAULT_OUTPUT_DIR = Path(__file__).resolve().parent / "data"

# Shared styling
BLUE_FILL = PatternFill(fill_type="solid", fgColor="3b82f6")
WHITE_FONT = Font(bold=True, color="FFFFFF", size=10, name="Calibri")
HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
THIN_BORDER = Border(
    left=Side(style="thin", color="CBD5E1"),
    right=Side(style="thin", color="CBD5E1"),
    top=Side(style="thin", color="CBD5E1"),
    bottom=Side(style="thin", color="CBD5E1"),
)

# Dummy data pools
DESCRIPCIONES = [
    ("ARROZ BLANCO GRANO LARGO", "KILOGRAMO", 22101),
    ("FRIJOL NEGRO", "KILOGRAMO", 22101),
    ("ACEITE VEGETAL COMESTIBLE", "LITRO", 22101),
    ("AZUCAR ESTANDAR", "KILOGRAMO", 22101),
    ("JITOMATE SALADET", "KILOGRAMO", 22101),
    ("PAPEL BOND CARTA", "PAQUETE", 21101),
    ("TONER IMPRESORA LASER", "PIEZA", 21401),
    ("GUANTES DE NITRILO", "CAJA", 25401),
    ("CUBREBOCAS TRICAPA", "CAJA", 25401),
    ("GEL ANTIBACTERIAL", "LITRO", 25401),
    ("DETERGENTE EN POLVO", "KILOGRAMO", 21601),
    ("CLORO", "LITRO", 21601),
]
PROVEEDORES = [
    ("COME FRUTAS Y VERDURAS, S.A DE C.V", "GUADALAJARA", "ABARROTES"),
    ("DISTRIBUIDORA DEL BAJIO, S.A. DE C.V.", "LEON", "ABARROTES"),
    ("PAPELERIA CORPORATIVA DE OCCIDENTE", "ZAPOPAN", "PAPELERIA"),
    ("SUMINISTROS MEDICOS DEL CENTRO", "QUERETARO", "MATERIAL DE CURACION"),
    ("LIMPIEZA INTEGRAL MX", "TLAQUEPAQUE", "LIMPIEZA"),
    ("ALIMENTOS SELECTOS DE JALISCO", "GUADALAJARA", "ABARROTES"),
]
PROVEEDORES_NO_REGISTRADOS = ["COMERCIALIZADORA SIN REGISTRO"]
MESES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]
ROLES = ["ADMINISTRADOR", "COMPRAS", "ALMACEN", "CONSULTA"]
NOMBRES = [
    "MARIA GUADALUPE HERNANDEZ", "JOSE LUIS MARTINEZ", "ANA SOFIA LOPEZ",
    "CARLOS ALBERTO RAMIREZ", "LUZ MARIA GONZALEZ",
]


def _fecha_larga(dia: int, mes: int, anio: int) -> str:
    return f"{dia} de {MESES[mes - 1]} de {anio}"


def _fecha_corta(dia: int, mes: int, anio: int) -> str:
    return f"{dia:02d}/{mes:02d}/{anio}"


def gen_articulos() -> list[dict]:
    articulos = []
    for i, (descripcion, unidad, partida) in enumerate(DESCRIPCIONES):
        precio: float | str = round(random.uniform(8, 950), 2)
        if i % 7 == 6:
            precio = "SIN PRECIO"
        articulos.append({
            "codigo": 1000 + i,
            "descripcion_articulo": descripcion,
            "unidad_medida": unidad,
            "partida_especifica": partida,
            "precio_medio": precio,
            "ultima_fecha": _fecha_corta(random.randint(1, 28), random.randint(1, 12), 2025),
            "estatus": "ACTIVO",
            "imagen_producto": None,
        })
    return articulos


def gen_proveedores() -> list[dict]:
    return [
        {
            "id_proveedor": i + 1,
            "proveedor": nombre,
            "domicilio": f"AV. PRINCIPAL {random.randint(100, 3000)}",
            "ciudad": ciudad,
            "correo_electronico": None,
            "telefono": f"33{random.randint(10000000, 99999999)}",
            "giro_comercial": giro,
            "logotipo_imagen": "",
        }
        for i, (nombre, ciudad, giro) in enumerate(PROVEEDORES)
    ]


def gen_licitaciones() -> list[dict]:
    licitaciones = []
    for i, anio in enumerate((2023, 2024, 2025)):
        licitaciones.append({
            "id_licitacion": i + 1,
            "licitacion": f"LA-14-J2F-{anio}-{i + 1:03d}",
            "denominacion": f"ADQUISICION DE INSUMOS {anio}",
            "bases_pdf": None,
            "fecha_convocatoria": _fecha_corta(15, 1, anio),
            "aclaracion_dudas_pdf": None,
            "fecha_dudas": _fecha_corta(22, 1, anio),
            "apertura_propuestas_pdf": None,
            "fecha_apertura": _fecha_corta(5, 2, anio),
            "acta_fallo_pdf": None,
            "fecha_fallo": _fecha_corta(12, 2, anio),
        })
    return licitaciones


def gen_contratos(total: int, licitaciones: list[dict]) -> list[dict]:
    nombres = [p[0] for p in PROVEEDORES] + PROVEEDORES_NO_REGISTRADOS
    contratos = []
    for i in range(total):
        licitacion = licitaciones[i % len(licitaciones)]
        anio = int(licitacion["licitacion"].split("-")[3])
        inicio = _fecha_larga(1, 3, anio)
        # Mix both date styles, plus the odd unparseable value
        if i % 11 == 10:
            fin = "POR DEFINIR"
        elif i % 2:
            fin = _fecha_larga(31, 12, anio + random.randint(0, 2))
        else:
            fin = _fecha_corta(31, 12, anio + random.randint(0, 2))
        contratos.append({
            "id_contrato": i + 1,
            "licitacion_fk": licitacion["licitacion"],
            "contrato": f"CONT-{anio}-{i + 1:03d}",
            "proveedor_fk": random.choice(nombres),
            "monto_maximo": round(random.uniform(50_000, 2_500_000), 2),
            "inicio_vigencia": inicio,
            "fin_vigencia": fin,
        })
    return contratos


def gen_adjudicados(contratos: list[dict], articulos: list[dict]) -> list[dict]:
    codigos = [a["codigo"] for a in articulos] + [9999]
    adjudicados = []
    for contrato in contratos:
        for codigo in random.sample(codigos, k=random.randint(1, 4)):
            maxima = random.randint(100, 5000)
            consumida = random.randint(0, maxima)
            precio = round(random.uniform(8, 950), 2)
            adjudicados.append({
                "id_adjudicado": len(adjudicados) + 1,
                "contrato_fk": contrato["contrato"],
                "codigo_fk": codigo,
                "cantidad_minima": maxima // 10,
                "cantidad_maxima": maxima,
                "cantidad_consumida": consumida,
                "cantidad_disponible": maxima - consumida,
                "estatus_cantidad": "DISPONIBLE" if consumida < maxima else "AGOTADO",
                "precio_unitario": precio,
                "iva": 0.16,
                "ieps": 0.0,
                "importe_maximo": round(precio * maxima, 2),
            })
    return adjudicados


def gen_usuarios() -> list[dict]:
    return [
        {
            "rud": 500 + i,
            "nombre": nombre,
            "correo_electronico": None,
            "rol": ROLES[i % len(ROLES)],
        }
        for i, nombre in enumerate(NOMBRES)
    ]


def write_json(dataset: dict[str, list[dict]], path: Path) -> None:
    path.write_text(json.dumps(dataset, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"  {path.name} OK")


def write_excel(dataset: dict[str, list[dict]], path: Path) -> None:
    wb = Workbook()
    wb.remove(wb.active)
    for tabla, filas in dataset.items():
        ws = wb.create_sheet(tabla)
        if not filas:
            continue
        cols = list(filas[0].keys())
        for col_idx, name in enumerate(cols, 1):
            cell = ws.cell(row=1, column=col_idx, value=name)
            cell.font = WHITE_FONT
            cell.fill = BLUE_FILL
            cell.alignment = HEADER_ALIGN
            cell.border = THIN_BORDER
        for r, fila in enumerate(filas, 2):
            for col_idx, name in enumerate(cols, 1):
                ws.cell(row=r, column=col_idx, value=fila.get(name))
    wb.save(str(path))
    print(f"  {path.name} OK")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--out", type=Path, default=DEFAULT_OUTPUT_DIR)
    parser.add_argument("--contratos", type=int, default=40)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    random.seed(args.seed)  # Reproducible
    args.out.mkdir(parents=True, exist_ok=True)
    print(f"Generating example dataset in: {args.out}")

    articulos = gen_articulos()
    licitaciones = gen_licitaciones()
    contratos = gen_contratos(args.contratos, licitaciones)
    dataset = {
        "articulos": articulos,
        "proveedores": gen_proveedores(),
        "contratos": contratos,
        "adjudicados": gen_adjudicados(contratos, articulos),
        "licitaciones": licitaciones,
        "usuarios": gen_usuarios(),
    }

    write_json(dataset, args.out / "ejemplo_dataset.json")
    write_excel(dataset, args.out / "ejemplo_dataset.xlsx")
    print("\nDone!")


if __name__ == "__main__":
    main()
