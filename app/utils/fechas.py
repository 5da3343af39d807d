"""
Date parsing for the free-text validity dates stored in the dataset.

Contract dates arrive as Spanish long dates (``"15 de enero de 2024"``),
as ``dd/mm/yyyy`` strings, or occasionally in some other textual form.
``parse_fecha`` resolves all three and returns ``None`` for anything it
cannot turn into a valid calendar date; it never raises.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

import pandas as pd

from app.utils.constants import MESES

logger = logging.getLogger(__name__)

# Leading integer, same leniency as a JS ``parseInt`` ("15 " or "15h" → 15)
_ENTERO_RE = re.compile(r"^\s*([+-]?\d+)")


def _entero(texto: str) -> int | None:
    match = _ENTERO_RE.match(texto)
    if match is None:
        return None
    return int(match.group(1))


def _construir(anio: int | None, mes: int | None, dia: int | None) -> datetime | None:
    if anio is None or mes is None or dia is None:
        return None
    try:
        return datetime(anio, mes, dia)
    except ValueError:
        return None


def parse_fecha(texto: str | None) -> datetime | None:
    """Parse a dataset date string into a naive ``datetime`` at midnight.

    Resolution order:

    1. ``"<dia> de <mes> de <año>"`` with a Spanish month name.
    2. ``"<dia>/<mes>/<año>"`` with a 1-based month.
    3. Generic parsing through ``pandas.to_datetime`` (day-first).

    Text that matches pattern 1 or 2 is resolved by that pattern alone:
    an out-of-range day or month yields ``None`` and is never handed to
    the generic parser.

    Args:
        texto: Raw date text from the dataset.

    Returns:
        The parsed datetime, or ``None`` when the text is empty or does not
        describe a valid date.
    """
    if not isinstance(texto, str) or not texto.strip():
        return None

    partes = texto.lower().split(" de ")
    if len(partes) == 3:
        dia, mes, anio = _entero(partes[0]), MESES.get(partes[1].strip()), _entero(partes[2])
        if None not in (dia, mes, anio):
            return _construir(anio, mes, dia)

    # Three numeric parts are always day/month/year; never re-read month-first
    partes = texto.split("/")
    if len(partes) == 3:
        dia, mes, anio = (_entero(parte) for parte in partes)
        if None not in (dia, mes, anio):
            return _construir(anio, mes, dia)

    ts = pd.to_datetime(texto, dayfirst=True, errors="coerce")
    if pd.isna(ts):
        logger.debug("parse_fecha: unparseable date %r", texto)
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.to_pydatetime()
