"""Display helpers shared by the dashboard cards and table renderers."""

from __future__ import annotations

from typing import Any


def es_numero(valor: Any) -> bool:
    """True for ints and floats, excluding ``bool``."""
    return isinstance(valor, (int, float)) and not isinstance(valor, bool)


def format_moneda(valor: Any) -> str:
    """Format an amount in Mexican pesos the way the es-MX locale does.

    Args:
        valor: Amount to format. Non-numeric values render as ``"$0.00"``.

    Returns:
        A string such as ``"$1,234.50"`` or ``"-$80.00"``.
    """
    if not es_numero(valor):
        return "$0.00"
    signo = "-" if valor < 0 else ""
    return f"{signo}${abs(valor):,.2f}"
