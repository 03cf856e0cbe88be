"""
Particionado de filas en lotes para inserts en bloque.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def chunk(rows: Sequence[T], size: int) -> list[list[T]]:
    """
    Divide `rows` en lotes contiguos de largo `size` (el último puede ser menor).

    - Conserva el orden original dentro y entre lotes
    - Sin filas no hay lotes (no se genera un lote vacío)
    """
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise ValueError(f"El tamaño de lote debe ser un entero positivo: {size!r}")
    return [list(rows[i : i + size]) for i in range(0, len(rows), size)]
