"""
Tipos y utilidades puras para el pipeline Firestore -> BigQuery.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    Firestore devuelve datetimes con zona; los naive se asumen UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat_z(dt: datetime) -> str:
    """
    Serializa datetime a ISO8601 UTC con milisegundos y sufijo 'Z'.

    Ejemplo: 2023-11-14T22:13:20.500Z
    """
    dt_utc = ensure_utc(dt)
    return dt_utc.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def datetime_from_epoch_ms(ms: int) -> datetime:
    """
    Convierte milisegundos desde epoch a datetime UTC.

    Levanta OverflowError si el instante queda fuera del rango de datetime.
    """
    return EPOCH + timedelta(milliseconds=ms)


# ---------------------------------------------------------------------------
# Variantes de timestamp aceptadas
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NativeInstant:
    """datetime u objeto con conversión sin argumentos a datetime."""

    value: Any


@dataclass(frozen=True)
class SecondsPair:
    """Par (segundos, nanosegundos) como lo serializa Firestore."""

    seconds: int
    nanoseconds: int = 0


@dataclass(frozen=True)
class EpochValue:
    """String ISO8601 o número (epoch en milisegundos)."""

    raw: Union[str, int, float]


TimestampInput = Union[NativeInstant, SecondsPair, EpochValue]


# ---------------------------------------------------------------------------
# Entidades del pipeline
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceDocument:
    """Documento Firestore mínimo para sync."""

    id: str
    reference_path: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WarehouseRow:
    """
    Fila lista para insertar en BigQuery.

    - insert_id: id de deduplicación (siempre el id del documento)
    - json: campos normalizados + metadatos de sync
    """

    insert_id: str
    json: dict[str, Any]


@dataclass(frozen=True)
class InsertFailure:
    """
    Resultado fallido de un insert en bloque.

    - message: siempre presente
    - row_errors: errores por fila reportados por el warehouse (puede estar vacío)
    """

    message: str
    row_errors: list[dict[str, Any]] = field(default_factory=list)

    def descriptors(self) -> list[dict[str, Any]]:
        """Errores por fila o, si no hay, un único descriptor con el mensaje."""
        if self.row_errors:
            return list(self.row_errors)
        return [{"message": self.message}]


def optional_str(value: Any) -> Optional[str]:
    """str(value) que nunca falla: retorna None si la conversión levanta."""
    try:
        return str(value)
    except Exception:
        return None
