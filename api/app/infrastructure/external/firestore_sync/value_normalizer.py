"""
Normalización de valores Firestore a JSON aceptable por BigQuery.

Reglas (en orden de prioridad):
- None -> None
- Timestamps (datetime, objetos con to_datetime(), pares seconds/nanoseconds)
  -> ISO8601 UTC o None si el instante no es válido
- listas -> recursivo por elemento
- mapas -> recursivo por llave, sin descartar llaves
- bool / int / str / float finito -> sin cambios
- cualquier otro valor -> str(valor)

La normalización nunca levanta excepciones: un campo malformado no puede
abortar una corrida de sync.

Strings y números NO se interpretan como fechas dentro del normalizador
recursivo. Eso solo ocurre en `timestamp_to_iso`, usado al leer el
detalle de una orden.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from .types import (
    EpochValue,
    NativeInstant,
    SecondsPair,
    TimestampInput,
    datetime_from_epoch_ms,
    isoformat_z,
    optional_str,
)

_CONVERSION_METHODS = ("to_datetime", "ToDatetime")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _seconds_pair_from_mapping(value: Mapping) -> Optional[SecondsPair]:
    for seconds_key, nanos_key in (("seconds", "nanoseconds"), ("_seconds", "_nanoseconds")):
        if seconds_key not in value:
            continue
        # Un mapa con otras llaves es un objeto de negocio, no un timestamp.
        if not set(value.keys()) <= {seconds_key, nanos_key}:
            continue
        seconds = value[seconds_key]
        nanos = value.get(nanos_key, 0)
        if nanos is None:
            nanos = 0
        if _is_int(seconds) and _is_int(nanos):
            return SecondsPair(seconds=seconds, nanoseconds=nanos)
    return None


def classify_timestamp(value: Any, *, allow_epoch: bool = False) -> Optional[TimestampInput]:
    """
    Clasifica un valor como alguna variante de timestamp.

    Args:
        value: Valor crudo de Firestore
        allow_epoch: Si True, strings y números se clasifican como EpochValue

    Returns:
        La variante correspondiente o None si el valor no es un timestamp
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return NativeInstant(value)
    if any(callable(getattr(value, name, None)) for name in _CONVERSION_METHODS):
        return NativeInstant(value)
    if isinstance(value, Mapping):
        return _seconds_pair_from_mapping(value)
    if allow_epoch and (isinstance(value, (str, float)) or _is_int(value)):
        return EpochValue(value)
    return None


def _convert_native(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    for name in _CONVERSION_METHODS:
        method = getattr(value, name, None)
        if callable(method):
            return method()
    raise TypeError(f"{type(value).__name__} no expone conversion a datetime")


def _parse_epoch(raw: Any) -> Optional[datetime]:
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if isinstance(raw, float) and not math.isfinite(raw):
        return None
    try:
        return datetime_from_epoch_ms(math.floor(raw))
    except (OverflowError, ValueError, TypeError):
        return None


def _to_iso(ts: TimestampInput) -> Optional[str]:
    """Convierte una variante de timestamp a ISO8601 o None si no es válida."""
    if isinstance(ts, SecondsPair):
        ms = ts.seconds * 1000 + ts.nanoseconds // 1_000_000
        try:
            return isoformat_z(datetime_from_epoch_ms(ms))
        except OverflowError:
            return None

    if isinstance(ts, EpochValue):
        parsed = _parse_epoch(ts.raw)
        return isoformat_z(parsed) if parsed is not None else None

    converted = _convert_native(ts.value)
    if not isinstance(converted, datetime):
        return None
    try:
        return isoformat_z(converted)
    except (OverflowError, ValueError):
        return None


def timestamp_to_iso(value: Any) -> Optional[str]:
    """
    Convierte cualquier representación de timestamp a ISO8601.

    A diferencia de `normalize_value`, acepta strings ISO8601 y números
    (epoch en milisegundos). Retorna None si no se puede interpretar.
    """
    try:
        if not value:
            return None
        ts = classify_timestamp(value, allow_epoch=True)
        return _to_iso(ts) if ts is not None else None
    except Exception:
        return None


def normalize_value(value: Any) -> Any:
    """
    Normaliza un valor Firestore a JSON seguro para BigQuery.

    Función total: nunca levanta excepciones.
    """
    try:
        return _normalize(value, frozenset())
    except RecursionError:
        return None


def _normalize(value: Any, path: frozenset) -> Any:
    if value is None:
        return None

    # bool/int/str van antes que la clasificación: no son timestamps aquí.
    if isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None

    try:
        ts = classify_timestamp(value)
    except RecursionError:
        raise
    except Exception:
        # getattr puede levantar algo distinto de AttributeError (properties)
        return optional_str(value)
    if ts is not None:
        try:
            return _to_iso(ts)
        except RecursionError:
            raise
        except Exception:
            return optional_str(value)

    if isinstance(value, (list, tuple, Mapping)):
        if id(value) in path:
            # referencia cíclica
            return None
        inner = path | {id(value)}
        if isinstance(value, Mapping):
            return {str(k): _normalize(v, inner) for k, v in value.items()}
        return [_normalize(v, inner) for v in value]

    return optional_str(value)
