"""Conversão dos valores-sentinela usados pela API.

O servidor usa ``""`` para campos ausentes, números negativos para datas que
nunca chegam e ``0``/``1`` para booleanos. Estas funções traduzem esses
valores para tipos Python explícitos.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

__all__ = [
    "number_as_bool",
    "optional_string",
    "parse_expiration",
    "parse_timestamp",
    "require_mapping",
    "to_unix_timestamp",
]


def require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"Esperava um objecto JSON em {what}, recebido {type(value).__name__}.")
    return value


def optional_string(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def number_as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return int(value) != 0


def parse_timestamp(value: Any) -> datetime:
    """Converte segundos Unix (número ou texto numérico) em ``datetime`` UTC."""

    if isinstance(value, bool) or value is None:
        raise ValueError(f"Timestamp inválido: {value!r}")
    if isinstance(value, str):
        value = float(value.strip())
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"Timestamp fora do intervalo suportado: {value!r}") from exc


def parse_expiration(value: Any) -> Optional[datetime]:
    """Como :func:`parse_timestamp`, mas valores negativos significam "nunca"."""

    if value is None:
        return None
    seconds = float(value.strip()) if isinstance(value, str) else value
    if seconds < 0:
        return None
    return parse_timestamp(seconds)


def to_unix_timestamp(value: Union[datetime, int]) -> int:
    """Serializa uma data para segundos Unix; inteiros passam sem alteração."""

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    return int(value)
