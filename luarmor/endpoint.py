"""Descrição de um pedido à API, independente do transporte."""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from .messages import Message

__all__ = ["Endpoint", "QueryParams", "compact_body", "format_bool"]

QueryParams = List[Tuple[str, str]]


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def compact_body(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Remove campos ``None`` antes de serializar o corpo."""

    return {key: value for key, value in fields.items() if value is not None}


class Endpoint:
    """Base para os descritores de cada operação.

    As subclasses são dataclasses imutáveis que definem ``method`` e
    ``path()`` e, quando necessário, ``query_params()``, ``body()`` e
    ``parse_response()``. Operações sem resultado próprio marcam
    ``expects_data = False`` e devolvem a :class:`Message` do servidor.
    """

    method: ClassVar[str] = "GET"
    expects_data: ClassVar[bool] = True
    require_success_flag: ClassVar[bool] = True
    ignore_errors: ClassVar[bool] = False

    def path(self) -> str:
        raise NotImplementedError

    def query_params(self) -> QueryParams:
        return []

    def body(self) -> Optional[Dict[str, Any]]:
        return None

    def parse_response(self, data: Mapping[str, Any], message: Message) -> Any:
        return message
