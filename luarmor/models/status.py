"""Estado geral da API (``GET /status``)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..decoding import number_as_bool
from ..endpoint import Endpoint
from ..messages import Message

__all__ = ["ApiStatus", "ApiStatusResponse"]


@dataclass(frozen=True)
class ApiStatusResponse:
    version: str
    active: bool
    message: Message
    warning: bool
    warning_message: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], message: Message) -> "ApiStatusResponse":
        return cls(
            version=str(payload["version"]),
            active=number_as_bool(payload["active"]),
            message=message,
            warning=number_as_bool(payload.get("warning", False)),
            warning_message=str(payload.get("warning_message") or ""),
        )


@dataclass(frozen=True)
class ApiStatus(Endpoint):
    """Versão e disponibilidade da API. Não requer autenticação.

    Esta rota não envia ``success``; a ausência do campo conta como sucesso.
    """

    method = "GET"
    require_success_flag = False

    def path(self) -> str:
        return "/status"

    def parse_response(self, data: Mapping[str, Any], message: Message) -> ApiStatusResponse:
        return ApiStatusResponse.from_payload(data, message)
