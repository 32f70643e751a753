"""Envelope ``{success, message, ...}`` comum a todas as respostas da API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from .errors import LuarmorClientError, LuarmorSerializationError, LuarmorTransportError
from .messages import Message

if TYPE_CHECKING:
    from .endpoint import Endpoint

__all__ = ["Envelope", "RawResponse", "finalise", "parse_envelope"]

_ENVELOPE_FIELDS = ("success", "message")


@dataclass(frozen=True)
class RawResponse:
    """Resposta HTTP tal como foi recebida, antes de qualquer interpretação."""

    status_code: int
    body: bytes
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Envelope:
    success: bool
    message: Message
    data: Optional[Dict[str, Any]]


def parse_envelope(body: bytes, *, require_success_flag: bool = True) -> Envelope:
    """Interpreta o corpo da resposta como envelope.

    Os campos do resultado vêm ao mesmo nível de ``success`` e ``message``;
    tudo o que sobra forma ``data``. Sem campos adicionais, ``data`` é
    ``None``.
    """

    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise LuarmorSerializationError("Resposta da Luarmor não contém JSON válido.") from exc

    if not isinstance(payload, dict):
        raise LuarmorSerializationError("Estrutura inesperada devolvida pela Luarmor.")

    success = payload.get("success", None if require_success_flag else True)
    if not isinstance(success, bool):
        raise LuarmorSerializationError("O campo 'success' está ausente ou não é booleano.")

    data = {key: value for key, value in payload.items() if key not in _ENVELOPE_FIELDS}
    return Envelope(
        success=success,
        message=Message.parse(payload.get("message")),
        data=data or None,
    )


def finalise(endpoint: "Endpoint", response: RawResponse) -> Any:
    """Converte a resposta num resultado tipado ou no erro correspondente."""

    if not response.body and not response.is_success and not endpoint.ignore_errors:
        raise LuarmorTransportError(
            f"A Luarmor respondeu {response.status_code} sem corpo.", response=response
        )

    envelope = parse_envelope(response.body, require_success_flag=endpoint.require_success_flag)
    if not envelope.success:
        raise LuarmorClientError(envelope.message, status_code=response.status_code)

    if not endpoint.expects_data:
        return envelope.message

    if envelope.data is None:
        raise LuarmorTransportError(
            "A Luarmor indicou sucesso mas não devolveu dados.", response=response
        )

    try:
        return endpoint.parse_response(envelope.data, envelope.message)
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise LuarmorSerializationError(
            f"Resposta da Luarmor com formato inesperado para {endpoint.method} {endpoint.path()}: {exc!r}"
        ) from exc
