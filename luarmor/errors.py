"""Hierarquia de erros do cliente Luarmor."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .messages import Message, MessageKind

if TYPE_CHECKING:
    from .envelope import RawResponse

__all__ = [
    "LuarmorAPIError",
    "LuarmorClientError",
    "LuarmorSerializationError",
    "LuarmorTransportError",
    "SettingsError",
]


class LuarmorAPIError(RuntimeError):
    """Erro base lançado quando a API da Luarmor não conclui um pedido."""


class LuarmorTransportError(LuarmorAPIError):
    """Falha de rede, resposta vazia com estado de erro ou envelope sem dados.

    ``response`` fica disponível sempre que o servidor chegou a responder.
    """

    def __init__(self, detail: str, response: Optional["RawResponse"] = None) -> None:
        super().__init__(detail)
        self.response = response

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None


class LuarmorClientError(LuarmorAPIError):
    """O servidor respondeu com ``success=false``."""

    def __init__(self, message: Message, status_code: Optional[int] = None) -> None:
        super().__init__(str(message))
        self.message = message
        self.status_code = status_code

    @property
    def kind(self) -> MessageKind:
        return self.message.kind


class LuarmorSerializationError(LuarmorAPIError, ValueError):
    """O corpo da resposta não tem o formato esperado."""


class SettingsError(RuntimeError):
    """Erro lançado quando a configuração do cliente é inválida ou inexistente."""
