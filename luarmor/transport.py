"""Transportes HTTP usados pelo cliente.

O envio bloqueante usa ``requests``; o não bloqueante usa
``httpx.AsyncClient``. Ambos devolvem :class:`RawResponse` e convertem
falhas de rede em :class:`LuarmorTransportError`. A interpretação da
resposta fica a cargo de :func:`luarmor.envelope.finalise`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

import httpx
import requests

from .envelope import RawResponse
from .errors import LuarmorTransportError

__all__ = [
    "DEFAULT_TIMEOUT",
    "AsyncTransport",
    "HttpxTransport",
    "PreparedRequest",
    "RequestsTransport",
    "SyncTransport",
]

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    url: str
    params: List[Tuple[str, str]] = field(default_factory=list)
    json: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)


class SyncTransport(Protocol):
    def send(self, request: PreparedRequest) -> RawResponse:
        """Executa o pedido e devolve a resposta em bruto."""


class AsyncTransport(Protocol):
    async def send(self, request: PreparedRequest) -> RawResponse:
        """Executa o pedido e devolve a resposta em bruto."""


class RequestsTransport:
    """Transporte bloqueante sobre uma ``requests.Session`` reutilizável."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, request: PreparedRequest) -> RawResponse:
        try:
            response = self.session.request(
                request.method,
                request.url,
                params=request.params or None,
                json=request.json,
                headers=dict(request.headers),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise LuarmorTransportError(
                f"Não foi possível contactar a API da Luarmor: {exc}"
            ) from exc

        return RawResponse(
            status_code=response.status_code,
            body=response.content or b"",
            url=response.url or request.url,
        )

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class HttpxTransport:
    """Transporte assíncrono sobre um ``httpx.AsyncClient``.

    Um cliente injectado mantém a sua própria configuração de timeout e não
    é fechado por :meth:`aclose`.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, request: PreparedRequest) -> RawResponse:
        try:
            response = await self.client.request(
                request.method,
                request.url,
                params=request.params or None,
                json=request.json,
                headers=dict(request.headers),
            )
        except httpx.HTTPError as exc:
            raise LuarmorTransportError(
                f"Não foi possível contactar a API da Luarmor: {exc}"
            ) from exc

        return RawResponse(
            status_code=response.status_code,
            body=response.content or b"",
            url=str(response.url),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
