"""Execução de um :class:`Endpoint` sobre um transporte.

``query`` e ``aquery`` diferem apenas na forma de esperar pela resposta;
a construção do pedido e a leitura do envelope são partilhadas.
"""

from __future__ import annotations

import logging
from typing import Any

from .endpoint import Endpoint
from .envelope import RawResponse, finalise
from .errors import LuarmorClientError, LuarmorTransportError
from .transport import AsyncTransport, PreparedRequest, SyncTransport

__all__ = ["DEFAULT_BASE_URL", "aquery", "prepare_request", "query"]

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.luarmor.net"


def prepare_request(endpoint: Endpoint, *, base_url: str, api_key: str) -> PreparedRequest:
    """Monta o pedido HTTP com o cabeçalho ``Authorization`` igual à chave."""

    base = (base_url or "").rstrip("/")
    if not base:
        raise ValueError("O URL base da API da Luarmor não foi configurado.")

    headers = {"Accept": "application/json", "Authorization": api_key}
    body = endpoint.body()
    if body is not None:
        headers["Content-Type"] = "application/json"

    return PreparedRequest(
        method=endpoint.method,
        url=f"{base}{endpoint.path()}",
        params=list(endpoint.query_params()),
        json=body,
        headers=headers,
    )


def _loggable_path(endpoint: Endpoint, api_key: str) -> str:
    path = endpoint.path()
    return path.replace(api_key, "***") if api_key else path


def _complete(endpoint: Endpoint, response: RawResponse, path: str) -> Any:
    logger.debug("Luarmor %s %s respondeu %s", endpoint.method, path, response.status_code)
    try:
        return finalise(endpoint, response)
    except LuarmorClientError as exc:
        logger.warning(
            "Luarmor recusou %s %s: %s (%s)",
            endpoint.method,
            path,
            exc.message.raw,
            exc.kind.value,
        )
        raise
    except LuarmorTransportError:
        logger.warning(
            "Resposta inválida da Luarmor para %s %s (estado %s)",
            endpoint.method,
            path,
            response.status_code,
        )
        raise


def query(
    endpoint: Endpoint,
    transport: SyncTransport,
    *,
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
) -> Any:
    request = prepare_request(endpoint, base_url=base_url, api_key=api_key)
    path = _loggable_path(endpoint, api_key)
    try:
        response = transport.send(request)
    except LuarmorTransportError:
        logger.warning("Falha de rede em %s %s", endpoint.method, path)
        raise
    return _complete(endpoint, response, path)


async def aquery(
    endpoint: Endpoint,
    transport: AsyncTransport,
    *,
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
) -> Any:
    request = prepare_request(endpoint, base_url=base_url, api_key=api_key)
    path = _loggable_path(endpoint, api_key)
    try:
        response = await transport.send(request)
    except LuarmorTransportError:
        logger.warning("Falha de rede em %s %s", endpoint.method, path)
        raise
    return _complete(endpoint, response, path)
