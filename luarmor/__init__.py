"""Cliente tipado para a API v3 da Luarmor."""

from .client import AsyncLuarmorClient, LuarmorClient
from .endpoint import Endpoint
from .envelope import Envelope, RawResponse, finalise, parse_envelope
from .errors import (
    LuarmorAPIError,
    LuarmorClientError,
    LuarmorSerializationError,
    LuarmorTransportError,
    SettingsError,
)
from .messages import Message, MessageKind, parse_message
from .query import DEFAULT_BASE_URL, aquery, prepare_request, query
from .settings import LuarmorSettings, load_settings
from .transport import HttpxTransport, PreparedRequest, RequestsTransport

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_BASE_URL",
    "AsyncLuarmorClient",
    "Endpoint",
    "Envelope",
    "HttpxTransport",
    "LuarmorAPIError",
    "LuarmorClient",
    "LuarmorClientError",
    "LuarmorSerializationError",
    "LuarmorSettings",
    "LuarmorTransportError",
    "Message",
    "MessageKind",
    "PreparedRequest",
    "RawResponse",
    "RequestsTransport",
    "SettingsError",
    "aquery",
    "finalise",
    "load_settings",
    "parse_envelope",
    "parse_message",
    "prepare_request",
    "query",
]
