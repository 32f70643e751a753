"""Gestão de utilizadores (chaves) de um projecto.

Todas as operações exigem autenticação com a chave de API, excepto
:class:`UnblacklistUser`, que só precisa do ``unban_token`` do utilizador.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..decoding import (
    number_as_bool,
    optional_string,
    parse_expiration,
    require_mapping,
    to_unix_timestamp,
)
from ..endpoint import Endpoint, QueryParams, compact_body
from ..messages import Message

__all__ = [
    "NEVER_EXPIRES",
    "BlacklistUser",
    "CreateUser",
    "DeleteUser",
    "GetUsers",
    "IdentifierType",
    "LinkDiscordId",
    "ResetHwid",
    "UnblacklistUser",
    "UpdateUser",
    "User",
    "UserStatus",
]

# Valor aceite pelo servidor em ``auth_expire``/``ban_expire`` para "nunca".
NEVER_EXPIRES = -1

Timestamp = Union[datetime, int]


def _timestamp_or_none(value: Optional[Timestamp]) -> Optional[int]:
    return to_unix_timestamp(value) if value is not None else None


class UserStatus(str, Enum):
    """Estado de uma chave.

    ``ACTIVE``: o HWID está associado e a chave está activa.
    ``RESET``: o HWID foi limpo e será atribuído na próxima execução.
    ``BANNED``: a chave está na lista negra.
    """

    ACTIVE = "active"
    RESET = "reset"
    BANNED = "banned"
    UNKNOWN = "unknown"


class IdentifierType(str, Enum):
    HWID = "HWID"
    NONE = "none"


@dataclass(frozen=True)
class User:
    user_key: Optional[str]
    identifier: Optional[str]
    identifier_type: IdentifierType
    discord_id: Optional[str]
    status: UserStatus
    last_reset: Optional[datetime]
    total_resets: int
    # None quando a chave nunca expira.
    auth_expire: Optional[datetime]
    banned: bool
    ban_reason: Optional[str]
    ban_expire: Optional[datetime]
    unban_token: Optional[str]
    total_executions: int
    note: Optional[str]
    ban_ip: Optional[str]

    @property
    def never_expires(self) -> bool:
        return self.auth_expire is None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "User":
        payload = require_mapping(payload, "User")
        try:
            status = UserStatus(str(payload.get("status") or "").lower())
        except ValueError:
            status = UserStatus.UNKNOWN
        identifier_type = (
            IdentifierType.HWID if payload.get("identifier_type") == "HWID" else IdentifierType.NONE
        )
        return cls(
            user_key=optional_string(payload["user_key"]),
            identifier=optional_string(payload.get("identifier")),
            identifier_type=identifier_type,
            discord_id=optional_string(payload.get("discord_id")),
            status=status,
            last_reset=parse_expiration(payload.get("last_reset")),
            total_resets=int(payload.get("total_resets") or 0),
            auth_expire=parse_expiration(payload["auth_expire"]),
            banned=number_as_bool(payload.get("banned") or 0),
            ban_reason=optional_string(payload.get("ban_reason")),
            ban_expire=parse_expiration(payload.get("ban_expire")),
            unban_token=optional_string(payload.get("unban_token")),
            total_executions=int(payload.get("total_executions") or 0),
            note=optional_string(payload.get("note")),
            ban_ip=optional_string(payload.get("ban_ip")),
        )


@dataclass(frozen=True)
class CreateUser(Endpoint):
    """Gera uma nova chave e devolve o ``user_key`` criado.

    Sem ``identifier`` nem ``discord_id`` a chave fica por atribuir: o
    primeiro utilizador que a usar fica com ela. ``key_days`` só começa a
    contar após a primeira activação; ``auth_expire`` é a data absoluta de
    expiração. Sem nenhum dos dois a chave nunca expira.
    """

    project_id: str
    identifier: Optional[str] = None
    auth_expire: Optional[Timestamp] = None
    note: Optional[str] = None
    discord_id: Optional[str] = None
    key_days: Optional[int] = None
    method = "POST"

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/users"

    def body(self) -> Dict[str, Any]:
        return compact_body(
            {
                "identifier": self.identifier,
                "auth_expire": _timestamp_or_none(self.auth_expire),
                "note": self.note,
                "discord_id": self.discord_id,
                "key_days": self.key_days,
            }
        )

    def parse_response(self, data: Mapping[str, Any], message: Message) -> str:
        return str(data["user_key"])


@dataclass(frozen=True)
class GetUsers(Endpoint):
    """Lista os utilizadores de um projecto, com filtros opcionais.

    ``from_index``/``until_index`` são índices de paginação, não páginas.
    Para procurar por ``discord_id`` o utilizador tem de ter associado a
    conta à chave.
    """

    project_id: str
    user_key: Optional[str] = None
    discord_id: Optional[str] = None
    identifier: Optional[str] = None
    search: Optional[str] = None
    from_index: Optional[int] = None
    until_index: Optional[int] = None
    method = "GET"

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/users"

    def query_params(self) -> QueryParams:
        candidates = (
            ("user_key", self.user_key),
            ("discord_id", self.discord_id),
            ("identifier", self.identifier),
            ("search", self.search),
            ("from", self.from_index),
            ("until", self.until_index),
        )
        return [(name, str(value)) for name, value in candidates if value is not None]

    def parse_response(self, data: Mapping[str, Any], message: Message) -> List[User]:
        return [User.from_payload(item) for item in data["users"]]


@dataclass(frozen=True)
class UpdateUser(Endpoint):
    """Actualiza campos de um utilizador existente.

    Use ``auth_expire=NEVER_EXPIRES`` para remover a data de expiração.
    """

    project_id: str
    user_key: str
    identifier: Optional[str] = None
    auth_expire: Optional[Timestamp] = None
    note: Optional[str] = None
    discord_id: Optional[str] = None
    method = "PATCH"
    expects_data = False

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/users"

    def body(self) -> Dict[str, Any]:
        return compact_body(
            {
                "user_key": self.user_key,
                "identifier": self.identifier,
                "auth_expire": _timestamp_or_none(self.auth_expire),
                "note": self.note,
                "discord_id": self.discord_id,
            }
        )


@dataclass(frozen=True)
class DeleteUser(Endpoint):
    """Apaga uma chave. A operação é irreversível e retira o acesso ao
    utilizador associado (HWID e Discord)."""

    project_id: str
    user_key: str
    method = "DELETE"
    expects_data = False

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/users"

    def query_params(self) -> QueryParams:
        return [("user_key", self.user_key)]


@dataclass(frozen=True)
class ResetHwid(Endpoint):
    """Limpa o HWID de uma chave.

    Sem ``force=True`` o servidor respeita o tempo de espera do projecto e
    recusa com ``User is on cooldown.`` ou ``Reset Hwid is disabled for this
    script``.
    """

    project_id: str
    user_key: str
    force: Optional[bool] = None
    method = "POST"
    expects_data = False

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/users/resethwid"

    def body(self) -> Dict[str, Any]:
        return compact_body({"user_key": self.user_key, "force": self.force})


@dataclass(frozen=True)
class LinkDiscordId(Endpoint):
    """Associa um ID de Discord a uma chave; ``force=True`` substitui o actual."""

    project_id: str
    user_key: str
    discord_id: str
    force: Optional[bool] = None
    method = "POST"
    expects_data = False

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/users/linkdiscord"

    def body(self) -> Dict[str, Any]:
        return compact_body(
            {"user_key": self.user_key, "discord_id": self.discord_id, "force": self.force}
        )


@dataclass(frozen=True)
class BlacklistUser(Endpoint):
    """Coloca uma chave, e o HWID associado, na lista negra.

    ``ban_reason`` é mostrado ao utilizador quando executa o script.
    ``ban_expire`` é a data exacta de fim do banimento; valores negativos
    tornam-no permanente. Cada banimento gera um novo ``unban_token``.
    """

    project_id: str
    user_key: str
    ban_reason: Optional[str] = None
    ban_expire: Optional[Timestamp] = None
    method = "POST"
    expects_data = False

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/users/blacklist"

    def body(self) -> Dict[str, Any]:
        return compact_body(
            {
                "user_key": self.user_key,
                "ban_reason": self.ban_reason,
                "ban_expire": _timestamp_or_none(self.ban_expire),
            }
        )


@dataclass(frozen=True)
class UnblacklistUser(Endpoint):
    """Retira uma chave da lista negra usando o ``unban_token`` de 32 caracteres
    obtido em :class:`GetUsers`."""

    project_id: str
    unban_token: str
    method = "GET"
    expects_data = False

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/users/unban"

    def query_params(self) -> QueryParams:
        return [("unban_token", self.unban_token)]
