"""Catálogo de mensagens devolvidas pela API da Luarmor.

A API responde sempre com um campo ``message`` em texto livre. As mensagens
conhecidas são mapeadas para :class:`MessageKind`; qualquer outra é mantida
tal como chegou em :attr:`Message.raw` com ``kind=MessageKind.OTHER``. A
conversão nunca falha.

Os textos podem mudar sem aviso do lado do servidor, por isso a tabela
``_MESSAGE_TABLE`` deve acompanhar as mensagens observadas.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

__all__ = ["Message", "MessageKind", "parse_message"]


class MessageKind(str, Enum):
    API_WORKING = "api_working"
    INCORRECT_API_KEY = "incorrect_api_key"
    INVALID_API_KEY = "invalid_api_key"
    SUCCESS = "success"
    USER_DELETED = "user_deleted"
    KEY_NOT_FOUND = "key_not_found"
    PROJECT_NOT_FOUND = "project_not_found"
    SUCCESS_RESET = "success_reset"
    USER_COOLDOWN = "user_cooldown"
    USER_KEY_NOT_FOUND = "user_key_not_found"
    DISCORD_ALREADY_LINKED = "discord_already_linked"
    NOTHING_TO_SEE = "nothing_to_see"
    IDENTIFIER_ALREADY_EXISTS = "identifier_already_exists"
    INVALID_DISCORD_ID = "invalid_discord_id"
    DISCORD_ID_SUCCESS = "discord_id_success"
    RESET_HWID_DISABLED = "reset_hwid_disabled"
    EDIT_SUCCESS = "edit_success"
    DISCORD_ALREADY_EXISTS = "discord_already_exists"
    OTHER = "other"


# Correspondência exacta (sensível a maiúsculas) com o texto do servidor.
_MESSAGE_TABLE: Dict[str, MessageKind] = {
    "API is up and working!": MessageKind.API_WORKING,
    "Invalid API key! Visit https://luarmor.net/ to get access.": MessageKind.INCORRECT_API_KEY,
    "Wrong API key": MessageKind.INVALID_API_KEY,
    "Success!": MessageKind.SUCCESS,
    "User has been deleted!": MessageKind.USER_DELETED,
    "Key not found": MessageKind.KEY_NOT_FOUND,
    "Project not found!": MessageKind.PROJECT_NOT_FOUND,
    "Project not found": MessageKind.PROJECT_NOT_FOUND,
    "Successfully reset!": MessageKind.SUCCESS_RESET,
    "User is on cooldown.": MessageKind.USER_COOLDOWN,
    "User key doesn't exist": MessageKind.USER_KEY_NOT_FOUND,
    "This key already has a discord linked to it": MessageKind.DISCORD_ALREADY_LINKED,
    "nothing to see here.": MessageKind.NOTHING_TO_SEE,
    "Identifier already exists.": MessageKind.IDENTIFIER_ALREADY_EXISTS,
    "Invalid discord_id": MessageKind.INVALID_DISCORD_ID,
    "Discord ID successfully linked!": MessageKind.DISCORD_ID_SUCCESS,
    "Reset Hwid is disabled for this script": MessageKind.RESET_HWID_DISABLED,
    "User has been edited successfully!": MessageKind.EDIT_SUCCESS,
    "Discord ID already exists": MessageKind.DISCORD_ALREADY_EXISTS,
    "Discord ID already exists.": MessageKind.DISCORD_ALREADY_EXISTS,
    "Discord ID already exist.": MessageKind.DISCORD_ALREADY_EXISTS,
}

_DESCRIPTIONS: Dict[MessageKind, str] = {
    MessageKind.API_WORKING: "API is up and working",
    MessageKind.INCORRECT_API_KEY: "Invalid API key! Visit https://luarmor.net/ to get access",
    MessageKind.INVALID_API_KEY: "Wrong API key",
    MessageKind.SUCCESS: "Success",
    MessageKind.USER_DELETED: "User has been deleted",
    MessageKind.KEY_NOT_FOUND: "Key not found",
    MessageKind.PROJECT_NOT_FOUND: "Project not found",
    MessageKind.SUCCESS_RESET: "Successfully reset",
    MessageKind.USER_COOLDOWN: "User is on cooldown",
    MessageKind.USER_KEY_NOT_FOUND: "User key does not exist",
    MessageKind.DISCORD_ALREADY_LINKED: "The key already has a Discord linked to it",
    MessageKind.NOTHING_TO_SEE: "nothing to see here",
    MessageKind.IDENTIFIER_ALREADY_EXISTS: "Identifier already exists",
    MessageKind.INVALID_DISCORD_ID: "Invalid Discord ID",
    MessageKind.DISCORD_ID_SUCCESS: "Discord ID successfully linked",
    MessageKind.RESET_HWID_DISABLED: "Reset HWID is disabled for this script",
    MessageKind.EDIT_SUCCESS: "User has been edited successfully",
    MessageKind.DISCORD_ALREADY_EXISTS: "Discord ID already exists",
}


@dataclass(frozen=True)
class Message:
    """Mensagem do servidor já classificada."""

    kind: MessageKind
    raw: str

    @classmethod
    def parse(cls, raw: Any) -> "Message":
        """Classifica ``raw``; textos desconhecidos ficam em ``MessageKind.OTHER``."""

        text = raw if isinstance(raw, str) else ("" if raw is None else str(raw))
        return cls(kind=_MESSAGE_TABLE.get(text, MessageKind.OTHER), raw=text)

    @property
    def is_known(self) -> bool:
        return self.kind is not MessageKind.OTHER

    def __str__(self) -> str:
        return _DESCRIPTIONS.get(self.kind, self.raw)


def parse_message(raw: Any) -> Message:
    return Message.parse(raw)
