"""Operações sobre a própria chave de API (detalhes e estatísticas)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..decoding import (
    number_as_bool,
    optional_string,
    parse_expiration,
    parse_timestamp,
    require_mapping,
)
from ..endpoint import Endpoint, QueryParams, format_bool
from ..messages import Message

__all__ = [
    "ApiKeyDetails",
    "ApiKeyDetailsResponse",
    "ApiKeyStats",
    "ApiKeyStatsResponse",
    "ExecutionData",
    "KeyPlan",
    "Project",
    "ProjectPlatform",
    "ProjectSettings",
    "Script",
    "ScriptDefaultStats",
    "ScriptStats",
    "parse_plan",
]


class KeyPlan(str, Enum):
    BASIC = "basic"
    PREMIUM = "premium"
    PRO = "pro"
    OTHER = "other"


_PLAN_CODES: Dict[str, KeyPlan] = {
    "b": KeyPlan.BASIC,
    "p": KeyPlan.PREMIUM,
    "r": KeyPlan.PRO,
}


def parse_plan(code: Any) -> KeyPlan:
    """Traduz o código de uma letra do plano; códigos desconhecidos dão ``OTHER``."""

    return _PLAN_CODES.get(str(code), KeyPlan.OTHER)


class ProjectPlatform(str, Enum):
    ROBLOX = "roblox"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ProjectSettings:
    # None quando o servidor envia um valor negativo (sem data definida).
    reset_hwid_cooldown: Optional[datetime]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ProjectSettings":
        payload = require_mapping(payload, "ProjectSettings")
        return cls(reset_hwid_cooldown=parse_expiration(payload["reset_hwid_cooldown"]))


@dataclass(frozen=True)
class Script:
    script_name: str
    script_id: str
    script_version: str
    ffa: bool
    silent: bool

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Script":
        payload = require_mapping(payload, "Script")
        return cls(
            script_name=str(payload["script_name"]),
            script_id=str(payload["script_id"]),
            script_version=str(payload["script_version"]),
            ffa=number_as_bool(payload["ffa"]),
            silent=number_as_bool(payload["silent"]),
        )


@dataclass(frozen=True)
class Project:
    platform: ProjectPlatform
    id: str
    name: str
    settings: ProjectSettings
    scripts: List[Script]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Project":
        payload = require_mapping(payload, "Project")
        platform_raw = str(payload.get("platform") or "").lower()
        try:
            platform = ProjectPlatform(platform_raw)
        except ValueError:
            platform = ProjectPlatform.UNKNOWN
        return cls(
            platform=platform,
            id=str(payload["id"]),
            name=str(payload["name"]),
            settings=ProjectSettings.from_payload(payload["settings"]),
            scripts=[Script.from_payload(item) for item in payload.get("scripts") or []],
        )


@dataclass(frozen=True)
class ApiKeyDetailsResponse:
    email: str
    discord_id: Optional[str]
    expires_at: datetime
    registered_at: datetime
    enabled: bool
    plan: KeyPlan
    plan_code: str
    projects: List[Project]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ApiKeyDetailsResponse":
        plan_code = str(payload["plan"])
        return cls(
            email=str(payload["email"]),
            discord_id=optional_string(payload.get("discord_id")),
            expires_at=parse_timestamp(payload["expires_at"]),
            registered_at=parse_timestamp(payload["registered_at"]),
            enabled=number_as_bool(payload["enabled"]),
            plan=parse_plan(plan_code),
            plan_code=plan_code,
            projects=[Project.from_payload(item) for item in payload.get("projects") or []],
        )


@dataclass(frozen=True)
class ApiKeyDetails(Endpoint):
    """Detalhes da chave de API: projectos, scripts, plano e validade."""

    api_key: str
    method = "GET"

    def path(self) -> str:
        return f"/v3/keys/{self.api_key}/details"

    def parse_response(self, data: Mapping[str, Any], message: Message) -> ApiKeyDetailsResponse:
        return ApiKeyDetailsResponse.from_payload(data)


@dataclass(frozen=True)
class ExecutionData:
    frequency: int
    executions: List[int]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ExecutionData":
        payload = require_mapping(payload, "ExecutionData")
        return cls(
            frequency=int(payload["frequency"]),
            executions=[int(value) for value in payload.get("executions") or []],
        )


@dataclass(frozen=True)
class ScriptDefaultStats:
    scripts: int
    users: int
    obfuscations: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScriptDefaultStats":
        payload = require_mapping(payload, "ScriptDefaultStats")
        return cls(
            scripts=int(payload["scripts"]),
            users=int(payload["users"]),
            obfuscations=int(payload["obfuscations"]),
        )


@dataclass(frozen=True)
class ScriptStats:
    obfuscations: int
    scripts: int
    # Só presente quando o pedido foi feito com ``no_users=False``.
    users: Optional[int]
    attacks_blocked: int
    default: ScriptDefaultStats
    reset_at: datetime

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScriptStats":
        payload = require_mapping(payload, "ScriptStats")
        users = payload.get("users")
        return cls(
            obfuscations=int(payload["obfuscations"]),
            scripts=int(payload["scripts"]),
            users=int(users) if users is not None else None,
            attacks_blocked=int(payload.get("attacks_blocked") or 0),
            default=ScriptDefaultStats.from_payload(payload["default"]),
            reset_at=parse_timestamp(payload["reset_at"]),
        )


@dataclass(frozen=True)
class ApiKeyStatsResponse:
    execution_data: ExecutionData
    stats: ScriptStats

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ApiKeyStatsResponse":
        return cls(
            execution_data=ExecutionData.from_payload(payload["execution_data"]),
            stats=ScriptStats.from_payload(payload["stats"]),
        )


@dataclass(frozen=True)
class ApiKeyStats(Endpoint):
    """Estatísticas de utilização da chave de API.

    Com ``no_users=True`` o servidor omite a contagem de utilizadores.
    """

    api_key: str
    no_users: bool = False
    method = "GET"

    def path(self) -> str:
        return f"/v3/keys/{self.api_key}/stats"

    def query_params(self) -> QueryParams:
        return [("noUsers", format_bool(self.no_users))]

    def parse_response(self, data: Mapping[str, Any], message: Message) -> ApiKeyStatsResponse:
        return ApiKeyStatsResponse.from_payload(data)
