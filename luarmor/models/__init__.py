"""Descritores de pedidos e registos de resposta da API v3."""

from .keys import (
    ApiKeyDetails,
    ApiKeyDetailsResponse,
    ApiKeyStats,
    ApiKeyStatsResponse,
    ExecutionData,
    KeyPlan,
    Project,
    ProjectPlatform,
    ProjectSettings,
    Script,
    ScriptDefaultStats,
    ScriptStats,
    parse_plan,
)
from .scripts import UpdateScript
from .status import ApiStatus, ApiStatusResponse
from .users import (
    NEVER_EXPIRES,
    BlacklistUser,
    CreateUser,
    DeleteUser,
    GetUsers,
    IdentifierType,
    LinkDiscordId,
    ResetHwid,
    UnblacklistUser,
    UpdateUser,
    User,
    UserStatus,
)

__all__ = [
    "NEVER_EXPIRES",
    "ApiKeyDetails",
    "ApiKeyDetailsResponse",
    "ApiKeyStats",
    "ApiKeyStatsResponse",
    "ApiStatus",
    "ApiStatusResponse",
    "BlacklistUser",
    "CreateUser",
    "DeleteUser",
    "ExecutionData",
    "GetUsers",
    "IdentifierType",
    "KeyPlan",
    "LinkDiscordId",
    "Project",
    "ProjectPlatform",
    "ProjectSettings",
    "ResetHwid",
    "Script",
    "ScriptDefaultStats",
    "ScriptStats",
    "UnblacklistUser",
    "UpdateScript",
    "UpdateUser",
    "User",
    "UserStatus",
    "parse_plan",
]
