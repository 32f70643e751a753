"""Clientes de alto nível para a API v3 da Luarmor.

:class:`LuarmorClient` bloqueia até obter a resposta; :class:`AsyncLuarmorClient`
expõe as mesmas operações como corrotinas. Ambos delegam em
:func:`luarmor.query.query`/:func:`luarmor.query.aquery`, pelo que os mesmos
argumentos produzem os mesmos pedidos e os mesmos resultados.
"""

from __future__ import annotations

from typing import Any, Awaitable, List, Optional, TypeVar, Union

from .endpoint import Endpoint
from .messages import Message
from .models import (
    ApiKeyDetails,
    ApiKeyDetailsResponse,
    ApiKeyStats,
    ApiKeyStatsResponse,
    ApiStatus,
    ApiStatusResponse,
    BlacklistUser,
    CreateUser,
    DeleteUser,
    GetUsers,
    LinkDiscordId,
    ResetHwid,
    UnblacklistUser,
    UpdateScript,
    UpdateUser,
    User,
)
from .models.users import Timestamp
from .query import DEFAULT_BASE_URL, aquery, query
from .settings import LuarmorSettings, load_settings
from .transport import DEFAULT_TIMEOUT, AsyncTransport, HttpxTransport, RequestsTransport, SyncTransport

__all__ = ["AsyncLuarmorClient", "LuarmorClient"]

T = TypeVar("T")

# O cliente bloqueante devolve ``T``; o assíncrono devolve uma corrotina de ``T``.
_Result = Union[T, Awaitable[T]]


class _ClientBase:
    """Operações comuns; cada subclasse define ``_execute``."""

    def __init__(
        self,
        api_key: str,
        *,
        project_id: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        if not api_key:
            raise ValueError("É necessária uma chave de API da Luarmor.")
        self.api_key = api_key
        self.project_id = project_id
        self.base_url = base_url.rstrip("/")

    def __repr__(self) -> str:
        # A chave nunca aparece em representações.
        return (
            f"{type(self).__name__}(base_url={self.base_url!r}, project_id={self.project_id!r})"
        )

    def _execute(self, endpoint: Endpoint) -> Any:
        raise NotImplementedError

    def _project(self, project_id: Optional[str]) -> str:
        resolved = project_id or self.project_id
        if not resolved:
            raise ValueError(
                "Indique project_id ou configure um projecto por omissão no cliente."
            )
        return resolved

    def status(self) -> _Result[ApiStatusResponse]:
        return self._execute(ApiStatus())

    def key_details(self) -> _Result[ApiKeyDetailsResponse]:
        return self._execute(ApiKeyDetails(api_key=self.api_key))

    def key_stats(self, no_users: bool = False) -> _Result[ApiKeyStatsResponse]:
        return self._execute(ApiKeyStats(api_key=self.api_key, no_users=no_users))

    def create_user(
        self,
        *,
        project_id: Optional[str] = None,
        identifier: Optional[str] = None,
        auth_expire: Optional[Timestamp] = None,
        note: Optional[str] = None,
        discord_id: Optional[str] = None,
        key_days: Optional[int] = None,
    ) -> _Result[str]:
        return self._execute(
            CreateUser(
                project_id=self._project(project_id),
                identifier=identifier,
                auth_expire=auth_expire,
                note=note,
                discord_id=discord_id,
                key_days=key_days,
            )
        )

    def get_users(
        self,
        *,
        project_id: Optional[str] = None,
        user_key: Optional[str] = None,
        discord_id: Optional[str] = None,
        identifier: Optional[str] = None,
        search: Optional[str] = None,
        from_index: Optional[int] = None,
        until_index: Optional[int] = None,
    ) -> _Result[List[User]]:
        return self._execute(
            GetUsers(
                project_id=self._project(project_id),
                user_key=user_key,
                discord_id=discord_id,
                identifier=identifier,
                search=search,
                from_index=from_index,
                until_index=until_index,
            )
        )

    def update_user(
        self,
        user_key: str,
        *,
        project_id: Optional[str] = None,
        identifier: Optional[str] = None,
        auth_expire: Optional[Timestamp] = None,
        note: Optional[str] = None,
        discord_id: Optional[str] = None,
    ) -> _Result[Message]:
        return self._execute(
            UpdateUser(
                project_id=self._project(project_id),
                user_key=user_key,
                identifier=identifier,
                auth_expire=auth_expire,
                note=note,
                discord_id=discord_id,
            )
        )

    def delete_user(
        self, user_key: str, *, project_id: Optional[str] = None
    ) -> _Result[Message]:
        return self._execute(DeleteUser(project_id=self._project(project_id), user_key=user_key))

    def reset_hwid(
        self, user_key: str, *, project_id: Optional[str] = None, force: Optional[bool] = None
    ) -> _Result[Message]:
        return self._execute(
            ResetHwid(project_id=self._project(project_id), user_key=user_key, force=force)
        )

    def link_discord(
        self,
        user_key: str,
        discord_id: str,
        *,
        project_id: Optional[str] = None,
        force: Optional[bool] = None,
    ) -> _Result[Message]:
        return self._execute(
            LinkDiscordId(
                project_id=self._project(project_id),
                user_key=user_key,
                discord_id=discord_id,
                force=force,
            )
        )

    def blacklist_user(
        self,
        user_key: str,
        *,
        project_id: Optional[str] = None,
        ban_reason: Optional[str] = None,
        ban_expire: Optional[Timestamp] = None,
    ) -> _Result[Message]:
        return self._execute(
            BlacklistUser(
                project_id=self._project(project_id),
                user_key=user_key,
                ban_reason=ban_reason,
                ban_expire=ban_expire,
            )
        )

    def unblacklist_user(
        self, unban_token: str, *, project_id: Optional[str] = None
    ) -> _Result[Message]:
        return self._execute(
            UnblacklistUser(project_id=self._project(project_id), unban_token=unban_token)
        )

    def update_script(
        self,
        script_id: str,
        script: str,
        *,
        project_id: Optional[str] = None,
        silent: Optional[bool] = None,
        ffa: Optional[bool] = None,
        heartbeat: Optional[bool] = True,
        lightning: Optional[bool] = None,
    ) -> _Result[Message]:
        return self._execute(
            UpdateScript(
                project_id=self._project(project_id),
                script_id=script_id,
                script=script,
                silent=silent,
                ffa=ffa,
                heartbeat=heartbeat,
                lightning=lightning,
            )
        )


class LuarmorClient(_ClientBase):
    """Cliente bloqueante sobre ``requests``.

    Exemplo::

        with LuarmorClient.from_env() as client:
            key = client.create_user(note="cliente novo")
    """

    def __init__(
        self,
        api_key: str,
        *,
        project_id: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[SyncTransport] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(api_key, project_id=project_id, base_url=base_url)
        self._owns_transport = transport is None
        self.transport: SyncTransport = transport or RequestsTransport(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: LuarmorSettings, **kwargs: Any) -> "LuarmorClient":
        kwargs.setdefault("timeout", settings.timeout_seconds)
        return cls(
            settings.api_key,
            project_id=settings.project_id,
            base_url=settings.api_base_url,
            **kwargs,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "LuarmorClient":
        return cls.from_settings(load_settings(), **kwargs)

    def _execute(self, endpoint: Endpoint) -> Any:
        return query(endpoint, self.transport, api_key=self.api_key, base_url=self.base_url)

    def get_user(self, *, project_id: Optional[str] = None, **filters: Any) -> Optional[User]:
        """Devolve o primeiro utilizador que corresponde aos filtros, ou ``None``."""

        users: List[User] = self.get_users(project_id=project_id, **filters)
        return users[0] if users else None

    def close(self) -> None:
        if self._owns_transport and isinstance(self.transport, RequestsTransport):
            self.transport.close()

    def __enter__(self) -> "LuarmorClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncLuarmorClient(_ClientBase):
    """Versão assíncrona de :class:`LuarmorClient` sobre ``httpx``.

    Todas as operações devolvem corrotinas::

        async with AsyncLuarmorClient(api_key, project_id="abc") as client:
            users = await client.get_users(search="premium")
    """

    def __init__(
        self,
        api_key: str,
        *,
        project_id: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[AsyncTransport] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(api_key, project_id=project_id, base_url=base_url)
        self._owns_transport = transport is None
        self.transport: AsyncTransport = transport or HttpxTransport(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: LuarmorSettings, **kwargs: Any) -> "AsyncLuarmorClient":
        kwargs.setdefault("timeout", settings.timeout_seconds)
        return cls(
            settings.api_key,
            project_id=settings.project_id,
            base_url=settings.api_base_url,
            **kwargs,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "AsyncLuarmorClient":
        return cls.from_settings(load_settings(), **kwargs)

    async def _execute(self, endpoint: Endpoint) -> Any:
        return await aquery(endpoint, self.transport, api_key=self.api_key, base_url=self.base_url)

    async def get_user(
        self, *, project_id: Optional[str] = None, **filters: Any
    ) -> Optional[User]:
        users: List[User] = await self.get_users(project_id=project_id, **filters)
        return users[0] if users else None

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            await self.transport.aclose()

    async def __aenter__(self) -> "AsyncLuarmorClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
