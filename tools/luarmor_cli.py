"""Linha de comandos para gerir projectos Luarmor a partir do terminal."""
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional

from luarmor import LuarmorAPIError, LuarmorClient, SettingsError, load_settings
from luarmor.query import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat().replace("+00:00", "Z")
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Tipo não serializável: {type(value).__name__}")


def _to_jsonable(result: Any) -> Any:
    if dataclasses.is_dataclass(result) and not isinstance(result, type):
        return dataclasses.asdict(result)
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


def _print_result(result: Any) -> None:
    print(json.dumps(_to_jsonable(result), indent=2, default=_json_default, ensure_ascii=False))


def _handle_status(_: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.status()


def _handle_details(_: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.key_details()


def _handle_stats(args: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.key_stats(no_users=args.no_users)


def _handle_create_user(args: argparse.Namespace, client: LuarmorClient) -> Any:
    user_key = client.create_user(
        identifier=args.identifier,
        auth_expire=args.auth_expire,
        note=args.note,
        discord_id=args.discord_id,
        key_days=args.key_days,
    )
    return {"user_key": user_key}


def _handle_get_users(args: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.get_users(
        user_key=args.user_key,
        discord_id=args.discord_id,
        identifier=args.identifier,
        search=args.search,
        from_index=args.from_index,
        until_index=args.until_index,
    )


def _handle_update_user(args: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.update_user(
        args.user_key,
        identifier=args.identifier,
        auth_expire=args.auth_expire,
        note=args.note,
        discord_id=args.discord_id,
    )


def _handle_delete_user(args: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.delete_user(args.user_key)


def _handle_reset_hwid(args: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.reset_hwid(args.user_key, force=args.force or None)


def _handle_link_discord(args: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.link_discord(args.user_key, args.discord_id, force=args.force or None)


def _handle_blacklist(args: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.blacklist_user(
        args.user_key, ban_reason=args.reason, ban_expire=args.ban_expire
    )


def _handle_unban(args: argparse.Namespace, client: LuarmorClient) -> Any:
    return client.unblacklist_user(args.unban_token)


def _handle_update_script(args: argparse.Namespace, client: LuarmorClient) -> Any:
    source = Path(args.file).read_text(encoding="utf-8")
    return client.update_script(
        args.script_id,
        source,
        silent=args.silent,
        ffa=args.ffa,
        heartbeat=not args.no_heartbeat,
        lightning=args.lightning,
    )


def _build_client(args: argparse.Namespace) -> LuarmorClient:
    if args.api_key:
        return LuarmorClient(
            args.api_key,
            project_id=args.project_id,
            base_url=args.base_url or DEFAULT_BASE_URL,
        )

    settings = load_settings()
    return LuarmorClient(
        settings.api_key,
        project_id=args.project_id or settings.project_id,
        base_url=args.base_url or settings.api_base_url,
        timeout=settings.timeout_seconds,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ferramentas para gerir chaves e scripts através da API v3 da Luarmor."
    )
    parser.add_argument(
        "--api-key",
        help="Chave de API da Luarmor (por omissão usa LUARMOR_CREDENTIALS, LUARMOR_CREDENTIALS_PATH ou LUARMOR_API_KEY)",
    )
    parser.add_argument(
        "--project-id",
        help="Projecto por omissão para as operações sobre utilizadores e scripts",
    )
    parser.add_argument(
        "--base-url",
        help="URL base da API da Luarmor (opcional)",
    )
    parser.add_argument("--verbose", action="store_true", help="Mostra o registo de pedidos")

    subparsers = parser.add_subparsers(dest="command", required=True)

    status_parser = subparsers.add_parser("status", help="Verifica se a API está disponível")
    status_parser.set_defaults(handler=_handle_status)

    details_parser = subparsers.add_parser("details", help="Mostra os detalhes da chave de API")
    details_parser.set_defaults(handler=_handle_details)

    stats_parser = subparsers.add_parser("stats", help="Mostra as estatísticas da chave de API")
    stats_parser.add_argument(
        "--no-users", action="store_true", help="Não calcula o número de utilizadores"
    )
    stats_parser.set_defaults(handler=_handle_stats)

    create_parser = subparsers.add_parser("create-user", help="Gera uma nova chave")
    create_parser.add_argument("--identifier", help="HWID a associar à chave")
    create_parser.add_argument("--auth-expire", type=int, help="Expiração em segundos Unix")
    create_parser.add_argument("--note", help="Nota livre guardada com a chave")
    create_parser.add_argument("--discord-id", help="ID de Discord a associar")
    create_parser.add_argument(
        "--key-days", type=int, help="Dias de validade contados a partir da activação"
    )
    create_parser.set_defaults(handler=_handle_create_user)

    users_parser = subparsers.add_parser("get-users", help="Lista utilizadores do projecto")
    users_parser.add_argument("--user-key")
    users_parser.add_argument("--discord-id")
    users_parser.add_argument("--identifier")
    users_parser.add_argument("--search", help="Procura em notas, chaves e IDs")
    users_parser.add_argument("--from", dest="from_index", type=int, help="Índice inicial")
    users_parser.add_argument("--until", dest="until_index", type=int, help="Índice final")
    users_parser.set_defaults(handler=_handle_get_users)

    update_parser = subparsers.add_parser("update-user", help="Actualiza uma chave existente")
    update_parser.add_argument("user_key")
    update_parser.add_argument("--identifier")
    update_parser.add_argument(
        "--auth-expire", type=int, help="Expiração em segundos Unix (-1 para nunca)"
    )
    update_parser.add_argument("--note")
    update_parser.add_argument("--discord-id")
    update_parser.set_defaults(handler=_handle_update_user)

    delete_parser = subparsers.add_parser("delete-user", help="Apaga uma chave")
    delete_parser.add_argument("user_key")
    delete_parser.set_defaults(handler=_handle_delete_user)

    reset_parser = subparsers.add_parser("reset-hwid", help="Limpa o HWID de uma chave")
    reset_parser.add_argument("user_key")
    reset_parser.add_argument(
        "--force", action="store_true", help="Ignora o tempo de espera do projecto"
    )
    reset_parser.set_defaults(handler=_handle_reset_hwid)

    link_parser = subparsers.add_parser("link-discord", help="Associa um ID de Discord")
    link_parser.add_argument("user_key")
    link_parser.add_argument("discord_id")
    link_parser.add_argument(
        "--force", action="store_true", help="Substitui o ID de Discord já associado"
    )
    link_parser.set_defaults(handler=_handle_link_discord)

    blacklist_parser = subparsers.add_parser("blacklist", help="Coloca uma chave na lista negra")
    blacklist_parser.add_argument("user_key")
    blacklist_parser.add_argument("--reason", help="Motivo mostrado ao utilizador")
    blacklist_parser.add_argument(
        "--ban-expire", type=int, help="Fim do banimento em segundos Unix (-1 para permanente)"
    )
    blacklist_parser.set_defaults(handler=_handle_blacklist)

    unban_parser = subparsers.add_parser("unban", help="Retira uma chave da lista negra")
    unban_parser.add_argument("unban_token")
    unban_parser.set_defaults(handler=_handle_unban)

    script_parser = subparsers.add_parser("update-script", help="Publica uma nova versão de um script")
    script_parser.add_argument("script_id")
    script_parser.add_argument("--file", required=True, help="Ficheiro Lua com o novo código")
    script_parser.add_argument("--silent", action="store_true", default=None)
    script_parser.add_argument("--ffa", action="store_true", default=None)
    script_parser.add_argument("--lightning", action="store_true", default=None)
    script_parser.add_argument(
        "--no-heartbeat", action="store_true", help="Desliga o heartbeat dos clientes"
    )
    script_parser.set_defaults(handler=_handle_update_script)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        client = _build_client(args)
    except (SettingsError, ValueError) as exc:
        parser.error(str(exc))
        return 2

    with client:
        try:
            result = args.handler(args, client)
        except LuarmorAPIError as exc:
            logger.debug("Pedido falhou", exc_info=True)
            print(f"Erro da Luarmor: {exc}", file=sys.stderr)
            return 1
        except ValueError as exc:
            parser.error(str(exc))
            return 2
        except OSError as exc:
            print(f"Não foi possível ler o ficheiro: {exc}", file=sys.stderr)
            return 1

    _print_result(result)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry-point
    sys.exit(main())
