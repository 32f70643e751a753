"""Carregamento da configuração do cliente sem embutir a chave no código.

A chave de API pode ser fornecida via ``LUARMOR_CREDENTIALS`` (JSON codificado
em Base64), via ficheiro referenciado por ``LUARMOR_CREDENTIALS_PATH`` ou
através de variáveis de ambiente individuais (``LUARMOR_API_KEY``,
``LUARMOR_PROJECT_ID``, ``LUARMOR_API_BASE_URL`` e ``LUARMOR_TIMEOUT``).

O bundle deve incluir pelo menos o campo ``api_key`` e, opcionalmente,
``project_id``, ``api_base_url`` e ``timeout_seconds``.
"""

from __future__ import annotations

import base64
import binascii
import json
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import SettingsError
from .query import DEFAULT_BASE_URL
from .transport import DEFAULT_TIMEOUT

__all__ = ["LuarmorSettings", "load_settings"]


@dataclass(frozen=True)
class LuarmorSettings:
    """Container imutável para a configuração do cliente Luarmor."""

    api_key: str
    project_id: Optional[str] = None
    api_base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "LuarmorSettings":
        """Valida o dicionário carregado e devolve uma instância pronta."""

        if not isinstance(payload, dict):
            raise SettingsError("A configuração da Luarmor deve ser um objecto JSON.")

        try:
            api_key = str(payload["api_key"]).strip()
        except KeyError as exc:
            raise SettingsError(
                f"Campo obrigatório ausente na configuração: {exc.args[0]}"
            ) from exc

        if not api_key:
            raise SettingsError("O valor de 'api_key' não pode estar vazio.")

        project_id = payload.get("project_id")
        project_id = str(project_id).strip() or None if project_id is not None else None

        base_url = payload.get("api_base_url")
        if base_url:
            base_url = str(base_url).strip().rstrip("/")
        else:
            base_url = DEFAULT_BASE_URL

        timeout = payload.get("timeout_seconds")
        if timeout is None or timeout == "":
            timeout_seconds = DEFAULT_TIMEOUT
        else:
            try:
                timeout_seconds = float(timeout)
            except (TypeError, ValueError) as exc:
                raise SettingsError(f"Timeout inválido na configuração: {timeout!r}") from exc
            if timeout_seconds <= 0:
                raise SettingsError("O timeout tem de ser positivo.")

        return cls(
            api_key=api_key,
            project_id=project_id,
            api_base_url=base_url,
            timeout_seconds=timeout_seconds,
        )


def load_settings() -> LuarmorSettings:
    """Obtém a configuração a partir da primeira fonte disponível."""

    payload = _load_bundle_from_env() or _load_bundle_from_file() or _load_from_env_variables()

    if not payload:
        raise SettingsError(
            "A chave de API da Luarmor não foi configurada. "
            "Configure LUARMOR_CREDENTIALS, LUARMOR_CREDENTIALS_PATH ou a "
            "variável LUARMOR_API_KEY."
        )

    return LuarmorSettings.from_payload(payload)


def _load_bundle_from_env() -> Optional[Dict[str, Any]]:
    bundle = os.getenv("LUARMOR_CREDENTIALS")
    if not bundle:
        return None

    try:
        raw = base64.b64decode(bundle, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise SettingsError("LUARMOR_CREDENTIALS não contém Base64 válido.") from exc

    try:
        return json.loads(raw.decode("utf-8"))
    except ValueError as exc:
        raise SettingsError("LUARMOR_CREDENTIALS não contém JSON válido.") from exc


def _load_bundle_from_file() -> Optional[Dict[str, Any]]:
    path = os.getenv("LUARMOR_CREDENTIALS_PATH")
    if not path:
        return None

    file_path = Path(path)
    if not file_path.is_file():
        raise SettingsError(
            f"O ficheiro referenciado por LUARMOR_CREDENTIALS_PATH não existe: {path}"
        )

    return _load_bundle_from_disk(file_path)


def _load_from_env_variables() -> Optional[Dict[str, Any]]:
    api_key = os.getenv("LUARMOR_API_KEY")
    if not api_key:
        return None

    payload: Dict[str, Any] = {"api_key": api_key}
    for variable, key in (
        ("LUARMOR_PROJECT_ID", "project_id"),
        ("LUARMOR_API_BASE_URL", "api_base_url"),
        ("LUARMOR_TIMEOUT", "timeout_seconds"),
    ):
        value = os.getenv(variable)
        if value:
            payload[key] = value

    return payload


def _load_bundle_from_disk(file_path: Path) -> Dict[str, Any]:
    if os.name != "nt":  # Em Windows a verificação de permissões é diferente.
        mode = stat.S_IMODE(file_path.stat().st_mode)
        if mode & (stat.S_IRWXG | stat.S_IRWXO):
            raise SettingsError(
                "As permissões do ficheiro de configuração são demasiado abertas. "
                "Utilize chmod 600 e garanta que apenas o utilizador actual o pode ler."
            )

    try:
        with file_path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except ValueError as exc:
        raise SettingsError("O ficheiro de configuração não contém JSON válido.") from exc
