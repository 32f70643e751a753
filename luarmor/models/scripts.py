"""Actualização de scripts de um projecto."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..endpoint import Endpoint, compact_body

__all__ = ["UpdateScript"]


@dataclass(frozen=True)
class UpdateScript(Endpoint):
    """Envia uma nova versão do código Lua de um script.

    ``silent`` desliga as mensagens da Luarmor na consola. ``ffa`` permite
    executar o script sem chave. ``heartbeat`` mantém os clientes ligados
    e é necessário para limites de instâncias. ``lightning`` retira algumas
    verificações em linha para ganhar velocidade.
    """

    project_id: str
    script_id: str
    script: str
    silent: Optional[bool] = None
    ffa: Optional[bool] = None
    heartbeat: Optional[bool] = True
    lightning: Optional[bool] = None
    method = "PUT"
    expects_data = False

    def path(self) -> str:
        return f"/v3/projects/{self.project_id}/scripts/{self.script_id}"

    def body(self) -> Dict[str, Any]:
        return compact_body(
            {
                "script": self.script,
                "silent": self.silent,
                "ffa": self.ffa,
                "heartbeat": self.heartbeat,
                "lightning": self.lightning,
            }
        )
