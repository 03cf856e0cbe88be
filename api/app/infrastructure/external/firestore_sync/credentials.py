"""
Carga de credenciales de service account para los clientes de Google.

Orden de preferencia (igual para BigQuery y Firestore):
1. JSON completo en una variable de entorno (útil en CI/servidores)
2. Campos sueltos (project id, client email, private key)
3. Application Default Credentials (GOOGLE_APPLICATION_CREDENTIALS / metadata)
"""

from __future__ import annotations

import json
from typing import Any, Optional

from google.oauth2 import service_account

from app.shared.exceptions.sync import ConfigurationException

_REQUIRED_KEYS = ("client_email", "private_key")


def parse_service_account_json(raw: str, *, env_name: str) -> dict[str, Any]:
    """
    Parsea y valida el JSON de una service account.

    Raises:
        ConfigurationException: si el JSON es inválido o le faltan llaves
    """
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationException(f"{env_name} no es un JSON válido: {e}") from e

    if not isinstance(info, dict):
        raise ConfigurationException(f"{env_name} no se parseó como objeto JSON")

    missing = [key for key in _REQUIRED_KEYS if not info.get(key)]
    if missing:
        raise ConfigurationException(
            f"{env_name} no contiene {' ni '.join(missing)}",
            missing=missing,
        )
    # Las llaves privadas suelen guardarse en una sola línea con "\n" escapados.
    info["private_key"] = str(info["private_key"]).replace("\\n", "\n")
    return info


def credentials_from_info(info: dict[str, Any]) -> service_account.Credentials:
    return service_account.Credentials.from_service_account_info(info)


def build_service_account_info(
    *,
    project_id: Optional[str],
    client_email: Optional[str],
    private_key: Optional[str],
) -> Optional[dict[str, Any]]:
    """
    Arma el dict de service account desde campos sueltos.

    Retorna None si falta cualquiera de los tres campos.
    """
    if not (project_id and client_email and private_key):
        return None
    return {
        "type": "service_account",
        "project_id": project_id,
        "client_email": client_email,
        "private_key": private_key.replace("\\n", "\n"),
        "token_uri": "https://oauth2.googleapis.com/token",
    }
