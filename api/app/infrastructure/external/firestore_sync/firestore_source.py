"""
Fuente de documentos sobre Firestore (google-cloud-firestore).
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Optional

from google.auth.exceptions import DefaultCredentialsError
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from loguru import logger

from app.core.config import Settings
from app.shared.exceptions.sync import ConfigurationException

from .credentials import (
    build_service_account_info,
    credentials_from_info,
    parse_service_account_json,
)
from .types import SourceDocument

_DIRECTIONS = {
    "asc": firestore.Query.ASCENDING,
    "desc": firestore.Query.DESCENDING,
}


def document_from_snapshot(snapshot: Any) -> SourceDocument:
    """Convierte un DocumentSnapshot en SourceDocument."""
    return SourceDocument(
        id=snapshot.id,
        reference_path=snapshot.reference.path,
        data=snapshot.to_dict() or {},
    )


class FirestoreDocumentSource:
    """
    Lecturas de Firestore usadas por el sync y por el detalle de órdenes.

    No hace cast de valores: eso lo decide el normalizador.
    """

    def __init__(self, client: firestore.Client) -> None:
        self._client = client

    def query(
        self,
        *,
        collection: str,
        order_by_field: str,
        direction: str = "asc",
        since: Optional[datetime] = None,
        limit: int,
    ) -> list[SourceDocument]:
        query = self._client.collection(collection)
        if since is not None:
            query = query.where(filter=FieldFilter(order_by_field, ">=", since))
        query = query.order_by(order_by_field, direction=_DIRECTIONS[direction]).limit(limit)
        return [document_from_snapshot(snap) for snap in query.stream()]

    def get(self, *, collection: str, document_id: str) -> Optional[SourceDocument]:
        snapshot = self._client.collection(collection).document(document_id).get()
        if not snapshot.exists:
            return None
        return document_from_snapshot(snapshot)

    def close(self) -> None:
        self._client.close()


class FirestoreClientProvider:
    """Handle de Firestore compartido por el proceso, creado en el primer uso."""

    _instance: Optional[FirestoreDocumentSource] = None
    _lock = threading.Lock()

    @classmethod
    def get(cls, settings: Settings) -> FirestoreDocumentSource:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = FirestoreDocumentSource(build_firestore_client(settings))
                    logger.info("Cliente Firestore inicializado")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            if cls._instance is not None:
                cls._instance.close()
            cls._instance = None


def build_firestore_client(settings: Settings) -> firestore.Client:
    """
    Construye `firestore.Client`.

    - FIREBASE_SERVICE_ACCOUNT: JSON completo (recomendado en hosting)
    - FIREBASE_PROJECT_ID + FIREBASE_CLIENT_EMAIL + FIREBASE_PRIVATE_KEY
    - si no, Application Default Credentials

    Raises:
        ConfigurationException: credenciales ausentes o malformadas
    """
    try:
        return _build_firestore_client(settings)
    except (DefaultCredentialsError, ValueError) as e:
        raise ConfigurationException(f"Credenciales de Firestore no disponibles: {e}") from e


def _build_firestore_client(settings: Settings) -> firestore.Client:
    if settings.FIREBASE_SERVICE_ACCOUNT:
        info = parse_service_account_json(
            settings.FIREBASE_SERVICE_ACCOUNT, env_name="FIREBASE_SERVICE_ACCOUNT"
        )
        return firestore.Client(
            project=info.get("project_id"),
            credentials=credentials_from_info(info),
        )

    info = build_service_account_info(
        project_id=settings.FIREBASE_PROJECT_ID,
        client_email=settings.FIREBASE_CLIENT_EMAIL,
        private_key=settings.FIREBASE_PRIVATE_KEY,
    )
    if info is not None:
        return firestore.Client(project=info["project_id"], credentials=credentials_from_info(info))

    return firestore.Client(project=settings.FIREBASE_PROJECT_ID or None)
