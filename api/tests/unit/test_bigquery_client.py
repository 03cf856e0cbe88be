"""
Tests unitarios para el adaptador de BigQuery.

El cliente del SDK se mockea: se verifica como se arma el request y como
se traducen errores a InsertFailure.
"""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from google.api_core import exceptions as google_exceptions

from app.core.config import Settings
from app.infrastructure.external.firestore_sync import bigquery_client as bq_module
from app.infrastructure.external.firestore_sync.bigquery_client import (
    BigQueryClientProvider,
    BigQueryWarehouseClient,
    build_bigquery_client,
)
from app.infrastructure.external.firestore_sync.types import WarehouseRow
from app.shared.exceptions.sync import ConfigurationException


ROWS = [
    WarehouseRow(insert_id="a", json={"_id": "a", "total": 10}),
    WarehouseRow(insert_id="b", json={"_id": "b", "total": 20}),
]


def _insert(client: BigQueryWarehouseClient):
    return client.bulk_insert(
        project_id="proj",
        dataset_id="ds",
        table_id="orders",
        rows=ROWS,
        ignore_unknown_values=True,
    )


def test_bulk_insert_sends_rows_with_insert_ids() -> None:
    sdk = MagicMock()
    sdk.insert_rows_json.return_value = []

    assert _insert(BigQueryWarehouseClient(sdk)) is None

    sdk.insert_rows_json.assert_called_once_with(
        "proj.ds.orders",
        [{"_id": "a", "total": 10}, {"_id": "b", "total": 20}],
        row_ids=["a", "b"],
        ignore_unknown_values=True,
    )


def test_bulk_insert_returns_row_errors() -> None:
    sdk = MagicMock()
    sdk.insert_rows_json.return_value = [
        {"index": 1, "errors": [{"reason": "invalid", "message": "bad total"}]}
    ]

    failure = _insert(BigQueryWarehouseClient(sdk))

    assert failure is not None
    assert failure.row_errors == [{"index": 1, "errors": [{"reason": "invalid", "message": "bad total"}]}]
    assert "proj.ds.orders" in failure.message


def test_bulk_insert_translates_api_errors() -> None:
    sdk = MagicMock()
    sdk.insert_rows_json.side_effect = google_exceptions.NotFound(
        "Table proj:ds.orders not found", errors=[{"reason": "notFound"}]
    )

    failure = _insert(BigQueryWarehouseClient(sdk))

    assert failure.message == "Table proj:ds.orders not found"
    assert failure.row_errors == [{"reason": "notFound"}]
    assert failure.descriptors() == [{"reason": "notFound"}]


def test_bulk_insert_api_error_without_row_errors_uses_message() -> None:
    sdk = MagicMock()
    sdk.insert_rows_json.side_effect = google_exceptions.ServiceUnavailable("backend caido")

    failure = _insert(BigQueryWarehouseClient(sdk))

    assert failure.descriptors() == [{"message": "backend caido"}]


def test_build_client_requires_project_without_service_key() -> None:
    with pytest.raises(ConfigurationException):
        build_bigquery_client(Settings(BQ_PROJECT_ID="", GCLOUD_SERVICE_KEY=""))


def test_build_client_rejects_malformed_service_key() -> None:
    with pytest.raises(ConfigurationException):
        build_bigquery_client(Settings(GCLOUD_SERVICE_KEY="{no-json"))


def test_build_client_with_service_key_uses_credentials() -> None:
    key = '{"client_email": "svc@proj.iam.gserviceaccount.com", "private_key": "k", "project_id": "from-key"}'
    with patch.object(bq_module, "credentials_from_info") as creds, \
            patch.object(bq_module.bigquery, "Client") as client_cls:
        build_bigquery_client(Settings(GCLOUD_SERVICE_KEY=key, BQ_PROJECT_ID=""))

    client_cls.assert_called_once_with(project="from-key", credentials=creds.return_value)


def test_provider_builds_client_once() -> None:
    BigQueryClientProvider._instance = None
    settings = Settings(BQ_PROJECT_ID="proj")
    try:
        with patch.object(bq_module, "build_bigquery_client") as build:
            first = BigQueryClientProvider.get(settings)
            second = BigQueryClientProvider.get(settings)
        assert first is second
        build.assert_called_once_with(settings)
    finally:
        BigQueryClientProvider.reset()
    assert BigQueryClientProvider._instance is None
