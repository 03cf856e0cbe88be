from __future__ import annotations

import json

import pytest

from app.infrastructure.external.firestore_sync.credentials import (
    build_service_account_info,
    parse_service_account_json,
)
from app.shared.exceptions.sync import ConfigurationException


def test_parse_unescapes_private_key() -> None:
    raw = json.dumps({"client_email": "svc@x", "private_key": "line1\\nline2", "project_id": "p"})

    info = parse_service_account_json(raw, env_name="GCLOUD_SERVICE_KEY")

    assert info["private_key"] == "line1\nline2"
    assert info["project_id"] == "p"


@pytest.mark.parametrize(
    "raw",
    ["{not json", "[1, 2]", json.dumps({"client_email": "svc@x"}), json.dumps({"private_key": "k"})],
)
def test_parse_rejects_invalid_payloads(raw: str) -> None:
    with pytest.raises(ConfigurationException) as exc_info:
        parse_service_account_json(raw, env_name="GCLOUD_SERVICE_KEY")

    assert "GCLOUD_SERVICE_KEY" in exc_info.value.message


def test_build_info_requires_all_fields() -> None:
    assert build_service_account_info(project_id="p", client_email="", private_key="k") is None


def test_build_info_from_fields() -> None:
    info = build_service_account_info(project_id="p", client_email="svc@x", private_key="a\\nb")

    assert info["type"] == "service_account"
    assert info["private_key"] == "a\nb"
    assert info["client_email"] == "svc@x"
