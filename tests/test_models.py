"""Tests for data models"""

import pytest

from extension_deploy.constants import ExtensionKind, PipelineStage
from extension_deploy.models import (
    DeploymentResult,
    ExtensionRecord,
    ManagementCredentials,
    OperationStatus,
    PurgeResult,
    RegistrationResult,
    RemoteAsset,
    RetryPolicy,
)


def test_field_payload():
    record = ExtensionRecord(title="picker", type=ExtensionKind.FIELD, src="https://x", data_type="json",
                             tags=["react"], config='{"a": 1}')

    assert record.to_payload() == {"extension": {
        "tags": ["react"],
        "title": "picker",
        "src": "https://x",
        "multiple": False,
        "type": "field",
        "config": '{"a": 1}',
        "data_type": "json",
    }}


def test_widget_payload():
    record = ExtensionRecord(title="seo", type=ExtensionKind.WIDGET, data_type="text", scope=["page"])

    extension = record.to_payload()["extension"]

    assert extension["scope"] == {"content_types": ["page"]}
    assert extension["data_type"] == "text"
    assert "config" not in extension


def test_dashboard_payload():
    record = ExtensionRecord(title="stats", type=ExtensionKind.DASHBOARD, default_width="half")

    extension = record.to_payload()["extension"]

    assert extension["default_width"] == "half"
    assert "data_type" not in extension
    assert "scope" not in extension


def test_record_from_projected_lookup_uses_queried_kind():
    record = ExtensionRecord.from_dict({"uid": "ext1", "title": "stats"}, default_kind=ExtensionKind.DASHBOARD)

    assert record.type == ExtensionKind.DASHBOARD
    assert not record.is_new


def test_folder_entry_uses_name_as_title():
    asset = RemoteAsset.from_dict({"uid": "f1", "name": "images", "is_dir": True})

    assert asset.title == "images"
    assert asset.is_dir


def test_credentials_are_required():
    with pytest.raises(ValueError, match="Management token"):
        ManagementCredentials(api_key="key", management_token="")


def test_credentials_repr_hides_secrets():
    credentials = ManagementCredentials(api_key="secret-key", management_token="secret-token")

    assert "secret" not in repr(credentials)
    assert credentials.headers == {"api_key": "secret-key", "authorization": "secret-token"}


def test_retry_policy_needs_an_attempt():
    with pytest.raises(ValueError):
        RetryPolicy(attempts=0)


def test_keep_set(load_deployment):
    config = load_deployment()

    assert config.keep_set() == {"index.html", "main.a1b2.js", "main.c3d4.css"}


def test_purge_result_finalize():
    asset = RemoteAsset(uid="blt1", title="old.js")

    clean = PurgeResult()
    clean.record_deleted(asset)
    clean.finalize()
    assert clean.status == OperationStatus.SUCCESS

    mixed = PurgeResult()
    mixed.record_deleted(asset)
    mixed.record_failure(RemoteAsset(uid="blt2", title="older.js"), 403, "Forbidden")
    mixed.finalize()
    assert mixed.status == OperationStatus.PARTIAL

    failed = PurgeResult()
    failed.record_failure(asset, 403, "Forbidden")
    failed.finalize()
    assert failed.status == OperationStatus.FAILED


def test_partial_failures():
    result = DeploymentResult(extension_name="picker")
    result.registration = RegistrationResult()
    result.registration.complete(OperationStatus.FAILED)
    result.purge = PurgeResult()
    result.purge.complete(OperationStatus.SKIPPED)

    assert result.partial_failures == ["registration"]


def test_stage_history():
    result = DeploymentResult()
    result.transition(PipelineStage.IDLE)
    result.transition(PipelineStage.FAILED)

    assert result.stage == PipelineStage.FAILED
    assert result.stage_history == [PipelineStage.IDLE, PipelineStage.FAILED]
    assert [s["stage"] for s in result.to_dict()["stages"]] == ["idle", "failed"]
