"""End-to-end tests for the deployment pipeline"""

import pytest

from extension_deploy import Deployer, deploy
from extension_deploy.constants import ErrorCode, PipelineStage
from extension_deploy.models import OperationStatus

from conftest import EXTENSION_NAME, INDEX_HTML, JS_LITERAL

S = PipelineStage


def test_successful_deployment(fake_api, credentials, retry_policy, load_deployment):
    config = load_deployment()

    result = Deployer(credentials, retry_policy).deploy(config)

    assert result.status == OperationStatus.SUCCESS
    assert result.stage == S.DONE
    assert result.stage_history == [
        S.IDLE, S.RESOLVING_REFERENCES, S.SYNCHRONIZING_ASSETS,
        S.REGISTERING_EXTENSION, S.SKIPPED, S.DONE,
    ]
    assert result.registration.action == "created"
    assert result.purge.status == OperationStatus.SKIPPED

    (extension,) = fake_api.extensions.values()
    assert extension["src"] == result.sync.entry_point_url
    assert JS_LITERAL not in config.entry_point_path.read_text(encoding="utf-8")


def test_purge_stage_runs_when_enabled(fake_api, credentials, retry_policy, load_deployment):
    folder_uid = fake_api.add_folder(EXTENSION_NAME)
    stale = fake_api.add_asset(folder_uid, "main.0000.js")

    result = Deployer(credentials, retry_policy).deploy(load_deployment(purge=True))

    assert result.status == OperationStatus.SUCCESS
    assert S.PURGING in result.stage_history
    assert [a.uid for a in result.purge.deleted] == [stale]
    assert stale not in fake_api.assets


def test_fatal_stage_fails_the_run(fake_api, credentials, retry_policy, load_deployment, build_folder):
    (build_folder / "static" / "js" / "main.a1b2.js").unlink()

    result = Deployer(credentials, retry_policy).deploy(load_deployment(purge=True))

    assert result.status == OperationStatus.FAILED
    assert result.stage_history[-2:] == [S.SYNCHRONIZING_ASSETS, S.FAILED]
    assert result.errors[0].code == ErrorCode.ASSET_UPLOAD_FAILED
    assert result.errors[0].context["stage"] == S.SYNCHRONIZING_ASSETS.value
    assert result.registration is None
    assert fake_api.extensions == {}
    assert fake_api.calls_to("delete_asset") == []


def test_registration_failure_is_partial_and_purge_still_runs(fake_api, credentials, retry_policy,
                                                              load_deployment):
    folder_uid = fake_api.add_folder(EXTENSION_NAME)
    stale = fake_api.add_asset(folder_uid, "main.0000.js")
    fake_api.script("create_extension", 422)

    result = Deployer(credentials, retry_policy).deploy(load_deployment(purge=True))

    assert result.status == OperationStatus.PARTIAL
    assert result.stage == S.DONE
    assert result.partial_failures == ["registration"]
    assert result.registration.status_code == 422
    assert [a.uid for a in result.purge.deleted] == [stale]


def test_redeploy_updates_in_place(fake_api, credentials, retry_policy, load_deployment, build_folder):
    deployer = Deployer(credentials, retry_policy)
    first = deployer.deploy(load_deployment())

    # Fresh build output with the same file names
    (build_folder / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    second = deployer.deploy(load_deployment())

    assert second.status == OperationStatus.SUCCESS
    assert second.registration.action == "updated"
    assert second.sync.folder_uid == first.sync.folder_uid
    assert second.sync.entry_point.uid == first.sync.entry_point.uid
    assert len(fake_api.extensions) == 1


def test_module_level_deploy(fake_api, credentials, write_descriptor):
    result = deploy(write_descriptor(), credentials, verbose=True)

    assert result.is_success
    assert result.extension_name == EXTENSION_NAME


def test_result_serializes(fake_api, credentials, retry_policy, load_deployment):
    result = Deployer(credentials, retry_policy).deploy(load_deployment())

    data = result.to_dict()

    assert data["status"] == "success"
    assert data["stage"] == "done"
    assert data["registration"]["action"] == "created"
    assert set(data["sync"]["assets"]) == {"main.a1b2.js", "main.c3d4.css"}
    assert data["partial_failures"] == []


@pytest.mark.asyncio
async def test_deploy_async(fake_api, credentials, retry_policy, load_deployment):
    result = await Deployer(credentials, retry_policy).deploy_async(load_deployment())

    assert result.is_success
