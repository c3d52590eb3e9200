"""Tests for purging stale assets"""

import pytest

from extension_deploy.constants import ErrorCode, MSG_NOTHING_TO_PURGE
from extension_deploy.models import OperationStatus
from extension_deploy.remote import ManagementClient
from extension_deploy.services import PurgeAgent

from conftest import EXTENSION_NAME


async def _purge(config, folder_uid, credentials, retry_policy):
    async with ManagementClient(credentials, retry_policy) as client:
        return await PurgeAgent(client, config).purge(folder_uid)


@pytest.fixture
def deployed_folder(fake_api):
    """Extension folder holding the current deployment plus leftovers"""
    folder_uid = fake_api.add_folder(EXTENSION_NAME)
    for title in ("index.html", "main.a1b2.js", "main.c3d4.css"):
        fake_api.add_asset(folder_uid, title)
    fake_api.add_folder("images", parent_uid=folder_uid)
    return folder_uid


@pytest.mark.asyncio
async def test_disabled_purge_is_skipped(fake_api, credentials, retry_policy, load_deployment, deployed_folder):
    result = await _purge(load_deployment(), deployed_folder, credentials, retry_policy)

    assert result.status == OperationStatus.SKIPPED
    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_deletes_only_stale_assets(fake_api, credentials, retry_policy, load_deployment, deployed_folder):
    stale = [fake_api.add_asset(deployed_folder, t) for t in ("main.0000.js", "main.9999.css")]

    result = await _purge(load_deployment(purge=True), deployed_folder, credentials, retry_policy)

    assert result.status == OperationStatus.SUCCESS
    assert sorted(a.uid for a in result.deleted) == sorted(stale)
    remaining = sorted(a["title"] for a in fake_api.assets_in(deployed_folder))
    assert remaining == ["index.html", "main.a1b2.js", "main.c3d4.css"]
    assert fake_api.folder_named("images") is not None


@pytest.mark.asyncio
async def test_nothing_to_purge(fake_api, credentials, retry_policy, load_deployment, deployed_folder):
    result = await _purge(load_deployment(purge=True), deployed_folder, credentials, retry_policy)

    assert result.status == OperationStatus.SUCCESS
    assert result.message == MSG_NOTHING_TO_PURGE
    assert fake_api.calls_to("delete_asset") == []


@pytest.mark.asyncio
async def test_failed_deletion_does_not_stop_the_rest(fake_api, credentials, retry_policy, load_deployment,
                                                      deployed_folder):
    first = fake_api.add_asset(deployed_folder, "old.1.js")
    second = fake_api.add_asset(deployed_folder, "old.2.js")
    fake_api.script("delete_asset", 403)

    result = await _purge(load_deployment(purge=True), deployed_folder, credentials, retry_policy)

    assert result.status == OperationStatus.PARTIAL
    assert [f.asset.uid for f in result.failures] == [first]
    assert result.failures[0].status_code == 403
    assert result.failures[0].status_text == "Forbidden"
    assert [a.uid for a in result.deleted] == [second]
    assert result.errors[0].code == ErrorCode.PURGE_FAILED


@pytest.mark.asyncio
async def test_every_deletion_failing_is_failed(fake_api, credentials, retry_policy, load_deployment,
                                                deployed_folder):
    fake_api.add_asset(deployed_folder, "old.1.js")
    fake_api.script("delete_asset", 403)

    result = await _purge(load_deployment(purge=True), deployed_folder, credentials, retry_policy)

    assert result.status == OperationStatus.FAILED
    assert result.deleted == []


@pytest.mark.asyncio
async def test_listing_failure_is_reported_not_raised(fake_api, credentials, retry_policy, load_deployment,
                                                      deployed_folder):
    fake_api.script("list_assets", 403)

    result = await _purge(load_deployment(purge=True), deployed_folder, credentials, retry_policy)

    assert result.status == OperationStatus.FAILED
    assert result.errors[0].context["operation"] == "list"
    assert fake_api.calls_to("delete_asset") == []
