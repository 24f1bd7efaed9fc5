"""Tests for OrchestratorClient entity operations."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from uipath_mcp.client.orchestrator import OrchestratorClient
from uipath_mcp.exceptions import ApiError, ResponseFormatError
from uipath_mcp.models.config import ClientConfig
from uipath_mcp.models.enums import JobState, QueueItemStatus, RobotType, StopStrategy

INVALID_ODATA_BODY = '{"message": "Invalid OData query options"}'


def _make_client(*results, default_folder_id: int | None = None) -> OrchestratorClient:
    config = ClientConfig(
        base_url="https://cloud.uipath.com/acme",
        tenant_name="Prod",
        client_id="id",
        client_secret="secret",
        default_folder_id=default_folder_id,
    )
    executor = MagicMock()
    executor.execute = AsyncMock(side_effect=list(results))
    return OrchestratorClient(config, executor=executor)


def _call(client: OrchestratorClient, index: int = 0):
    """(method, path, params, kwargs) of the n-th executor call."""
    call = client.executor.execute.call_args_list[index]
    params = call.args[2] if len(call.args) > 2 else call.kwargs.get("params")
    return call.args[0], call.args[1], params, call.kwargs


def _job(job_id: int, state: str = "Successful", **extra) -> dict:
    return {"Id": job_id, "Key": f"key-{job_id}", "State": state, "ReleaseName": "Invoices", **extra}


class TestFolderScope:
    def test_explicit_folder_wins(self):
        client = _make_client(default_folder_id=5)
        assert client.resolve_folder(9) == 9

    def test_default_folder(self):
        client = _make_client(default_folder_id=5)
        assert client.resolve_folder(None) == 5

    def test_zero_is_explicit(self):
        client = _make_client(default_folder_id=5)
        assert client.resolve_folder(0) == 0

    def test_tenant_wide(self):
        assert _make_client().resolve_folder(None) is None


class TestListings:
    """Default paging, ordering and filters per collection."""

    @pytest.mark.asyncio
    async def test_get_folders(self):
        client = _make_client({"value": [{"Id": 1, "DisplayName": "Shared"}], "@odata.count": 1})

        page = await client.get_folders()

        assert page.items[0].display_name == "Shared"
        assert page.total_count == 1
        _, path, params, kwargs = _call(client)
        assert path == "/odata/Folders"
        assert params == {"$top": "100", "$skip": "0", "$orderby": "DisplayName asc", "$count": "true"}
        assert kwargs["folder_id"] is None

    @pytest.mark.asyncio
    async def test_get_robots_tenant_wide(self):
        client = _make_client({"value": [{"Id": 3, "Name": "bot"}], "@odata.count": 1})

        page = await client.get_robots()

        assert page.items[0].name == "bot"
        _, path, params, _ = _call(client)
        assert path == "/odata/Robots"
        assert params["$orderby"] == "Name asc"

    @pytest.mark.asyncio
    async def test_get_robots_in_folder_uses_folder_route(self):
        client = _make_client({"value": []})

        await client.get_robots(folder_id=17)

        _, path, _, kwargs = _call(client)
        assert path == "/odata/Robots/UiPath.Server.Configuration.OData.GetRobotsFromFolder(folderId=17)"
        assert kwargs["folder_id"] is None

    @pytest.mark.asyncio
    async def test_get_machines(self):
        client = _make_client({"value": [], "@odata.count": 0})

        page = await client.get_machines(top=10, skip=10)

        assert page.total_count == 0
        _, path, params, _ = _call(client)
        assert path == "/odata/Machines"
        assert params["$top"] == "10"
        assert params["$skip"] == "10"

    @pytest.mark.asyncio
    async def test_get_robot_logs_filters(self):
        client = _make_client({"value": [], "@odata.count": 0}, default_folder_id=4)

        await client.get_robot_logs(
            job_key="abc", level="Error", start_time="2024-01-01T00:00:00Z", end_time="2024-01-02T00:00:00Z"
        )

        _, path, params, kwargs = _call(client)
        assert path == "/odata/RobotLogs"
        assert params["$orderby"] == "TimeStamp desc"
        assert params["$filter"] == (
            "JobKey eq 'abc' and Level eq 'Error' and TimeStamp ge 2024-01-01T00:00:00Z "
            "and TimeStamp le 2024-01-02T00:00:00Z"
        )
        assert kwargs["folder_id"] == 4

    @pytest.mark.asyncio
    async def test_get_sessions_has_no_ordering(self):
        client = _make_client({"value": [], "@odata.count": 0})

        await client.get_sessions(state="Available")

        _, path, params, _ = _call(client)
        assert path == "/odata/Sessions"
        assert "$orderby" not in params
        assert params["$filter"] == "State eq 'Available'"

    @pytest.mark.asyncio
    async def test_get_sessions_fallback_counts_page(self):
        client = _make_client(ApiError(400, INVALID_ODATA_BODY), {"value": [{"Id": 1}, {"Id": 2}]})

        page = await client.get_sessions()

        assert page.total_count == 2
        assert "$count" not in _call(client, 1)[2]

    @pytest.mark.asyncio
    async def test_get_process_schedules_enabled_filter(self):
        client = _make_client({"value": [], "@odata.count": 0})

        await client.get_process_schedules(enabled=False)

        _, path, params, _ = _call(client)
        assert path == "/odata/ProcessSchedules"
        assert params["$filter"] == "Enabled eq false"

    @pytest.mark.asyncio
    async def test_get_assets(self):
        client = _make_client({"value": [{"Id": 1, "Name": "ApiKey", "ValueType": "Text"}], "@odata.count": 1})

        page = await client.get_assets(folder_id=2)

        assert page.items[0].value_type == "Text"
        _, path, params, kwargs = _call(client)
        assert path == "/odata/Assets"
        assert params["$orderby"] == "Name asc"
        assert kwargs["folder_id"] == 2

    @pytest.mark.asyncio
    async def test_get_audit_logs_is_tenant_wide(self):
        client = _make_client({"value": [], "@odata.count": 0}, default_folder_id=4)

        await client.get_audit_logs(action="Create", user_name="admin", component="Jobs")

        _, path, params, kwargs = _call(client)
        assert path == "/odata/AuditLogs"
        assert params["$orderby"] == "ExecutionTime desc"
        assert params["$filter"] == "Action eq 'Create' and UserName eq 'admin' and Component eq 'Jobs'"
        assert kwargs["folder_id"] is None

    @pytest.mark.asyncio
    async def test_records_keep_unknown_fields(self):
        client = _make_client({"value": [{"Id": 1, "DisplayName": "A", "ProvisionType": "Manual"}]})

        page = await client.get_folders()

        assert page.items[0].to_wire()["ProvisionType"] == "Manual"


class TestQueues:
    @pytest.mark.asyncio
    async def test_get_queue_items_filters_and_defaults(self):
        client = _make_client({"value": [{"Id": 1, "Status": "New"}], "@odata.count": 10})

        page = await client.get_queue_items(queue_id=8, status=QueueItemStatus.NEW, folder_id=3)

        assert page.total_count == 10
        _, path, params, kwargs = _call(client)
        assert path == "/odata/QueueItems"
        assert params == {
            "$top": "100",
            "$skip": "0",
            "$orderby": "CreationTime desc",
            "$count": "true",
            "$filter": "QueueDefinitionId eq 8 and Status eq 'New'",
        }
        assert kwargs["folder_id"] == 3

    @pytest.mark.asyncio
    async def test_get_queue_items_fallback_total_unknown(self):
        client = _make_client(ApiError(400, INVALID_ODATA_BODY), {"value": [{"Id": 1}]})

        page = await client.get_queue_items(queue_id=8)

        assert len(page.items) == 1
        assert page.total_count is None
        retry_params = _call(client, 1)[2]
        assert "$count" not in retry_params
        assert "$orderby" not in retry_params

    @pytest.mark.asyncio
    async def test_get_queue_definitions(self):
        client = _make_client({"value": [{"Id": 1, "Name": "Orders"}, {"Id": 2, "Name": "Refunds"}]})

        queues = await client.get_queue_definitions(folder_id=6)

        assert [q.name for q in queues] == ["Orders", "Refunds"]
        _, path, _, kwargs = _call(client)
        assert path == "/odata/QueueDefinitions"
        assert kwargs["folder_id"] == 6

    @pytest.mark.asyncio
    async def test_get_queue_definition_by_name(self):
        client = _make_client({"value": [{"Id": 4, "Name": "Bob's Orders"}]})

        queue = await client.get_queue_definition_by_name("Bob's Orders")

        assert queue.id == 4
        assert _call(client)[2] == {"$filter": "Name eq 'Bob''s Orders'"}

    @pytest.mark.asyncio
    async def test_get_queue_definition_by_name_missing(self):
        client = _make_client({"value": []})
        assert await client.get_queue_definition_by_name("Nope") is None

    @pytest.mark.asyncio
    async def test_add_queue_item_envelope(self):
        client = _make_client({"Id": 77, "Status": "New", "Reference": "INV-1"})

        item = await client.add_queue_item("Orders", {"Amount": 10}, reference="INV-1", folder_id=3)

        assert item.id == 77
        method, path, _, kwargs = _call(client)
        assert method == "POST"
        assert path == "/odata/Queues/UiPathODataSvc.AddQueueItem"
        assert kwargs["body"] == {
            "itemData": {
                "Name": "Orders",
                "SpecificContent": {"Amount": 10},
                "Priority": "Normal",
                "Reference": "INV-1",
            }
        }


class TestJobs:
    @pytest.mark.asyncio
    async def test_get_jobs_filters(self):
        client = _make_client({"value": [_job(1)], "@odata.count": 1})

        page = await client.get_jobs(state=JobState.FAULTED, release_name="Invoices")

        assert page.items[0].key == "key-1"
        _, path, params, _ = _call(client)
        assert path == "/odata/Jobs"
        assert params["$filter"] == "State eq 'Faulted' and ReleaseName eq 'Invoices'"
        assert params["$orderby"] == "CreationTime desc"

    @pytest.mark.asyncio
    async def test_get_faulted_jobs_raw_defaults(self):
        client = _make_client({"value": [_job(1, "Faulted")]})

        jobs = await client.get_faulted_jobs_raw(release_name="Invoices")

        assert jobs[0].state == "Faulted"
        params = _call(client)[2]
        assert params == {
            "$top": "50",
            "$orderby": "CreationTime desc",
            "$filter": "State eq 'Faulted' and ReleaseName eq 'Invoices'",
        }

    @pytest.mark.asyncio
    async def test_get_faulted_jobs_raw_fallback_drops_order(self):
        client = _make_client(ApiError(400, INVALID_ODATA_BODY), {"value": []})

        await client.get_faulted_jobs_raw()

        assert _call(client, 1)[2] == {"$top": "50", "$filter": "State eq 'Faulted'"}

    @pytest.mark.asyncio
    async def test_get_job(self):
        client = _make_client(_job(12, "Running"))

        job = await client.get_job(12, folder_id=1)

        assert job.state == "Running"
        assert _call(client)[1] == "/odata/Jobs(12)"

    @pytest.mark.asyncio
    async def test_start_job_envelope(self):
        client = _make_client({"value": [_job(100, "Pending"), _job(101, "Pending")]})

        jobs = await client.start_job("rel-key", input_arguments={"in_Count": 3}, jobs_count=2)

        assert [j.id for j in jobs] == [100, 101]
        method, path, _, kwargs = _call(client)
        assert method == "POST"
        assert path == "/odata/Jobs/UiPath.Server.Configuration.OData.StartJobs"
        start_info = kwargs["body"]["startInfo"]
        assert start_info["ReleaseKey"] == "rel-key"
        assert start_info["Strategy"] == "ModernJobsCount"
        assert start_info["JobsCount"] == 2
        assert json.loads(start_info["InputArguments"]) == {"in_Count": 3}

    @pytest.mark.asyncio
    async def test_start_job_without_arguments(self):
        client = _make_client({"value": []})

        await client.start_job("rel-key")

        start_info = _call(client)[3]["body"]["startInfo"]
        assert "InputArguments" not in start_info
        assert start_info["JobsCount"] == 1

    @pytest.mark.asyncio
    async def test_stop_job(self):
        client = _make_client(None)

        result = await client.stop_job(5, StopStrategy.KILL)

        assert result is None
        method, path, _, kwargs = _call(client)
        assert method == "POST"
        assert path == "/odata/Jobs(5)/UiPath.Server.Configuration.OData.StopJob"
        assert kwargs["body"] == {"strategy": "Kill"}

    @pytest.mark.asyncio
    async def test_stop_job_defaults_to_soft_stop(self):
        client = _make_client(None)
        await client.stop_job(5)
        assert _call(client)[3]["body"] == {"strategy": "SoftStop"}


class TestReleasesAndLookups:
    @pytest.mark.asyncio
    async def test_get_releases_by_process_key(self):
        client = _make_client({"value": [{"Key": "k1", "ProcessKey": "Invoices", "Name": "Invoices_Prod"}]})

        releases = await client.get_releases(process_key="Invoices")

        assert releases[0].name == "Invoices_Prod"
        _, path, params, _ = _call(client)
        assert path == "/odata/Releases"
        assert params == {"$filter": "ProcessKey eq 'Invoices'"}

    @pytest.mark.asyncio
    async def test_get_releases_unfiltered(self):
        client = _make_client({"value": []})
        await client.get_releases()
        assert _call(client)[2] is None

    @pytest.mark.asyncio
    async def test_get_robot_asset_encodes_name(self):
        client = _make_client({"Name": "API Key", "ValueType": "Text", "StringValue": "xyz"})

        asset = await client.get_robot_asset(3, "API Key")

        assert asset.string_value == "xyz"
        assert _call(client)[1] == (
            "/odata/Assets/UiPath.Server.Configuration.OData.GetRobotAssetByRobotId"
            "(robotId=3,assetName='API%20Key')"
        )


class TestLicensing:
    @pytest.mark.asyncio
    async def test_consumption_license_stats_params(self):
        client = _make_client([{"type": "PlatformUnits", "used": 3, "total": 10}])

        stats = await client.get_consumption_license_stats(tenant_id=1, days=30)

        assert stats[0].used == 3
        _, path, params, _ = _call(client)
        assert path == "/api/Stats/GetConsumptionLicenseStats"
        assert params == {"tenantId": "1", "days": "30"}

    @pytest.mark.asyncio
    async def test_license_stats_without_params(self):
        client = _make_client([])
        assert await client.get_license_stats() == []
        assert _call(client)[2] is None

    @pytest.mark.asyncio
    async def test_licenses_runtime_route(self):
        client = _make_client({"value": [{"Key": "m1", "MachineName": "VM1", "Runtimes": 2}], "@odata.count": 1})

        page = await client.get_licenses_runtime(RobotType.UNATTENDED)

        assert page.items[0].machine_name == "VM1"
        assert page.total_count == 1
        assert _call(client)[1] == (
            "/odata/LicensesRuntime/UiPath.Server.Configuration.OData.GetLicensesRuntime(robotType='Unattended')"
        )

    @pytest.mark.asyncio
    async def test_licenses_named_user_route(self):
        client = _make_client({"value": []})

        await client.get_licenses_named_user("Attended")

        assert _call(client)[1] == (
            "/odata/LicensesNamedUser/UiPath.Server.Configuration.OData.GetLicensesNamedUser(robotType='Attended')"
        )

    @pytest.mark.asyncio
    async def test_count_and_session_stats(self):
        client = _make_client(
            [{"title": "Processes", "count": 4, "hasPermissions": True}],
            [{"title": "Available", "count": 2}],
        )

        counts = await client.get_count_stats()
        sessions = await client.get_sessions_stats()

        assert counts[0].has_permissions is True
        assert sessions[0].title == "Available"
        assert _call(client, 0)[1] == "/api/Stats/GetCountStats"
        assert _call(client, 1)[1] == "/api/Stats/GetSessionsStats"


class TestRecordShapes:
    """Fields the client does not interpret are passed through as sent."""

    @pytest.mark.asyncio
    async def test_object_job_error_is_passed_through(self):
        job_error = {"Code": "X", "Title": "boom", "Details": {"Line": 4}}
        client = _make_client({"value": [_job(1, "Faulted", JobError=job_error, Info=None)], "@odata.count": 1})

        page = await client.get_jobs()

        assert page.items[0].job_error == job_error
        assert page.items[0].to_wire()["JobError"] == job_error

    @pytest.mark.asyncio
    async def test_unexpected_field_shapes_do_not_break_listing(self):
        client = _make_client({
            "value": [
                _job(1, HostMachineName={"Name": "VM1"}, CreationTime=1700000000),
                _job(2, NewServerField=[1, 2]),
            ],
            "@odata.count": 2,
        })

        page = await client.get_jobs()

        assert [job.id for job in page.items] == [1, 2]
        assert page.items[1].to_wire()["NewServerField"] == [1, 2]

    @pytest.mark.asyncio
    async def test_license_runtime_counts_pass_through(self):
        client = _make_client({"value": [{"Key": "k", "Runtimes": {"Unattended": 2}}]})

        page = await client.get_licenses_runtime("Unattended")

        assert page.items[0].runtimes == {"Unattended": 2}

    @pytest.mark.asyncio
    async def test_malformed_record_is_a_response_error(self):
        client = _make_client({"value": [{"Id": "not-a-number", "State": "Running"}]})

        with pytest.raises(ResponseFormatError) as exc_info:
            await client.get_jobs()

        assert exc_info.value.record_name == "Job"
        assert exc_info.value.error_type == "response_error"
        assert not isinstance(exc_info.value, ValidationError)
