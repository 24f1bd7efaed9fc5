"""Orchestrator entity records.

Records are snapshots of remote entities. Only the fields the adapter reads
carry concrete types; the rest are declared as ``Any`` for documentation and
everything else the server sends is kept as extra fields. Both are returned
unchanged when the record is dumped with ``by_alias=True``, so a field whose
shape changes between Orchestrator versions never breaks a listing.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal


class ODataRecord(BaseModel):
    """Base for records whose wire fields are PascalCase."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump back to the server's field names, extras included."""
        return self.model_dump(by_alias=True, mode="json")


class StatsRecord(ODataRecord):
    """Base for the camelCase records returned by /api/Stats routes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class Folder(ODataRecord):
    id: int
    display_name: str | None = None
    fully_qualified_name: Any = None
    parent_id: Any = None
    is_personal: Any = None


class Robot(ODataRecord):
    id: Any = None
    name: Any = None
    type: Any = None
    machine_name: Any = None
    is_enabled: Any = None


class Machine(ODataRecord):
    id: Any = None
    name: Any = None
    type: Any = None
    is_online: Any = None


class AssetValue(ODataRecord):
    """An asset value resolved for a specific robot."""

    id: Any = None
    name: Any = None
    value_type: Any = None
    string_value: Any = None
    bool_value: Any = None
    int_value: Any = None


class Asset(ODataRecord):
    id: Any = None
    name: Any = None
    value_type: Any = None
    value_scope: Any = None
    folder_id: Any = None


class RobotLog(ODataRecord):
    id: Any = None
    time_stamp: Any = None
    level: Any = None
    message: Any = None
    job_key: Any = None


class QueueDefinition(ODataRecord):
    id: int
    name: str
    description: Any = None


class QueueItem(ODataRecord):
    id: Any = None
    queue_definition_id: Any = None
    status: Any = None
    reference: Any = None
    priority: Any = None
    specific_content: Any = None


class Job(ODataRecord):
    id: int
    key: str | None = None
    state: str | None = None
    release_name: Any = None
    info: Any = None
    # Plain text on older servers, an object on newer ones
    job_error: Any = None
    creation_time: Any = None
    start_time: str | None = None
    end_time: str | None = None
    host_machine_name: Any = None


class Release(ODataRecord):
    key: str
    process_key: str | None = None
    process_version: Any = None
    name: str | None = None
    is_latest_version: Any = None


class Session(ODataRecord):
    id: Any = None
    robot_name: Any = None
    machine_name: Any = None
    state: Any = None


class ProcessSchedule(ODataRecord):
    id: Any = None
    name: Any = None
    release_name: Any = None
    start_process_cron: Any = None
    enabled: Any = None
    next_execution_time: Any = None


class AuditLog(ODataRecord):
    id: Any = None
    execution_time: Any = None
    user_name: Any = None
    action: Any = None
    component: Any = None


class LicenseRuntime(ODataRecord):
    key: Any = None
    machine_name: Any = None
    runtimes: Any = None
    is_online: Any = None


class LicenseNamedUser(ODataRecord):
    key: Any = None
    user_name: Any = None
    is_licensed: Any = None


class ConsumptionLicenseStats(StatsRecord):
    type: Any = None
    used: Any = None
    total: Any = None
    timestamp: Any = None


class LicenseStats(StatsRecord):
    robot_type: Any = None
    count: Any = None
    timestamp: Any = None


class CountStats(StatsRecord):
    title: Any = None
    count: Any = None
    has_permissions: Any = None


RecordT = TypeVar("RecordT", bound=ODataRecord)


class PagedResult(BaseModel, Generic[RecordT]):
    """One page of a collection.

    ``total_count`` is None when the server could not report an exact count
    for the query shape (see the $count fallback in ``client.odata``).
    """

    items: list[RecordT] = Field(default_factory=list)
    total_count: int | None = None
