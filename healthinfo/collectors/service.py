"""Local node system-section assembly from the snapshot builders."""

from __future__ import annotations

from typing import Any, Callable, Final, Iterable

from healthinfo.domain import (
    HealthDataType,
    MetricSnapshot,
    SysInfo,
    domain_metric_snapshot_to_dict,
)

from .interfaces import NodeSnapshotPort
from .snapshots import (
    collector_get_cpus,
    collector_get_mem_info,
    collector_get_os_info,
    collector_get_partitions,
    collector_get_proc_info,
)

SnapshotBuilder = Callable[[str], MetricSnapshot[Any]]

SYS_SECTION_BUILDERS: Final[dict[HealthDataType, tuple[str, SnapshotBuilder]]] = {
    HealthDataType.SYS_CPU: ("cpus", collector_get_cpus),
    HealthDataType.SYS_DRIVE_HW: ("partitions", collector_get_partitions),
    HealthDataType.SYS_OS_INFO: ("osinfo", collector_get_os_info),
    HealthDataType.SYS_MEM: ("meminfo", collector_get_mem_info),
    HealthDataType.SYS_PROCESS: ("procinfo", collector_get_proc_info),
}


def collector_collect_sys_info(address: str, data_types: Iterable[HealthDataType]) -> SysInfo:
    """Build the system section for one node from the requested data types.

    Args:
        address: Node address tag for every record.
        data_types: Requested health data categories; types without a local
            builder are ignored.

    Returns:
        SysInfo: Section with one wire record per requested category.

    Raises:
        RuntimeError: Builder failures are embedded as failure records.
    """

    requested_types = {HealthDataType(data_type) for data_type in data_types}
    section_records: dict[str, list[dict[str, Any]]] = {}
    for data_type, (section_name, builder) in SYS_SECTION_BUILDERS.items():
        if data_type not in requested_types:
            continue
        section_records[section_name] = [domain_metric_snapshot_to_dict(builder(address))]
    return SysInfo(**section_records)


class PsutilNodeSnapshotService(NodeSnapshotPort):
    """Node snapshot service backed by the psutil snapshot builders."""

    def __init__(self, node_address: str):
        """Initialize node snapshot service.

        Args:
            node_address: Address tag attached to every record.

        Raises:
            ValueError: Raised when node_address is blank.
        """

        normalized_address = node_address.strip()
        if not normalized_address:
            raise ValueError("node_address must not be blank")
        self._node_address = normalized_address

    def collector_node_address(self) -> str:
        return self._node_address

    def collector_collect_sys_info(self, data_types: Iterable[HealthDataType]) -> SysInfo:
        return collector_collect_sys_info(address=self._node_address, data_types=data_types)
