"""Domain models used across client, collector and API boundaries."""

from .durations import domain_format_duration, domain_truncate_duration
from .health_info import (
    HEALTH_INFO_SERVER_SECTION_KEY,
    DrivePerfInfo,
    DrivePerfInfos,
    HealthInfo,
    HealthInfoEnvelope,
    Latency,
    NetPerfInfo,
    PeerNetPerfInfo,
    PerfInfo,
    ServerConfig,
    ServerHealthInfo,
    SysInfo,
    Throughput,
)
from .health_types import (
    HEALTH_INFO_VERSION,
    HEALTH_INFO_VERSION_0,
    HEALTH_INFO_VERSION_1,
    HealthDataType,
    domain_is_supported_health_info_version,
    domain_parse_health_data_types,
)
from .metrics import (
    CpuInfo,
    CpuSet,
    HostInfo,
    MemInfo,
    MetricFailure,
    MetricSnapshot,
    MetricSuccess,
    OsInfo,
    PartitionFailure,
    PartitionSet,
    PartitionUsage,
    ProcInfo,
    ResourceLimit,
    TemperatureSensor,
    domain_metric_snapshot_to_dict,
)

__all__ = [
    "CpuInfo",
    "CpuSet",
    "DrivePerfInfo",
    "DrivePerfInfos",
    "HEALTH_INFO_SERVER_SECTION_KEY",
    "HEALTH_INFO_VERSION",
    "HEALTH_INFO_VERSION_0",
    "HEALTH_INFO_VERSION_1",
    "HealthDataType",
    "HealthInfo",
    "HealthInfoEnvelope",
    "HostInfo",
    "Latency",
    "MemInfo",
    "MetricFailure",
    "MetricSnapshot",
    "MetricSuccess",
    "NetPerfInfo",
    "OsInfo",
    "PartitionFailure",
    "PartitionSet",
    "PartitionUsage",
    "PeerNetPerfInfo",
    "PerfInfo",
    "ProcInfo",
    "ResourceLimit",
    "ServerConfig",
    "ServerHealthInfo",
    "SysInfo",
    "TemperatureSensor",
    "Throughput",
    "domain_format_duration",
    "domain_is_supported_health_info_version",
    "domain_metric_snapshot_to_dict",
    "domain_parse_health_data_types",
    "domain_truncate_duration",
]
