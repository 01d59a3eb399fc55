"""Typed per-node metric records produced by the snapshot builders.

Each builder returns either a `MetricSuccess` holding a payload or a
`MetricFailure` holding only an error message, so a record can never carry
both data and an error. `domain_metric_snapshot_to_dict` flattens either
variant into the wire form used inside the health info `sys` section.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Generic, TypeVar, Union

PayloadT = TypeVar("PayloadT")


@dataclass(frozen=True)
class MetricSuccess(Generic[PayloadT]):
    """Successful metric collection for one node.

    Attributes:
        address: Node address the metrics were collected on.
        payload: Domain payload record.
    """

    address: str
    payload: PayloadT


@dataclass(frozen=True)
class MetricFailure:
    """Failed metric collection for one node.

    Attributes:
        address: Node address the collection was attempted on.
        error: Human-readable failure message.
    """

    address: str
    error: str


MetricSnapshot = Union[MetricSuccess[PayloadT], MetricFailure]


@dataclass(frozen=True)
class CpuInfo:
    """One physical CPU package."""

    vendor_id: str
    family: str
    model: str
    stepping: int
    physical_id: str
    model_name: str
    mhz: float
    cache_size: int
    flags: tuple[str, ...]
    microcode: str
    cores: int


@dataclass(frozen=True)
class CpuSet:
    cpus: tuple[CpuInfo, ...]


@dataclass(frozen=True)
class PartitionUsage:
    """Mounted partition with capacity and inode usage."""

    device: str
    mountpoint: str
    fs_type: str
    mount_options: str
    mount_fs_type: str
    space_total: int
    space_free: int
    inode_total: int
    inode_free: int


@dataclass(frozen=True)
class PartitionFailure:
    """Partition whose usage could not be read."""

    device: str
    error: str


@dataclass(frozen=True)
class PartitionSet:
    partitions: tuple[Union[PartitionUsage, PartitionFailure], ...]


@dataclass(frozen=True)
class HostInfo:
    """Operating system identity and uptime of one host."""

    hostname: str
    uptime: int
    boot_time: int
    procs: int
    os: str
    platform: str
    platform_family: str
    platform_version: str
    kernel_version: str
    kernel_arch: str
    host_id: str


@dataclass(frozen=True)
class TemperatureSensor:
    sensor_key: str
    temperature: float
    high: float | None
    critical: float | None


@dataclass(frozen=True)
class OsInfo:
    info: HostInfo
    sensors: tuple[TemperatureSensor, ...]


@dataclass(frozen=True)
class MemInfo:
    """RAM and swap capacity in bytes."""

    total: int
    available: int
    swap_space_total: int
    swap_space_free: int


@dataclass(frozen=True)
class ResourceLimit:
    resource: str
    soft: int
    hard: int


@dataclass(frozen=True)
class ProcInfo:
    """Runtime statistics of the current process.

    Counter groups reported by the metrics provider (I/O, memory, context
    switches, page faults and CPU times) are kept as plain name-to-value
    mappings because their fields differ between platforms.
    """

    pid: int
    is_background: bool
    cpu_percent: float
    children_pids: tuple[int, ...]
    cmd_line: str
    num_connections: int
    create_time: int
    cwd: str
    exec_path: str
    gids: tuple[int, ...]
    io_counters: dict[str, int]
    net_io_counters: tuple[dict[str, Any], ...]
    is_running: bool
    mem_info: dict[str, int]
    mem_maps: tuple[dict[str, Any], ...]
    mem_percent: float
    name: str
    nice: int
    num_ctx_switches: dict[str, int]
    num_fds: int
    num_threads: int
    page_faults: dict[str, int]
    ppid: int
    status: str
    tgid: int
    times: dict[str, float]
    uids: tuple[int, ...]
    username: str
    rlimit: tuple[ResourceLimit, ...]


def domain_metric_snapshot_to_dict(snapshot: MetricSnapshot[Any]) -> dict[str, Any]:
    """Flatten one metric snapshot into its wire dictionary.

    Args:
        snapshot: Success or failure record.

    Returns:
        dict[str, Any]: `addr` plus either `error` or the payload fields.

    Raises:
        TypeError: Raised when the snapshot is not a metric record.
    """

    if isinstance(snapshot, MetricFailure):
        return {"addr": snapshot.address, "error": snapshot.error}
    if isinstance(snapshot, MetricSuccess):
        payload_fields = asdict(snapshot.payload)
        return {"addr": snapshot.address, **payload_fields}
    raise TypeError(f"unsupported metric snapshot type: {type(snapshot).__name__}")
