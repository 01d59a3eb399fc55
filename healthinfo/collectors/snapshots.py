"""Per-node metric snapshot builders backed by psutil.

Every builder is a stateless leaf: it queries one metrics domain and returns
a `MetricSuccess` with the shaped payload or, on the first provider failure,
a `MetricFailure` carrying the error text.
"""

from __future__ import annotations

import logging
import os
import platform
import socket
import sys
import time
from pathlib import Path
from typing import Any, Final

import psutil

from healthinfo.domain import (
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
)

logger = logging.getLogger(__name__)

COLLECTOR_ERRORS: Final[tuple[type[BaseException], ...]] = (psutil.Error, OSError, AttributeError)

_RLIMIT_NAMES: Final[tuple[str, ...]] = (
    "RLIMIT_AS",
    "RLIMIT_CORE",
    "RLIMIT_CPU",
    "RLIMIT_DATA",
    "RLIMIT_FSIZE",
    "RLIMIT_LOCKS",
    "RLIMIT_MEMLOCK",
    "RLIMIT_MSGQUEUE",
    "RLIMIT_NICE",
    "RLIMIT_NOFILE",
    "RLIMIT_NPROC",
    "RLIMIT_RSS",
    "RLIMIT_RTPRIO",
    "RLIMIT_RTTIME",
    "RLIMIT_SIGPENDING",
    "RLIMIT_STACK",
)


def _collector_platform_name() -> str:
    return sys.platform


def _collector_is_linux() -> bool:
    return _collector_platform_name().startswith("linux")


def _collector_unsupported_os(address: str) -> MetricFailure:
    return MetricFailure(address=address, error=f"unsupported operating system {_collector_platform_name()}")


def _collector_failure(address: str, domain: str, error: BaseException) -> MetricFailure:
    logger.warning("%s collection failed on %s: %s", domain, address, error)
    return MetricFailure(address=address, error=str(error) or type(error).__name__)


# CPU


def _collector_read_cpuinfo_text() -> str | None:
    cpuinfo_path = Path("/proc/cpuinfo")
    if not cpuinfo_path.exists():
        return None
    return cpuinfo_path.read_text()


def _collector_parse_cpuinfo(cpuinfo_text: str) -> list[dict[str, str]]:
    """Split `/proc/cpuinfo` into one key/value mapping per logical processor."""
    processors: list[dict[str, str]] = []
    current: dict[str, str] = {}
    for line in cpuinfo_text.splitlines():
        if not line.strip():
            if current:
                processors.append(current)
                current = {}
            continue
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        current[key.strip().lower()] = value.strip()
    if current:
        processors.append(current)
    return [processor for processor in processors if "processor" in processor]


def _collector_int(value: str | None) -> int:
    if not value:
        return 0
    try:
        return int(value.split()[0])
    except ValueError:
        return 0


def _collector_float(value: str | None) -> float:
    if not value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def _collector_cpu_from_processors(processors: list[dict[str, str]]) -> CpuInfo:
    first = processors[0]
    return CpuInfo(
        vendor_id=first.get("vendor_id", ""),
        family=first.get("cpu family", ""),
        model=first.get("model", ""),
        stepping=_collector_int(first.get("stepping")),
        physical_id=first.get("physical id", ""),
        model_name=first.get("model name", ""),
        mhz=_collector_float(first.get("cpu mhz")),
        cache_size=_collector_int(first.get("cache size")),
        flags=tuple(first.get("flags", "").split()),
        microcode=first.get("microcode", ""),
        cores=len(processors),
    )


def _collector_cpu_fallback() -> CpuInfo:
    frequency = psutil.cpu_freq()
    return CpuInfo(
        vendor_id="",
        family="",
        model="",
        stepping=0,
        physical_id="0",
        model_name=platform.processor() or platform.machine(),
        mhz=float(frequency.current) if frequency else 0.0,
        cache_size=0,
        flags=(),
        microcode="",
        cores=psutil.cpu_count(logical=True) or 0,
    )


def collector_get_cpus(address: str) -> MetricSnapshot[CpuSet]:
    """Collect CPU package information grouped by physical id.

    Args:
        address: Node address tag for the record.

    Returns:
        MetricSnapshot[CpuSet]: One `CpuInfo` per physical package, or a failure.

    Raises:
        RuntimeError: Provider failures are returned as `MetricFailure`.
    """

    try:
        cpuinfo_text = _collector_read_cpuinfo_text()
        processors = _collector_parse_cpuinfo(cpuinfo_text) if cpuinfo_text else []
        if not processors:
            return MetricSuccess(address=address, payload=CpuSet(cpus=(_collector_cpu_fallback(),)))
    except COLLECTOR_ERRORS as error:
        return _collector_failure(address, "cpu", error)

    packages: dict[str, list[dict[str, str]]] = {}
    for processor in processors:
        packages.setdefault(processor.get("physical id", ""), []).append(processor)

    cpus = tuple(_collector_cpu_from_processors(package) for package in packages.values())
    return MetricSuccess(address=address, payload=CpuSet(cpus=cpus))


# Partitions


def _collector_inode_usage(mountpoint: str) -> tuple[int, int]:
    stats = os.statvfs(mountpoint)
    return int(stats.f_files), int(stats.f_ffree)


def collector_get_partitions(address: str) -> MetricSnapshot[PartitionSet]:
    """Collect mounted disk partitions with space and inode usage (Linux only).

    A partition whose usage cannot be read is reported as a `PartitionFailure`
    entry without failing the whole set.

    Args:
        address: Node address tag for the record.

    Returns:
        MetricSnapshot[PartitionSet]: Partition entries, or a failure.

    Raises:
        RuntimeError: Provider failures are returned as `MetricFailure`.
    """

    if not _collector_is_linux():
        return _collector_unsupported_os(address)

    try:
        disk_partitions = psutil.disk_partitions(all=False)
    except COLLECTOR_ERRORS as error:
        return _collector_failure(address, "partition", error)

    partitions: list[PartitionUsage | PartitionFailure] = []
    for disk_partition in disk_partitions:
        try:
            usage = psutil.disk_usage(disk_partition.mountpoint)
            inode_total, inode_free = _collector_inode_usage(disk_partition.mountpoint)
        except COLLECTOR_ERRORS as error:
            partitions.append(PartitionFailure(device=disk_partition.device, error=str(error)))
            continue
        partitions.append(
            PartitionUsage(
                device=disk_partition.device,
                mountpoint=disk_partition.mountpoint,
                fs_type=disk_partition.fstype,
                mount_options=disk_partition.opts,
                mount_fs_type=disk_partition.fstype,
                space_total=int(usage.total),
                space_free=int(usage.free),
                inode_total=inode_total,
                inode_free=inode_free,
            )
        )

    return MetricSuccess(address=address, payload=PartitionSet(partitions=tuple(partitions)))


# Operating system


def _collector_read_os_release() -> dict[str, str]:
    data: dict[str, str] = {}
    path = Path("/etc/os-release")
    if not path.exists():
        return data
    for line in path.read_text().splitlines():
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip('"')
    return data


def _collector_read_host_id() -> str:
    for candidate in (Path("/etc/machine-id"), Path("/var/lib/dbus/machine-id")):
        if candidate.exists():
            return candidate.read_text().strip()
    return ""


def _collector_host_info() -> HostInfo:
    uname = platform.uname()
    os_release = _collector_read_os_release()
    boot_time = int(psutil.boot_time())
    return HostInfo(
        hostname=socket.gethostname(),
        uptime=max(0, int(time.time()) - boot_time),
        boot_time=boot_time,
        procs=len(psutil.pids()),
        os=uname.system.lower(),
        platform=os_release.get("ID", ""),
        platform_family=os_release.get("ID_LIKE", os_release.get("ID", "")),
        platform_version=os_release.get("VERSION_ID", ""),
        kernel_version=uname.release,
        kernel_arch=uname.machine,
        host_id=_collector_read_host_id(),
    )


def _collector_temperature_sensors() -> tuple[TemperatureSensor, ...]:
    if not hasattr(psutil, "sensors_temperatures"):
        return ()
    sensors: list[TemperatureSensor] = []
    for chip_name, readings in psutil.sensors_temperatures().items():
        for reading in readings:
            sensor_key = f"{chip_name}_{reading.label}" if reading.label else chip_name
            sensors.append(
                TemperatureSensor(
                    sensor_key=sensor_key,
                    temperature=float(reading.current),
                    high=reading.high,
                    critical=reading.critical,
                )
            )
    return tuple(sensors)


def collector_get_os_info(address: str) -> MetricSnapshot[OsInfo]:
    """Collect operating system identity and temperature sensors (Linux only).

    Args:
        address: Node address tag for the record.

    Returns:
        MetricSnapshot[OsInfo]: Host info with sensors, or a failure.

    Raises:
        RuntimeError: Provider failures are returned as `MetricFailure`.
    """

    if not _collector_is_linux():
        return _collector_unsupported_os(address)

    try:
        host_info = _collector_host_info()
        sensors = _collector_temperature_sensors()
    except COLLECTOR_ERRORS as error:
        return _collector_failure(address, "os", error)

    return MetricSuccess(address=address, payload=OsInfo(info=host_info, sensors=sensors))


# Memory


def collector_get_mem_info(address: str) -> MetricSnapshot[MemInfo]:
    """Collect RAM and swap capacity.

    Args:
        address: Node address tag for the record.

    Returns:
        MetricSnapshot[MemInfo]: Memory totals, or a failure.

    Raises:
        RuntimeError: Provider failures are returned as `MetricFailure`.
    """

    try:
        virtual_memory = psutil.virtual_memory()
        swap_memory = psutil.swap_memory()
    except COLLECTOR_ERRORS as error:
        return _collector_failure(address, "memory", error)

    return MetricSuccess(
        address=address,
        payload=MemInfo(
            total=int(virtual_memory.total),
            available=int(virtual_memory.available),
            swap_space_total=int(swap_memory.total),
            swap_space_free=int(swap_memory.free),
        ),
    )


# Process


def _collector_read_proc_stat(pid: int) -> list[str]:
    """Return `/proc/<pid>/stat` fields following the command name.

    Index 0 is the process state; index 2 the process group and index 5 the
    terminal foreground process group.
    """
    stat_text = Path(f"/proc/{pid}/stat").read_text()
    return stat_text[stat_text.rindex(")") + 2 :].split()


def _collector_read_tgid(pid: int) -> int:
    for line in Path(f"/proc/{pid}/status").read_text().splitlines():
        if line.startswith("Tgid:"):
            return int(line.split(":", 1)[1])
    raise OSError(f"Tgid missing from /proc/{pid}/status")


def _collector_process_cpu_percent(process: psutil.Process) -> float:
    """Average CPU usage over the whole lifetime of the process."""
    cpu_times = process.cpu_times()
    elapsed_seconds = time.time() - process.create_time()
    if elapsed_seconds <= 0:
        return 0.0
    return 100.0 * (cpu_times.user + cpu_times.system) / elapsed_seconds


def _collector_process_rlimits(process: psutil.Process) -> tuple[ResourceLimit, ...]:
    limits: list[ResourceLimit] = []
    for limit_name in _RLIMIT_NAMES:
        resource = getattr(psutil, limit_name, None)
        if resource is None:
            continue
        soft, hard = process.rlimit(resource)
        limits.append(ResourceLimit(resource=limit_name, soft=int(soft), hard=int(hard)))
    return tuple(limits)


def _collector_net_io_counters() -> tuple[dict[str, Any], ...]:
    counters = psutil.net_io_counters(pernic=True)
    return tuple({"name": name, **nic_counters._asdict()} for name, nic_counters in sorted(counters.items()))


def _collector_proc_info(process: psutil.Process) -> ProcInfo:
    pid = process.pid
    stat_fields = _collector_read_proc_stat(pid)

    try:
        children_pids = tuple(child.pid for child in process.children())
    except psutil.Error:
        children_pids = ()
    try:
        ppid = process.ppid()
    except psutil.Error:
        ppid = 0

    return ProcInfo(
        pid=pid,
        is_background=stat_fields[2] != stat_fields[5],
        cpu_percent=_collector_process_cpu_percent(process),
        children_pids=children_pids,
        cmd_line=" ".join(process.cmdline()),
        num_connections=len(process.net_connections(kind="all")),
        create_time=int(process.create_time() * 1000),
        cwd=process.cwd(),
        exec_path=process.exe(),
        gids=tuple(process.gids()),
        io_counters=dict(process.io_counters()._asdict()),
        net_io_counters=_collector_net_io_counters(),
        is_running=process.is_running(),
        mem_info=dict(process.memory_info()._asdict()),
        mem_maps=tuple(dict(memory_map._asdict()) for memory_map in process.memory_maps(grouped=True)),
        mem_percent=float(process.memory_percent()),
        name=process.name(),
        nice=int(process.nice()),
        num_ctx_switches=dict(process.num_ctx_switches()._asdict()),
        num_fds=process.num_fds(),
        num_threads=process.num_threads(),
        page_faults={
            "minor_faults": int(stat_fields[7]),
            "major_faults": int(stat_fields[9]),
            "child_minor_faults": int(stat_fields[8]),
            "child_major_faults": int(stat_fields[10]),
        },
        ppid=ppid,
        status=process.status(),
        tgid=_collector_read_tgid(pid),
        times=dict(process.cpu_times()._asdict()),
        uids=tuple(process.uids()),
        username=process.username(),
        rlimit=_collector_process_rlimits(process),
    )


def collector_get_proc_info(address: str) -> MetricSnapshot[ProcInfo]:
    """Collect runtime statistics of the current process.

    Children and parent lookups are best-effort; any other provider failure
    stops collection and is returned as a failure.

    Args:
        address: Node address tag for the record.

    Returns:
        MetricSnapshot[ProcInfo]: Process statistics, or a failure.

    Raises:
        RuntimeError: Provider failures are returned as `MetricFailure`.
    """

    try:
        process = psutil.Process(os.getpid())
        proc_info = _collector_proc_info(process)
    except (IndexError, ValueError) as error:
        return _collector_failure(address, "process", OSError(f"unreadable process stat: {error}"))
    except COLLECTOR_ERRORS as error:
        return _collector_failure(address, "process", error)

    return MetricSuccess(address=address, payload=proc_info)
