"""Collector package for local host metric snapshots."""

from .interfaces import NodeSnapshotPort
from .service import SYS_SECTION_BUILDERS, PsutilNodeSnapshotService, collector_collect_sys_info
from .snapshots import (
    collector_get_cpus,
    collector_get_mem_info,
    collector_get_os_info,
    collector_get_partitions,
    collector_get_proc_info,
)

__all__ = [
    "NodeSnapshotPort",
    "PsutilNodeSnapshotService",
    "SYS_SECTION_BUILDERS",
    "collector_collect_sys_info",
    "collector_get_cpus",
    "collector_get_mem_info",
    "collector_get_os_info",
    "collector_get_partitions",
    "collector_get_proc_info",
]
