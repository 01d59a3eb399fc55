"""Health data type tags and health info version constants."""

from __future__ import annotations

from enum import Enum
from typing import Final, Iterable

HEALTH_INFO_VERSION_0: Final[str] = ""
HEALTH_INFO_VERSION_1: Final[str] = "1"
HEALTH_INFO_VERSION: Final[str] = HEALTH_INFO_VERSION_1


class HealthDataType(str, Enum):
    """Categories of health data a caller can request from the admin endpoint."""

    PERF_DRIVE = "perfdrive"
    PERF_NET = "perfnet"
    SERVER_INFO = "minioinfo"
    SERVER_CONFIG = "minioconfig"
    SYS_CPU = "syscpu"
    SYS_DRIVE_HW = "sysdrivehw"
    SYS_DOCKER = "sysdocker"
    SYS_OS_INFO = "sysosinfo"
    SYS_LOAD = "sysload"
    SYS_MEM = "sysmem"
    SYS_NET = "sysnet"
    SYS_PROCESS = "sysprocess"


def domain_parse_health_data_types(names: Iterable[str]) -> frozenset[HealthDataType]:
    """Resolve health data type names into enum members.

    Args:
        names: Wire names such as `syscpu` or `perfdrive`. Blank entries are skipped.

    Returns:
        frozenset[HealthDataType]: Resolved health data types.

    Raises:
        ValueError: Raised when any name is not a known health data type.
    """

    resolved_types: set[HealthDataType] = set()
    unknown_names: list[str] = []
    for name in names:
        normalized_name = name.strip().lower()
        if not normalized_name:
            continue
        try:
            resolved_types.add(HealthDataType(normalized_name))
        except ValueError:
            unknown_names.append(name.strip())

    if unknown_names:
        raise ValueError(f"unknown health data type(s): {', '.join(sorted(unknown_names))}")
    return frozenset(resolved_types)


def domain_is_supported_health_info_version(version: str) -> bool:
    """Return whether a server-reported health info version is readable by this client.

    Args:
        version: Version tag from the response envelope.

    Returns:
        bool: True for the legacy empty version and the current version.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return version in (HEALTH_INFO_VERSION_0, HEALTH_INFO_VERSION)
