"""Health info response contracts: negotiation envelope and full aggregate.

The aggregate is produced by the cluster and is only validated and rendered
here. Per-node records inside `sys` and the server configuration stay as
plain JSON mappings so new server-side fields pass through untouched.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEALTH_INFO_SERVER_SECTION_KEY: Final[str] = "minio"


class HealthInfoEnvelope(BaseModel):
    """Minimal prefix of the health info stream used for version negotiation.

    Attributes:
        version: Health info version reported by the server.
        error: Application-level error reported with an HTTP 200 status.
    """

    model_config = ConfigDict(extra="ignore")

    version: str = ""
    error: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _validate_version(cls, value: Any) -> Any:
        return "" if value is None else value


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Latency(_WireModel):
    avg: float = 0.0
    max: float = 0.0
    min: float = 0.0
    percentile_50: float = 0.0
    percentile_90: float = 0.0
    percentile_99: float = 0.0


class Throughput(_WireModel):
    avg: int = 0
    max: int = 0
    min: int = 0
    percentile_50: int = 0
    percentile_90: int = 0
    percentile_99: int = 0


class DrivePerfInfo(_WireModel):
    """Write latency and throughput of one drive."""

    error: str | None = None
    path: str = ""
    latency: Latency = Field(default_factory=Latency)
    throughput: Throughput = Field(default_factory=Throughput)


class DrivePerfInfos(_WireModel):
    """Serial and parallel drive performance of one node."""

    addr: str = ""
    error: str | None = None
    serial_perf: list[DrivePerfInfo] = Field(default_factory=list)
    parallel_perf: list[DrivePerfInfo] = Field(default_factory=list)


class PeerNetPerfInfo(_WireModel):
    addr: str = ""
    error: str | None = None
    latency: Latency = Field(default_factory=Latency)
    throughput: Throughput = Field(default_factory=Throughput)


class NetPerfInfo(_WireModel):
    """Network performance from one node to its peers."""

    addr: str = ""
    error: str | None = None
    remote_peers: list[PeerNetPerfInfo] = Field(default_factory=list)


class PerfInfo(_WireModel):
    drives: list[DrivePerfInfos] = Field(default_factory=list)
    net: list[NetPerfInfo] = Field(default_factory=list)
    net_parallel: NetPerfInfo = Field(default_factory=NetPerfInfo)


class SysInfo(_WireModel):
    """Per-node hardware and operating system records of the cluster.

    Each list holds the flattened wire form of one metric snapshot per node.
    """

    cpus: list[dict[str, Any]] = Field(default_factory=list)
    partitions: list[dict[str, Any]] = Field(default_factory=list)
    osinfo: list[dict[str, Any]] = Field(default_factory=list)
    meminfo: list[dict[str, Any]] = Field(default_factory=list)
    procinfo: list[dict[str, Any]] = Field(default_factory=list)


class ServerConfig(_WireModel):
    error: str | None = None
    config: Any = None


class ServerHealthInfo(_WireModel):
    error: str | None = None
    config: ServerConfig = Field(default_factory=ServerConfig)
    info: dict[str, Any] = Field(default_factory=dict)


class HealthInfo(_WireModel):
    """Cluster health aggregate returned by the admin health info endpoint."""

    version: str = ""
    error: str | None = None
    timestamp: datetime | None = None
    sys: SysInfo = Field(default_factory=SysInfo)
    perf: PerfInfo = Field(default_factory=PerfInfo)
    server: ServerHealthInfo = Field(
        default_factory=ServerHealthInfo,
        alias=HEALTH_INFO_SERVER_SECTION_KEY,
    )

    def health_info_to_dict(self) -> dict[str, Any]:
        """Return the aggregate as a JSON-compatible dictionary using wire keys.

        Returns:
            dict[str, Any]: Wire-shaped payload with unset optional fields omitted.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def health_info_json(self) -> str:
        """Render the aggregate as indented JSON.

        Returns:
            str: Indented JSON document using wire keys.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return self.model_dump_json(by_alias=True, exclude_none=True, indent=4)
