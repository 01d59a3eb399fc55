"""Typed interfaces for collector-layer services."""

from typing import Iterable, Protocol

from healthinfo.domain import HealthDataType, SysInfo


class NodeSnapshotPort(Protocol):
    """Port definition for collecting the local node's system section."""

    def collector_node_address(self) -> str:
        """Return the address tag attached to every local metric record.

        Returns:
            str: Node address label.

        Raises:
            RuntimeError: Raised when node identity is unavailable.
        """

    def collector_collect_sys_info(self, data_types: Iterable[HealthDataType]) -> SysInfo:
        """Collect requested system metric records for the local node.

        Args:
            data_types: Requested health data categories; non-system types are ignored.

        Returns:
            SysInfo: System section containing one record per requested category.

        Raises:
            RuntimeError: Collection failures are embedded as failure records.
        """
