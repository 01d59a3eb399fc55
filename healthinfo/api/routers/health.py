"""Health and system-section endpoints of the local node agent."""

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from healthinfo.collectors import NodeSnapshotPort
from healthinfo.domain import HealthDataType, domain_parse_health_data_types


def api_create_health_router(node_snapshot_service: NodeSnapshotPort) -> APIRouter:
    """Create router exposing node liveness and local system metrics.

    Args:
        node_snapshot_service: Collector-layer node snapshot service.

    Returns:
        APIRouter: Router exposing `/health` and `/sysinfo` endpoints.

    Raises:
        ValueError: Raised when node_snapshot_service is invalid.
    """

    if node_snapshot_service is None:
        raise ValueError("node_snapshot_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return node agent liveness.

        Returns:
            JSONResponse: Deterministic liveness payload.

        Raises:
            RuntimeError: Raised if node identity cannot be resolved.
        """

        payload = {
            "status": "ok",
            "app": "up",
            "node": node_snapshot_service.collector_node_address(),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/sysinfo")
    def api_sysinfo(types: list[str] | None = Query(default=None)) -> JSONResponse:
        """Return the local system section for requested health data types.

        Args:
            types: Requested type names; every system type when omitted.

        Returns:
            JSONResponse: System section payload, or 400 for unknown type names.

        Raises:
            RuntimeError: Collection failures are embedded in the payload.
        """

        try:
            data_types = domain_parse_health_data_types(types) if types else frozenset(HealthDataType)
        except ValueError as error:
            payload = {"status": "error", "message": str(error)}
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        sys_info = node_snapshot_service.collector_collect_sys_info(data_types)
        return JSONResponse(
            content=sys_info.model_dump(mode="json"),
            status_code=status.HTTP_200_OK,
        )

    return router
