"""FastAPI application factory for the local node agent."""

from fastapi import FastAPI

from healthinfo.collectors import NodeSnapshotPort
from healthinfo.config import HealthSettings
from healthinfo.domain import HEALTH_INFO_VERSION

from .routers import api_create_health_router


def create_api_application(
    settings: HealthSettings,
    node_snapshot_service: NodeSnapshotPort,
) -> FastAPI:
    """Create the FastAPI application instance for the node agent.

    Args:
        settings: Validated settings used for runtime metadata.
        node_snapshot_service: Service collecting local metric records.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        RuntimeError: Raised if application initialization fails.
    """
    application = FastAPI(title="Cluster Health Node Agent")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return service identity for bootstrap verification.

        Returns:
            dict[str, str]: Service name, environment and health info version.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": "cluster-health-client",
            "environment": settings.environment_name,
            "health_info_version": HEALTH_INFO_VERSION,
        }

    application.include_router(api_create_health_router(node_snapshot_service=node_snapshot_service))

    return application
