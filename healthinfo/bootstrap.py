"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from healthinfo.adapters import AdminHealthInfoClient, HttpxAdminTransport
from healthinfo.api import create_api_application
from healthinfo.collectors import PsutilNodeSnapshotService
from healthinfo.config import HealthSettings, config_load_settings


def bootstrap_create_application(settings: HealthSettings | None = None) -> FastAPI:
    """Assemble the node agent application after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    node_snapshot_service = PsutilNodeSnapshotService(node_address=resolved_settings.node_address)
    return create_api_application(
        settings=resolved_settings,
        node_snapshot_service=node_snapshot_service,
    )


def bootstrap_create_health_info_client(settings: HealthSettings | None = None) -> AdminHealthInfoClient:
    """Build the admin health info client for non-HTTP trigger surfaces.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        AdminHealthInfoClient: Client wired to the configured admin endpoint.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    transport = HttpxAdminTransport(
        endpoint_url=resolved_settings.admin_endpoint_url,
        admin_api_prefix=resolved_settings.admin_api_prefix,
        access_token=resolved_settings.admin_access_token,
        request_timeout_seconds=resolved_settings.admin_request_timeout_seconds,
        verify_tls=resolved_settings.admin_verify_tls,
    )
    return AdminHealthInfoClient(transport=transport)
