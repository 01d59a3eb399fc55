"""Adapter layer package for the cluster admin API boundary."""

from .admin_client import AdminHealthInfoClient, adapter_build_health_info_query
from .admin_errors import adapter_close_response, adapter_error_from_response
from .admin_transport import HttpxAdminTransport
from .health_errors import (
	HealthInfoApplicationError,
	HealthInfoClientError,
	HealthInfoDecodeError,
	HealthInfoServerError,
	HealthInfoTimeoutError,
	HealthInfoTransportError,
	HealthInfoVersionError,
)
from .health_stream import HealthInfoStream, JsonDocumentReader
from .interfaces import AdminTransportPort, HealthInfoPort

__all__ = [
	"AdminHealthInfoClient",
	"AdminTransportPort",
	"HealthInfoApplicationError",
	"HealthInfoClientError",
	"HealthInfoDecodeError",
	"HealthInfoPort",
	"HealthInfoServerError",
	"HealthInfoStream",
	"HealthInfoTimeoutError",
	"HealthInfoTransportError",
	"HealthInfoVersionError",
	"HttpxAdminTransport",
	"JsonDocumentReader",
	"adapter_build_health_info_query",
	"adapter_close_response",
	"adapter_error_from_response",
]
