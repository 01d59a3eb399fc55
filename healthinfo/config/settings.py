"""Typed runtime settings with dotenv support and startup validation."""

import socket

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class HealthSettings(BaseSettings):
    """Settings for the health info client and the local node agent.

    Environment variable names map directly to field names in uppercase.
    Example: `admin_endpoint_url` reads from `ADMIN_ENDPOINT_URL`.

    Attributes:
        environment_name: Runtime environment label.
        node_address: Address tag attached to local metric records.
        admin_endpoint_url: Scheme and authority of the cluster admin endpoint.
        admin_api_prefix: Path prefix of the admin API.
        admin_access_token: Optional bearer token for admin requests.
        admin_verify_tls: Whether admin endpoint certificates are verified.
        admin_request_timeout_seconds: Client-side admin request timeout.
        health_info_deadline_seconds: Default server-side collection deadline.
        application_host: Host interface for the node agent API.
        application_port: Node agent API port.
        log_level: Root log level name.
        log_json: Whether log records are rendered as JSON.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    node_address: str = Field(default_factory=socket.gethostname, min_length=1)
    admin_endpoint_url: str = Field(default="http://127.0.0.1:9000", min_length=1)
    admin_api_prefix: str = Field(default="/minio/admin/v3")
    admin_access_token: str | None = Field(default=None)
    admin_verify_tls: bool = Field(default=True)
    health_info_deadline_seconds: float = Field(default=3600.0, ge=0)
    admin_request_timeout_seconds: float = Field(default=3900.0, gt=0)
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8080, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @field_validator("node_address", "admin_endpoint_url")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("admin_api_prefix")
    @classmethod
    def _validate_api_prefix(cls, value: str) -> str:
        stripped_value = value.strip().rstrip("/")
        if not stripped_value.startswith("/"):
            raise ValueError("admin_api_prefix must start with '/'")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError("log_level must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG")
        return normalized_value

    @field_validator("admin_request_timeout_seconds")
    @classmethod
    def _validate_timeout_covers_deadline(cls, value: float, info) -> float:
        deadline_seconds = float(info.data.get("health_info_deadline_seconds", 3600.0))
        if value < deadline_seconds:
            raise ValueError(
                "admin_request_timeout_seconds must be greater than or equal to health_info_deadline_seconds"
            )
        return value


def config_load_settings() -> HealthSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        HealthSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return HealthSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
