"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the node
agent API, prints the local system section, or requests the cluster health
report from the admin endpoint.
"""

import argparse
import json
import logging
from datetime import timedelta

import uvicorn

from healthinfo.adapters import HealthInfoClientError
from healthinfo.bootstrap import bootstrap_create_application, bootstrap_create_health_info_client
from healthinfo.collectors import collector_collect_sys_info
from healthinfo.config import HealthSettings, config_configure_logging, config_load_settings
from healthinfo.domain import HealthDataType, domain_parse_health_data_types

logger = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when the health info request fails.
    """

    argument_parser = argparse.ArgumentParser(description="Cluster health client runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "snapshot", "healthinfo"),
        help="Runtime command: `api` starts the node agent, `snapshot` prints local system metrics, "
        "`healthinfo` requests the cluster health report",
        type=str,
    )
    argument_parser.add_argument(
        "--types",
        dest="types",
        type=str,
        help="Comma-separated health data types; all types when omitted",
    )
    argument_parser.add_argument(
        "--deadline",
        dest="deadline_seconds",
        type=float,
        help="Server-side collection deadline in seconds for `healthinfo`",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    config_configure_logging(level=settings.log_level, json_output=settings.log_json)

    try:
        data_types = main_resolve_data_types(parsed_arguments.types)
    except ValueError as error:
        argument_parser.error(str(error))

    if parsed_arguments.command == "snapshot":
        sys_info = collector_collect_sys_info(address=settings.node_address, data_types=data_types)
        print(json.dumps(sys_info.model_dump(mode="json"), indent=4))
        return

    if parsed_arguments.command == "healthinfo":
        deadline_seconds = parsed_arguments.deadline_seconds
        if deadline_seconds is None:
            deadline_seconds = settings.health_info_deadline_seconds
        if main_request_health_info(settings, data_types, timedelta(seconds=deadline_seconds)) != 0:
            raise SystemExit(1)
        return

    application = bootstrap_create_application(settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


def main_resolve_data_types(raw_types: str | None) -> frozenset[HealthDataType]:
    """Resolve the `--types` argument into health data types.

    Args:
        raw_types: Comma-separated type names, or None for all types.

    Returns:
        frozenset[HealthDataType]: Requested types.

    Raises:
        ValueError: Raised for unknown type names.
    """

    if not raw_types:
        return frozenset(HealthDataType)
    return domain_parse_health_data_types(raw_types.split(","))


def main_request_health_info(
    settings: HealthSettings,
    data_types: frozenset[HealthDataType],
    deadline: timedelta,
) -> int:
    """Request the cluster health report and print the final aggregate.

    Args:
        settings: Validated runtime settings.
        data_types: Requested health data types.
        deadline: Server-side collection deadline.

    Returns:
        int: Process exit status, 0 on success.

    Raises:
        RuntimeError: Client failures are logged and mapped to a non-zero status.
    """

    # Client timeout never shorter than the server-side deadline.
    timeout_seconds = max(settings.admin_request_timeout_seconds, deadline.total_seconds())
    client = bootstrap_create_health_info_client(settings)
    try:
        with client.adapter_request_health_info(
            data_types=data_types,
            deadline=deadline,
            timeout_seconds=timeout_seconds,
        ) as health_stream:
            health_info = health_stream.stream_read_health_info()
    except HealthInfoClientError as error:
        logger.error("health info request failed: %s", error)
        return 1
    finally:
        client.adapter_close()

    print(health_info.health_info_json())
    return 0


if __name__ == "__main__":
    main()
