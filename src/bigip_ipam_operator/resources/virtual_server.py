"""Virtual-server ConfigMap builder.

Everything here is a pure function of the Service manifest and the partition.
Building the same record twice yields byte-identical data, which is what makes
comparing desired and observed records meaningful.
"""

from typing import Any

import kopf

from ..constants import (
    DATA_CONFIG_KEY,
    DATA_SCHEMA_KEY,
    HTTP_PORT,
    HTTPS_PORT,
    LABEL_F5_TYPE,
    LABEL_F5_TYPE_VIRTUAL_SERVER,
    SSL_PROFILE_SEPARATOR,
    VIRTUAL_SERVER_SCHEMA,
)
from ..models.annotations import Annotation
from ..models.virtual_server import (
    Backend,
    F5Mode,
    Frontend,
    SSLProfile,
    VirtualAddress,
    VirtualServer,
    VirtualServerConfig,
)
from .naming import format_record_name
from .service import get_annotation


def virtual_server_options(service: dict[str, Any]) -> tuple[F5Mode, bool]:
    """Return the mode and SSL flag selected by the Service annotations."""
    if get_annotation(service, Annotation.VIP_MODE) == F5Mode.HTTP.value:
        mode = F5Mode.HTTP
    else:
        mode = F5Mode.TCP
    ssl = get_annotation(service, Annotation.SSL_PROFILES) != ""
    return mode, ssl


def frontend_port_for(mode: F5Mode, ssl: bool, service_port: int) -> int:
    """Return the port the virtual server listens on.

    In http mode the port is 443 or 80 whatever the Service port is, so
    several Service ports can map to the same record.
    """
    if mode == F5Mode.TCP:
        return service_port
    return HTTPS_PORT if ssl else HTTP_PORT


def build_ssl_profile(raw: str) -> SSLProfile:
    profiles = raw.split(SSL_PROFILE_SEPARATOR)
    if len(profiles) == 1:
        return SSLProfile(f5ProfileName=raw)
    return SSLProfile(f5ProfileNames=profiles)


def build_virtual_server_config(
    service: dict[str, Any],
    partition: str,
    mode: F5Mode,
    ssl: bool,
    port: int,
    service_port: int,
) -> VirtualServerConfig:
    """Build the virtual-server configuration for one Service port.

    Args:
        service: Service manifest
        partition: BIG-IP partition
        mode: Virtual server mode
        ssl: Whether an SSL profile is attached
        port: Frontend port
        service_port: Service port traffic is forwarded to

    Returns:
        Virtual-server configuration
    """
    frontend = Frontend(
        mode=mode,
        partition=partition,
        virtualAddress=VirtualAddress(port=port),
    )
    if ssl:
        frontend.sslProfile = build_ssl_profile(get_annotation(service, Annotation.SSL_PROFILES))

    return VirtualServerConfig(
        virtualServer=VirtualServer(
            frontend=frontend,
            backend=Backend(serviceName=service["metadata"]["name"], servicePort=service_port),
        )
    )


def build_virtual_server_configmap(
    service: dict[str, Any],
    partition: str,
    mode: F5Mode,
    ssl: bool,
    service_port: int,
) -> dict[str, Any]:
    """Build the virtual-server ConfigMap for one Service port.

    Args:
        service: Service manifest
        partition: BIG-IP partition
        mode: Virtual server mode
        ssl: Whether an SSL profile is attached
        service_port: Service port to expose

    Returns:
        ConfigMap manifest as dictionary
    """
    metadata = service["metadata"]
    port = frontend_port_for(mode, ssl, service_port)
    config = build_virtual_server_config(service, partition, mode, ssl, port, service_port)

    config_map = {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {
            "name": format_record_name(metadata["name"], port),
            "namespace": metadata["namespace"],
            "labels": {LABEL_F5_TYPE: LABEL_F5_TYPE_VIRTUAL_SERVER},
            "annotations": {
                Annotation.RECORD_REQUESTED_VIP.value: get_annotation(
                    service, Annotation.ASSIGNED_VIP
                ),
            },
        },
        "data": {
            DATA_SCHEMA_KEY: VIRTUAL_SERVER_SCHEMA,
            DATA_CONFIG_KEY: config.to_json(),
        },
    }
    # Plain ownership: garbage collection only, no controller flag
    kopf.append_owner_reference(
        config_map, owner=service, controller=None, block_owner_deletion=None
    )
    return config_map
