"""Removal of virtual-server records a Service no longer wants."""

import logging
from collections.abc import Collection

from .constants import LABEL_F5_TYPE, LABEL_F5_TYPE_VIRTUAL_SERVER
from .resources.naming import RecordNameError, parse_record_name
from .utils.kubernetes import ClusterStore

logger = logging.getLogger(__name__)


def sweep_orphans(
    store: ClusterStore,
    namespace: str,
    service_name: str,
    wanted_ports: Collection[int],
) -> list[str]:
    """Delete the records of a Service whose frontend port is not wanted.

    Args:
        store: Cluster store
        namespace: Namespace of the Service
        service_name: Name of the Service
        wanted_ports: Frontend ports that must keep their record

    Returns:
        Names of the deleted records
    """
    deleted = []

    for config_map in store.list_virtual_server_config_maps(namespace):
        metadata = config_map["metadata"]
        name = metadata["name"]

        if (metadata.get("labels") or {}).get(LABEL_F5_TYPE) != LABEL_F5_TYPE_VIRTUAL_SERVER:
            continue

        try:
            record = parse_record_name(name)
        except RecordNameError as e:
            logger.warning(f"skipping virtual-server configmap '{namespace}/{name}': {e}")
            continue

        if record.service_name != service_name or record.port in wanted_ports:
            continue

        logger.info(f"deleting obsolete configmap '{namespace}/{name}'")
        if store.delete_config_map(namespace, name):
            deleted.append(name)

    return deleted
