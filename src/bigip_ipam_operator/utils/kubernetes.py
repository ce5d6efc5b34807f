"""Kubernetes client utilities for the BIG-IP IPAM Operator."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import kubernetes
from kubernetes import client
from kubernetes.client.rest import ApiException

from ..constants import (
    EVENT_COMPONENT,
    IPAM_API_GROUP,
    IPAM_API_VERSION,
    IPAM_PLURAL,
    VIRTUAL_SERVER_SELECTOR,
)

logger = logging.getLogger(__name__)


def get_k8s_client() -> client.ApiClient:
    """Get Kubernetes API client.

    Attempts to load in-cluster config first, falls back to kubeconfig.
    """
    try:
        kubernetes.config.load_incluster_config()
        logger.debug("Loaded in-cluster Kubernetes config")
    except kubernetes.config.ConfigException:
        kubernetes.config.load_kube_config()
        logger.debug("Loaded kubeconfig")

    return client.ApiClient()


def is_not_found(e: ApiException) -> bool:
    return e.status == 404


class ClusterStore:
    """Reads and writes the objects the operator works with.

    Objects are exchanged as manifest dictionaries with camelCase keys. Reads
    return None when the object does not exist; every other API error is
    raised. Writes send the ``resourceVersion`` they were given, so a write
    based on stale data fails with a 409 conflict.
    """

    def __init__(self, api_client: Optional[client.ApiClient] = None):
        self.api_client = api_client or client.ApiClient()
        self.core = client.CoreV1Api(self.api_client)
        self.custom = client.CustomObjectsApi(self.api_client)

    def _to_dict(self, obj: Any) -> dict[str, Any]:
        return self.api_client.sanitize_for_serialization(obj)

    # Services

    def get_service(self, namespace: str, name: str) -> Optional[dict[str, Any]]:
        try:
            return self._to_dict(self.core.read_namespaced_service(name, namespace))
        except ApiException as e:
            if is_not_found(e):
                return None
            raise

    def replace_service(self, service: dict[str, Any]) -> dict[str, Any]:
        metadata = service["metadata"]
        result = self.core.replace_namespaced_service(
            metadata["name"], metadata["namespace"], service
        )
        logger.debug(f"Updated Service/{metadata['name']}")
        return self._to_dict(result)

    # Virtual-server ConfigMaps

    def get_config_map(self, namespace: str, name: str) -> Optional[dict[str, Any]]:
        try:
            return self._to_dict(self.core.read_namespaced_config_map(name, namespace))
        except ApiException as e:
            if is_not_found(e):
                return None
            raise

    def list_virtual_server_config_maps(self, namespace: str) -> list[dict[str, Any]]:
        result = self.core.list_namespaced_config_map(
            namespace, label_selector=VIRTUAL_SERVER_SELECTOR
        )
        return [self._to_dict(item) for item in result.items]

    def create_config_map(self, config_map: dict[str, Any]) -> dict[str, Any]:
        namespace = config_map["metadata"]["namespace"]
        result = self.core.create_namespaced_config_map(namespace, config_map)
        logger.debug(f"Created ConfigMap/{config_map['metadata']['name']}")
        return self._to_dict(result)

    def replace_config_map(self, config_map: dict[str, Any]) -> dict[str, Any]:
        metadata = config_map["metadata"]
        result = self.core.replace_namespaced_config_map(
            metadata["name"], metadata["namespace"], config_map
        )
        logger.debug(f"Updated ConfigMap/{metadata['name']}")
        return self._to_dict(result)

    def delete_config_map(self, namespace: str, name: str) -> bool:
        """Delete a ConfigMap. Returns False if it was already gone."""
        try:
            self.core.delete_namespaced_config_map(name, namespace)
        except ApiException as e:
            if is_not_found(e):
                logger.debug(f"ConfigMap/{name} not found, nothing to delete")
                return False
            raise
        logger.debug(f"Deleted ConfigMap/{name}")
        return True

    # IpAddresses

    def get_ip_address(self, namespace: str, name: str) -> Optional[dict[str, Any]]:
        try:
            return self.custom.get_namespaced_custom_object(
                IPAM_API_GROUP, IPAM_API_VERSION, namespace, IPAM_PLURAL, name
            )
        except ApiException as e:
            if is_not_found(e):
                return None
            raise

    def create_ip_address(self, ip_address: dict[str, Any]) -> dict[str, Any]:
        namespace = ip_address["metadata"]["namespace"]
        result = self.custom.create_namespaced_custom_object(
            IPAM_API_GROUP, IPAM_API_VERSION, namespace, IPAM_PLURAL, ip_address
        )
        logger.debug(f"Created IpAddress/{ip_address['metadata']['name']}")
        return result

    # Events

    def create_event(
        self,
        involved: dict[str, Any],
        reason: str,
        message: str,
        warning: bool = False,
    ) -> None:
        """Post an Event about an object."""
        metadata = involved["metadata"]
        now = datetime.now(timezone.utc).isoformat()
        event = {
            "apiVersion": "v1",
            "kind": "Event",
            "metadata": {
                "generateName": f"{metadata['name']}.",
                "namespace": metadata["namespace"],
            },
            "involvedObject": {
                "apiVersion": involved.get("apiVersion", "v1"),
                "kind": involved.get("kind", "Service"),
                "name": metadata["name"],
                "namespace": metadata["namespace"],
                "uid": metadata.get("uid"),
                "resourceVersion": metadata.get("resourceVersion"),
            },
            "reason": reason,
            "message": message,
            "type": "Warning" if warning else "Normal",
            "source": {"component": EVENT_COMPONENT},
            "firstTimestamp": now,
            "lastTimestamp": now,
            "count": 1,
        }
        self.core.create_namespaced_event(metadata["namespace"], event)
