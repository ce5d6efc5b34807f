"""IpAddress builder for VIP requests."""

from typing import Any

import kopf

from ..constants import IPAM_API_GROUP, IPAM_API_VERSION, IPAM_KIND


def build_ip_address(service: dict[str, Any], provider: str) -> dict[str, Any]:
    """Build the IpAddress requesting a VIP for a Service.

    The request shares the Service's name and namespace and is owned by it, so
    it goes away together with the Service.
    """
    metadata = service["metadata"]
    ip_address = {
        "apiVersion": f"{IPAM_API_GROUP}/{IPAM_API_VERSION}",
        "kind": IPAM_KIND,
        "metadata": {
            "name": metadata["name"],
            "namespace": metadata["namespace"],
            "labels": {"app.kubernetes.io/managed-by": "bigip-ipam-operator"},
        },
        "spec": {
            "description": f"{provider} VIP for service {metadata['namespace']}/{metadata['name']}",
        },
    }
    kopf.append_owner_reference(
        ip_address, owner=service, controller=None, block_owner_deletion=None
    )
    return ip_address


def get_address(ip_address: dict[str, Any]) -> str:
    """Return the assigned address, or an empty string while unassigned."""
    return (ip_address.get("status") or {}).get("address") or ""
