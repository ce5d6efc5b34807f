"""Mapping of watched objects to the Service keys they affect."""

from typing import Any

from .constants import (
    LABEL_F5_TYPE,
    LABEL_F5_TYPE_VIRTUAL_SERVER,
    SERVICE_API_VERSION,
    SERVICE_KIND,
)
from .models.annotations import Annotation
from .workqueue import make_key


def keys_for_service(body: dict[str, Any]) -> list[str]:
    metadata = body["metadata"]
    return [make_key(metadata["namespace"], metadata["name"])]


def keys_for_ip_address(body: dict[str, Any]) -> list[str]:
    """An IpAddress has the same name and namespace as its Service."""
    metadata = body["metadata"]
    return [make_key(metadata["namespace"], metadata["name"])]


def keys_for_virtual_server(body: dict[str, Any]) -> list[str]:
    """Services owning a virtual-server record that k8s-bigip-ctlr has programmed.

    Records without a status VIP are still waiting for k8s-bigip-ctlr and
    cannot change the outcome of a reconcile.
    """
    metadata = body["metadata"]
    if (metadata.get("labels") or {}).get(LABEL_F5_TYPE) != LABEL_F5_TYPE_VIRTUAL_SERVER:
        return []
    if not (metadata.get("annotations") or {}).get(Annotation.RECORD_STATUS_VIP.value):
        return []

    return [
        make_key(metadata["namespace"], ref["name"])
        for ref in metadata.get("ownerReferences") or []
        if ref.get("kind") == SERVICE_KIND and ref.get("apiVersion") == SERVICE_API_VERSION
    ]
