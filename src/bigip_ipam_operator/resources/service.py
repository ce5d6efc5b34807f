"""Helpers for reading Service manifests."""

from typing import Any

from ..constants import PROTOCOL_TCP, PROTOCOL_UDP
from ..models.annotations import Annotation


def service_key(service: dict[str, Any]) -> str:
    """Return the ``namespace/name`` key of a Service."""
    metadata = service["metadata"]
    return f"{metadata['namespace']}/{metadata['name']}"


def get_annotation(service: dict[str, Any], annotation: Annotation) -> str:
    """Return an annotation value, or an empty string if unset."""
    annotations = service.get("metadata", {}).get("annotations") or {}
    return annotations.get(annotation.value) or ""


def set_annotation(service: dict[str, Any], annotation: Annotation, value: str) -> bool:
    """Set an annotation in place. Returns True if the value changed."""
    metadata = service.setdefault("metadata", {})
    annotations = metadata.get("annotations")
    if annotations is None:
        annotations = metadata["annotations"] = {}
    if annotations.get(annotation.value) == value:
        return False
    annotations[annotation.value] = value
    return True


def wanted_ports(service: dict[str, Any]) -> list[int]:
    """Return the Service ports to expose, in order.

    UDP ports are never exposed through a virtual server.
    """
    ports = []
    for port in service.get("spec", {}).get("ports") or []:
        if (port.get("protocol") or PROTOCOL_TCP) == PROTOCOL_UDP:
            continue
        ports.append(int(port["port"]))
    return ports

