"""Utility functions for the BIG-IP IPAM Operator."""

from .kubernetes import ClusterStore, get_k8s_client
from .log import configure_logging
from .validation import validate_service, validate_settings

__all__ = [
    "ClusterStore",
    "get_k8s_client",
    "configure_logging",
    "validate_service",
    "validate_settings",
]
