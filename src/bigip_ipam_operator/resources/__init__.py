"""Resource builders for Kubernetes objects."""

from . import ip_address, naming, service, virtual_server

__all__ = ["ip_address", "naming", "service", "virtual_server"]
