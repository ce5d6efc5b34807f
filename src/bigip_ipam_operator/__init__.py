"""BIG-IP IPAM Operator.

Provisions F5 BIG-IP virtual servers for Kubernetes Services with VIPs
allocated through IpAddress objects.
"""

__version__ = "0.1.0"
