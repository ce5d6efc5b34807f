"""Models for the BIG-IP IPAM Operator."""

from .annotations import WRITERS, Annotation, Writer
from .settings import OperatorSettings
from .status import ReconcilePhase, ReconcileResult
from .virtual_server import F5Mode, VirtualServerConfig

__all__ = [
    "WRITERS",
    "Annotation",
    "Writer",
    "OperatorSettings",
    "ReconcilePhase",
    "ReconcileResult",
    "F5Mode",
    "VirtualServerConfig",
]
