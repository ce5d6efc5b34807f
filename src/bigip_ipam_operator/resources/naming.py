"""Names of virtual-server records.

A record is named ``bigip-<serviceName>-<frontendPort>``. Service names may
contain ``-`` themselves, so the port is always taken from the last segment:
a port never contains the separator, which makes parsing the exact inverse of
formatting for every non-empty service name.
"""

from typing import NamedTuple

from ..constants import RECORD_PREFIX, RECORD_SEPARATOR

_PREFIX = f"{RECORD_PREFIX}{RECORD_SEPARATOR}"


class RecordNameError(ValueError):
    """Raised when a name is not a virtual-server record name."""


class RecordName(NamedTuple):
    service_name: str
    port: int


def format_record_name(service_name: str, port: int) -> str:
    """Build the record name for a Service and frontend port."""
    if not service_name:
        raise RecordNameError("service name must not be empty")
    if not (1 <= port <= 65535):
        raise RecordNameError(f"port must be between 1 and 65535, got {port}")
    return f"{_PREFIX}{service_name}{RECORD_SEPARATOR}{port}"


def parse_record_name(name: str) -> RecordName:
    """Recover the Service name and frontend port from a record name."""
    if not name.startswith(_PREFIX):
        raise RecordNameError(f"{name!r} does not start with {_PREFIX!r}")

    service_name, sep, port = name[len(_PREFIX):].rpartition(RECORD_SEPARATOR)
    if not sep or not service_name:
        raise RecordNameError(f"{name!r} has no service name")

    # Only the canonical form produced by format_record_name is accepted
    if not port.isascii() or not port.isdigit() or port.startswith("0"):
        raise RecordNameError(f"{name!r} has an invalid port {port!r}")
    value = int(port)
    if value > 65535:
        raise RecordNameError(f"{name!r} has an out of range port {value}")

    return RecordName(service_name, value)
