"""Annotations shared between the operator, the allocator and k8s-bigip-ctlr.

The three parties never talk to each other directly. Each one owns a fixed set
of annotations and only reads the others:

    VIP_REQUESTED         engine        a VIP was requested for the Service
    ASSIGNED_VIP          allocator     the allocated address, written once
    ACTIVE_VIP            engine        every wanted record serves ASSIGNED_VIP
    SSL_PROFILES          user          comma separated BIG-IP SSL profiles
    VIP_MODE              user          "http" or "tcp" (default)
    CONTROLLER_TAG        user          which controller handles the Service
    RECORD_REQUESTED_VIP  engine        copy of ASSIGNED_VIP on each record
    RECORD_STATUS_VIP     loadbalancer  VIP programmed on the device

Lifecycle of a Service:

    unrequested -> VIP_REQUESTED -> ASSIGNED_VIP -> records with
    RECORD_REQUESTED_VIP -> RECORD_STATUS_VIP on every record -> ACTIVE_VIP

A later change of ASSIGNED_VIP restarts at the record step. ACTIVE_VIP only
moves forward.

ASSIGNED_VIP is mirrored onto the Service from ``IpAddress.status.address`` by
the allocation gateway, on behalf of the allocator.
"""

from enum import Enum


class Writer(str, Enum):
    """Party that owns an annotation."""

    ENGINE = "engine"
    ALLOCATOR = "allocator"
    LOADBALANCER = "loadbalancer"
    USER = "user"


class Annotation(str, Enum):
    """Annotation keys used by the operator."""

    # Service
    VIP_REQUESTED = "nexinto.com/req-vip"
    ASSIGNED_VIP = "nexinto.com/assigned-vip"
    ACTIVE_VIP = "nexinto.com/vip"
    SSL_PROFILES = "nexinto.com/vip-ssl-profiles"
    VIP_MODE = "nexinto.com/req-vip-mode"
    CONTROLLER_TAG = "nexinto.com/vip-controller"

    # Virtual-server record
    RECORD_REQUESTED_VIP = "virtual-server.f5.com/ip"
    RECORD_STATUS_VIP = "status.virtual-server.f5.com/ip"


WRITERS: dict[Annotation, Writer] = {
    Annotation.VIP_REQUESTED: Writer.ENGINE,
    Annotation.ASSIGNED_VIP: Writer.ALLOCATOR,
    Annotation.ACTIVE_VIP: Writer.ENGINE,
    Annotation.SSL_PROFILES: Writer.USER,
    Annotation.VIP_MODE: Writer.USER,
    Annotation.CONTROLLER_TAG: Writer.USER,
    Annotation.RECORD_REQUESTED_VIP: Writer.ENGINE,
    Annotation.RECORD_STATUS_VIP: Writer.LOADBALANCER,
}


def owned_by(writer: Writer) -> list[Annotation]:
    """Return the annotations written by ``writer``."""
    return [annotation for annotation, owner in WRITERS.items() if owner == writer]
