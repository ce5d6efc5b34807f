"""VIP requests against the IPAM controller."""

import copy
import logging
from dataclasses import dataclass
from typing import Any

from kubernetes.client.rest import ApiException

from .constants import DEFAULT_CONTROLLER_TAG, VIP_PROVIDER_BIGIP
from .errors import AllocationError
from .models.annotations import Annotation
from .resources.ip_address import build_ip_address, get_address
from .resources.service import get_annotation, service_key, set_annotation
from .utils.kubernetes import ClusterStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VipAllocation:
    """State of the VIP of a Service.

    ``service`` is a copy of the Service carrying the annotations written by
    the gateway; it must be persisted when ``needs_service_update`` is set.
    """

    has_address: bool
    needs_service_update: bool
    service: dict[str, Any]


class AllocationGateway:
    """Requests VIPs by creating IpAddress objects and reads back the result."""

    def __init__(
        self,
        store: ClusterStore,
        provider: str = VIP_PROVIDER_BIGIP,
        controller_tag: str = DEFAULT_CONTROLLER_TAG,
        require_tag: bool = False,
    ):
        self.store = store
        self.provider = provider
        self.controller_tag = controller_tag
        self.require_tag = require_tag

    def handles(self, service: dict[str, Any]) -> bool:
        """Whether this controller is responsible for the Service."""
        tag = get_annotation(service, Annotation.CONTROLLER_TAG)
        if tag:
            return tag == self.controller_tag
        return not self.require_tag

    def ensure_vip(self, service: dict[str, Any]) -> VipAllocation:
        """Request a VIP for the Service if needed and report whether one is assigned.

        Raises:
            AllocationError: if the IpAddress could not be read or created
        """
        key = service_key(service)
        updated = copy.deepcopy(service)
        needs_update = set_annotation(updated, Annotation.VIP_REQUESTED, self.provider)

        namespace = service["metadata"]["namespace"]
        name = service["metadata"]["name"]
        try:
            ip_address = self.store.get_ip_address(namespace, name)
            if ip_address is None:
                self.store.create_ip_address(build_ip_address(service, self.provider))
                logger.info(f"requested vip for service '{key}'")
                return VipAllocation(False, needs_update, updated)
        except ApiException as e:
            raise AllocationError(f"error getting vip for service '{key}': {e}") from e

        address = get_address(ip_address)
        if not address:
            logger.debug(f"no vip assigned to service '{key}' yet")
            return VipAllocation(False, needs_update, updated)

        if set_annotation(updated, Annotation.ASSIGNED_VIP, address):
            logger.info(f"vip '{address}' assigned to service '{key}'")
            needs_update = True

        return VipAllocation(True, needs_update, updated)
